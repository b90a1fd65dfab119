"""Loan window resolution: start/end dates and historical classification"""

from datetime import timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from prestamos_gateway.domain.models import LoanWindow, StartDatePolicy
from prestamos_gateway.utils.date_utils import Clock, reference_zone, today_in


def resolve_window(
    policy: StartDatePolicy,
    term_days: int,
    clock: Optional[Clock] = None,
    tz: Optional[ZoneInfo] = None,
) -> LoanWindow:
    """
    Resolve the dates a loan runs over.

    - Automatic policy starts tomorrow (reference timezone)
    - Explicit policy starts on the given date, unshifted
    - End date is inclusive: start + (term_days - 1)
    - Historical when the end date is strictly before today; ending today is not historical

    Args:
        policy: Start date policy
        term_days: Length of the loan in days
        clock: Source of "now" (default: system clock)
        tz: Reference timezone (default: settings.reference_timezone)
    """
    tz = tz or reference_zone()
    today = today_in(tz, clock)

    if policy.explicit is not None:
        start_date = policy.explicit
    else:
        start_date = today + timedelta(days=1)

    end_date = start_date + timedelta(days=term_days - 1)

    return LoanWindow(
        start_date=start_date,
        end_date=end_date,
        is_historical=end_date < today,
    )
