"""Bulk registration plan builder: raw submission → intent tree"""

from typing import Any, Mapping, Optional
from zoneinfo import ZoneInfo

from prestamos_gateway.domain.dates import resolve_window
from prestamos_gateway.domain.exceptions import ValidationError
from prestamos_gateway.domain.models import (
    AdminIntent,
    ClientIntent,
    IntentTree,
    LoanIntent,
    StartDatePolicy,
    TermCode,
    WorkerIntent,
)
from prestamos_gateway.domain.terms import compute_schedule
from prestamos_gateway.utils.date_utils import Clock, parse_iso_date, reference_zone


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _start_policy(loan: Mapping[str, Any]) -> StartDatePolicy:
    custom = _text(loan.get("custom_start_date"))
    if not loan.get("use_custom_start_date") or not custom:
        return StartDatePolicy.automatic()
    try:
        return StartDatePolicy.on(parse_iso_date(custom))
    except ValueError:
        raise ValidationError(f"Invalid start date {custom!r}, expected YYYY-MM-DD") from None


def build_loan(loan: Mapping[str, Any], clock: Optional[Clock] = None, tz: Optional[ZoneInfo] = None) -> LoanIntent:
    """Resolve schedule and dates for one loan; parent IDs stay at 0"""
    term = TermCode.parse(loan["term"])
    amount = float(loan["amount"])

    schedule = compute_schedule(amount, term)
    window = resolve_window(_start_policy(loan), term.days, clock=clock, tz=tz)

    return LoanIntent(
        amount=amount,
        interest_rate=schedule.interest_rate,
        start_date=window.start_date,
        end_date=window.end_date,
        daily_payment=schedule.weekly_payment if term.is_four_weeks else schedule.daily_payment,
        is_manual_entry=window.is_historical,
        is_four_week_term=term.is_four_weeks,
        notes=_text(loan.get("notes")),
    )


def build_plan(raw: Mapping[str, Any], clock: Optional[Clock] = None, tz: Optional[ZoneInfo] = None) -> IntentTree:
    """
    Turn a raw bulk submission into an immutable intent tree.

    Emails are checked here even when the caller already validated the
    payload; nothing reaches the admin panel if any of them is blank.

    Raises:
        ValidationError: Blank admin/worker email, unknown term, bad start date or missing field
    """
    tz = tz or reference_zone()

    try:
        admin_raw = raw["admin"]
        if not _text(admin_raw.get("email")):
            raise ValidationError("Admin email is required")

        for i, worker_raw in enumerate(raw["workers"]):
            if not _text(worker_raw.get("email")):
                name = _text(worker_raw.get("name")) or "unnamed"
                raise ValidationError(f"Email of worker {i + 1} ({name}) is required")

        admin = AdminIntent(
            name=_text(admin_raw["name"]),
            email=_text(admin_raw["email"]),
            password=admin_raw["password"],
        )

        workers = tuple(
            WorkerIntent(
                name=_text(worker_raw["name"]),
                email=_text(worker_raw["email"]),
                phone=_text(worker_raw["phone"]),
                password=worker_raw["password"],
                clients=tuple(
                    ClientIntent(
                        name=_text(client_raw["name"]),
                        phone=_text(client_raw["phone"]),
                        address=_text(client_raw["address"]),
                        occupation=_text(client_raw["occupation"]),
                        loan=build_loan(client_raw["loan"], clock=clock, tz=tz),
                    )
                    for client_raw in worker_raw.get("clients", [])
                ),
            )
            for worker_raw in raw["workers"]
        )

    except KeyError as e:
        raise ValidationError(f"Missing required field: {e.args[0]}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Malformed submission: {e}") from e

    return IntentTree(admin=admin, workers=workers)
