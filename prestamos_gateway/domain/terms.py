"""Loan terms calculator: repayment schedule for a principal and a term"""

import math

from prestamos_gateway.domain.exceptions import ValidationError
from prestamos_gateway.domain.models import RepaymentSchedule, TermCode

# Daily payment owed per $1,000 borrowed
DAILY_PAYMENT_PER_THOUSAND = {
    TermCode.DAYS_15: 92,
    TermCode.DAYS_20: 65,
    TermCode.DAYS_23: 60,
}

# Four-week term is billed weekly with its own constants
WEEKLY_PAYMENT_PER_THOUSAND = 350
WEEKLY_FINE_PER_THOUSAND = 120
WEEKS_IN_FOUR_WEEK_TERM = 4

DAILY_FINE_PER_THOUSAND = 20

# Largest principal accepted; keeps every scaled intermediate finite
MAX_PRINCIPAL = 100_000_000

ZERO_SCHEDULE = RepaymentSchedule(
    total_interest=0.0,
    total_payment=0.0,
    daily_payment=0.0,
    weekly_payment=0.0,
    interest_rate=0.0,
    fine_per_day=0,
    weekly_fine=0,
)


def _round_half_up(value: float, places: int = 0) -> float:
    """Round half toward +infinity, the way the established formula rounds"""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def _money(value: float) -> float:
    return _round_half_up(value, 2)


def _rate(value: float) -> float:
    return _round_half_up(value, 4)


def _fine(value: float) -> int:
    return int(_round_half_up(value))


def compute_schedule(principal: float, term: TermCode) -> RepaymentSchedule:
    """
    Compute the repayment schedule for a loan.

    Rounding is applied once to each final value: money to 2 decimals,
    interest rate to 4 decimals, fines to whole units.

    Args:
        principal: Amount borrowed
        term: Repayment term code

    Returns:
        RepaymentSchedule; the all-zero schedule when principal <= 0

    Raises:
        ValidationError: Principal is NaN, infinite or above MAX_PRINCIPAL

    Example:
        $1,000 over 15 days → 92/day, 1,380 total, 380 interest (0.38)
    """
    if not math.isfinite(principal) or principal > MAX_PRINCIPAL:
        raise ValidationError(f"Invalid principal {principal!r}, must be at most {MAX_PRINCIPAL:,}")

    if principal <= 0:
        return ZERO_SCHEDULE

    blocks = principal / 1000

    if term is TermCode.FOUR_WEEKS:
        weekly_payment = blocks * WEEKLY_PAYMENT_PER_THOUSAND
        total_payment = weekly_payment * WEEKS_IN_FOUR_WEEK_TERM
        total_interest = total_payment - principal
        weekly_fine = blocks * WEEKLY_FINE_PER_THOUSAND

        # Daily figures are display-only here, billing is weekly
        return RepaymentSchedule(
            total_interest=_money(total_interest),
            total_payment=_money(total_payment),
            daily_payment=_money(total_payment / term.days),
            weekly_payment=_money(weekly_payment),
            interest_rate=_rate(total_interest / principal),
            fine_per_day=_fine(weekly_fine / 7),
            weekly_fine=_fine(weekly_fine),
        )

    daily_payment = blocks * DAILY_PAYMENT_PER_THOUSAND[term]
    total_payment = daily_payment * term.days
    total_interest = total_payment - principal
    fine_per_day = _fine(principal / 1000 * DAILY_FINE_PER_THOUSAND)

    return RepaymentSchedule(
        total_interest=_money(total_interest),
        total_payment=_money(total_payment),
        daily_payment=_money(daily_payment),
        weekly_payment=_money(daily_payment * 7),
        interest_rate=_rate(total_interest / principal),
        fine_per_day=fine_per_day,
        weekly_fine=_fine(fine_per_day * 7),
    )
