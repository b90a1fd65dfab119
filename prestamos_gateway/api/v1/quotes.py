"""POST /v1/loan-terms/quote - Preview a loan's repayment schedule and dates"""

from fastapi import APIRouter, Depends, HTTPException

from prestamos_gateway.api.dependencies import get_clock
from prestamos_gateway.api.v1.schemas import QuoteRequest, QuoteResponse
from prestamos_gateway.domain.dates import resolve_window
from prestamos_gateway.domain.exceptions import ValidationError
from prestamos_gateway.domain.models import StartDatePolicy, TermCode
from prestamos_gateway.domain.terms import compute_schedule
from prestamos_gateway.utils.date_utils import Clock

router = APIRouter()


@router.post("/loan-terms/quote", response_model=QuoteResponse)
def quote_loan_terms(request_body: QuoteRequest, clock: Clock = Depends(get_clock)):
    """
    Compute what a loan would look like without creating anything.

    `billed_payment` is the amount stored on the loan: the weekly payment
    for four-week terms, the daily payment otherwise.
    """
    term = TermCode(request_body.term)
    try:
        schedule = compute_schedule(request_body.amount, term)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    policy = StartDatePolicy.on(request_body.start_date) if request_body.start_date else StartDatePolicy.automatic()
    window = resolve_window(policy, term.days, clock=clock)

    return QuoteResponse(
        amount=request_body.amount,
        term=term.days,
        total_interest=schedule.total_interest,
        total_payment=schedule.total_payment,
        daily_payment=schedule.daily_payment,
        weekly_payment=schedule.weekly_payment,
        interest_rate=schedule.interest_rate,
        fine_per_day=schedule.fine_per_day,
        weekly_fine=schedule.weekly_fine,
        billed_payment=schedule.weekly_payment if term.is_four_weeks else schedule.daily_payment,
        start_date=window.start_date,
        end_date=window.end_date,
        is_historical=window.is_historical,
    )
