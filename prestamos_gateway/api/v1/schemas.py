"""Pydantic schemas for API request/response validation"""

from pydantic import AfterValidator, BaseModel, EmailStr, Field
from datetime import date
from typing import Annotated, Dict, List, Optional

from prestamos_gateway.domain.models import TermCode
from prestamos_gateway.domain.terms import MAX_PRINCIPAL


def _check_term(value: int) -> int:
    if value not in {t.value for t in TermCode}:
        raise ValueError("term must be one of 15, 20, 23, 28")
    return value


Term = Annotated[int, AfterValidator(_check_term)]


class AdminInput(BaseModel):
    """Administrator to create"""

    name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoanInput(BaseModel):
    """Loan requested for a client"""

    amount: float = Field(..., ge=1000, le=MAX_PRINCIPAL, allow_inf_nan=False, description="Principal, minimum $1,000")
    term: Term = Field(..., description="Term code: 15, 20, 23 days or 28 (four weeks)")
    notes: Optional[str] = ""
    use_custom_start_date: bool = False
    custom_start_date: Optional[str] = Field(None, description="YYYY-MM-DD, used when use_custom_start_date is set")


class ClientInput(BaseModel):
    name: str = Field(..., min_length=2)
    phone: str = Field(..., min_length=10)
    address: str = Field(..., min_length=1)
    occupation: str = Field(..., min_length=2)
    loan: LoanInput


class WorkerInput(BaseModel):
    name: str = Field(..., min_length=2)
    email: EmailStr
    phone: str = Field(..., min_length=10)
    password: str = Field(..., min_length=6)
    clients: List[ClientInput] = Field(default_factory=list)


class BulkRegistrationRequest(BaseModel):
    """Request body for POST /v1/registrations"""

    admin: AdminInput
    workers: List[WorkerInput] = Field(..., min_length=1, description="At least one worker")


class AdminSummary(BaseModel):
    id: int
    name: str
    email: str


class WorkerSummary(BaseModel):
    id: int
    name: str
    clients_created: int
    client_ids: List[int]
    loan_ids: List[int]


class RegistrationResponse(BaseModel):
    """Response for POST /v1/registrations"""

    registration_id: str
    admin: AdminSummary
    workers_created: int
    total_clients: int
    total_loans: int
    workers: List[WorkerSummary]


class RegistrationFailure(BaseModel):
    """Error detail for a failed registration"""

    category: str
    title: str
    message: str
    partial_records_possible: bool
    progress: Optional[Dict[str, int]] = None


class QuoteRequest(BaseModel):
    """Request body for POST /v1/loan-terms/quote"""

    amount: float = Field(..., gt=0, le=MAX_PRINCIPAL, allow_inf_nan=False)
    term: Term
    start_date: Optional[date] = Field(None, description="Explicit start date; tomorrow when omitted")


class QuoteResponse(BaseModel):
    """Repayment schedule and dates for one loan"""

    amount: float
    term: int
    total_interest: float
    total_payment: float
    daily_payment: float
    weekly_payment: float
    interest_rate: float
    fine_per_day: int
    weekly_fine: int
    billed_payment: float
    start_date: date
    end_date: date
    is_historical: bool


class HistoryItem(BaseModel):
    """Single registration in history"""

    registration_id: str
    admin_email: str
    outcome: str
    workers_created: int
    clients_created: int
    loans_created: int
    failed_step: Optional[str] = None
    error_category: Optional[str] = None
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/registrations/history"""

    registrations: List[HistoryItem]
