"""POST /v1/registrations - Bulk admin/worker/client/loan registration endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from prestamos_gateway.api.v1.schemas import (
    AdminSummary,
    BulkRegistrationRequest,
    RegistrationFailure,
    RegistrationResponse,
    WorkerSummary,
)
from prestamos_gateway.api.dependencies import get_clock, get_record_creator, get_request_id
from prestamos_gateway.infrastructure.database.session import get_db
from prestamos_gateway.infrastructure.database.repositories import RegistrationRunRepository
from prestamos_gateway.domain.exceptions import RegistrationAbortedError, ValidationError
from prestamos_gateway.domain.failures import ErrorCategory, describe_failure
from prestamos_gateway.domain.models import RegistrationProgress, ResultTree
from prestamos_gateway.domain.orchestrator import BulkRegistrationOrchestrator, RecordCreator
from prestamos_gateway.domain.plan import build_plan
from prestamos_gateway.infrastructure.observability.metrics import record_registration
from prestamos_gateway.infrastructure.observability.logging import log_registration
from prestamos_gateway.utils.date_utils import Clock

router = APIRouter()

FAILURE_STATUS = {
    ErrorCategory.DUPLICATE_EMAIL: 409,
    ErrorCategory.AUTHENTICATION: 502,
    ErrorCategory.VALIDATION: 422,
    ErrorCategory.NETWORK: 503,
    ErrorCategory.TIMEOUT: 504,
    ErrorCategory.UNKNOWN: 502,
}

_FAILURE_RESPONSES = {status: {"model": RegistrationFailure} for status in set(FAILURE_STATUS.values())}


def _summary(registration_id: str, result: ResultTree) -> RegistrationResponse:
    return RegistrationResponse(
        registration_id=registration_id,
        admin=AdminSummary(id=result.admin.id, name=result.admin.name, email=result.admin.email),
        workers_created=len(result.workers),
        total_clients=result.total_clients,
        total_loans=result.total_loans,
        workers=[
            WorkerSummary(
                id=w.worker.id,
                name=w.worker.name,
                clients_created=len(w.clients),
                client_ids=[c.client.id for c in w.clients],
                loan_ids=[c.loan.id for c in w.clients],
            )
            for w in result.workers
        ],
    )


@router.post("/registrations", response_model=RegistrationResponse, responses=_FAILURE_RESPONSES)
def create_registration(
    request_body: BulkRegistrationRequest,
    request: Request,
    db: Session = Depends(get_db),
    creator: RecordCreator = Depends(get_record_creator),
    clock: Clock = Depends(get_clock),
):
    """
    Create an admin, its workers, their clients and one loan per client.

    Flow:
    1. Build the intent tree (terms, dates, historical flag) - no network yet
    2. Create records one at a time, threading generated IDs to children
    3. Record the outcome in the audit table
    4. Return the created hierarchy, or a categorized failure with partial progress

    Records created before a failure are not rolled back.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    admin_email = request_body.admin.email
    repo = RegistrationRunRepository(db)

    try:
        plan = build_plan(request_body.model_dump(mode="json"), clock=clock)
        result = BulkRegistrationOrchestrator(creator).execute(plan)

    except (ValidationError, RegistrationAbortedError) as e:
        report = describe_failure(e)
        aborted = isinstance(e, RegistrationAbortedError)
        outcome = "aborted" if aborted else "rejected"
        progress = report.progress or RegistrationProgress()

        repo.record_failure(
            request_id=request_id,
            admin_email=admin_email,
            outcome=outcome,
            error_category=report.category.value,
            error_message=str(e),
            progress=progress,
            failed_step=e.step.describe() if aborted else None,
        )
        db.commit()

        record_registration(outcome, progress, category=report.category.value)
        log_registration(
            request_id, admin_email, outcome, progress, (time.time() - start_time) * 1000, report.category.value
        )
        if aborted:
            logging.error(f"Bulk registration aborted: {e}", extra={"request_id": request_id})
        else:
            logging.warning(f"Bulk registration rejected: {e}", extra={"request_id": request_id})

        status = 422 if not aborted else FAILURE_STATUS[report.category]
        raise HTTPException(status_code=status, detail=report.as_dict())

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    run = repo.record_success(request_id, result)
    db.commit()

    progress = RegistrationProgress(
        admins=1, workers=len(result.workers), clients=result.total_clients, loans=result.total_loans
    )
    record_registration("completed", progress)
    log_registration(request_id, admin_email, "completed", progress, (time.time() - start_time) * 1000)

    return _summary(str(run.id), result)
