"""GET /v1/registrations/history - Recent bulk registration outcomes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from prestamos_gateway.api.v1.schemas import HistoryResponse, HistoryItem
from prestamos_gateway.infrastructure.database.session import get_db
from prestamos_gateway.infrastructure.database.repositories import RegistrationRunRepository

router = APIRouter()


@router.get("/registrations/history", response_model=HistoryResponse)
def get_registration_history(
    admin_email: Optional[str] = Query(None, description="Only runs for this admin email"),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent registration runs.

    Aborted runs show how many records were created before the failure;
    those records still exist in the admin panel.
    """
    runs = RegistrationRunRepository(db).get_recent(admin_email=admin_email, limit=limit)

    return HistoryResponse(
        registrations=[
            HistoryItem(
                registration_id=str(run.id),
                admin_email=run.admin_email,
                outcome=run.outcome,
                workers_created=run.workers_created,
                clients_created=run.clients_created,
                loans_created=run.loans_created,
                failed_step=run.failed_step,
                error_category=run.error_category,
                created_at=run.created_at.isoformat(),
            )
            for run in runs
        ]
    )
