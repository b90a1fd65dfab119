"""Data access layer for the registration audit trail"""

from typing import List, Optional
from sqlalchemy.orm import Session
from prestamos_gateway.infrastructure.database.models import RegistrationRun
from prestamos_gateway.domain.models import RegistrationProgress, ResultTree


def created_ids(result: ResultTree) -> dict:
    """IDs assigned by the admin panel, nested like the result tree"""
    return {
        "admin": result.admin.id,
        "workers": [
            {
                "id": w.worker.id,
                "clients": [{"id": c.client.id, "loan_id": c.loan.id} for c in w.clients],
            }
            for w in result.workers
        ],
    }


class RegistrationRunRepository:
    """Repository for registration runs"""

    def __init__(self, db: Session):
        self.db = db

    def record_success(self, request_id: str, result: ResultTree) -> RegistrationRun:
        """Persist a fully completed registration"""
        run = RegistrationRun(
            request_id=request_id,
            admin_email=result.admin.email,
            outcome="completed",
            admin_id=result.admin.id,
            workers_created=len(result.workers),
            clients_created=result.total_clients,
            loans_created=result.total_loans,
            created_ids=created_ids(result),
        )
        self.db.add(run)
        self.db.flush()  # Get ID without committing
        return run

    def record_failure(
        self,
        request_id: str,
        admin_email: str,
        outcome: str,
        error_category: str,
        error_message: str,
        progress: Optional[RegistrationProgress] = None,
        failed_step: Optional[str] = None,
    ) -> RegistrationRun:
        """Persist a rejected or aborted registration with its partial progress"""
        progress = progress or RegistrationProgress()
        run = RegistrationRun(
            request_id=request_id,
            admin_email=admin_email,
            outcome=outcome,
            workers_created=progress.workers,
            clients_created=progress.clients,
            loans_created=progress.loans,
            failed_step=failed_step,
            error_category=error_category,
            error_message=error_message,
        )
        self.db.add(run)
        self.db.flush()
        return run

    def get_recent(self, admin_email: Optional[str] = None, limit: int = 20) -> List[RegistrationRun]:
        """Fetch recent runs, optionally for one admin email"""
        query = self.db.query(RegistrationRun)
        if admin_email:
            query = query.filter(RegistrationRun.admin_email == admin_email)
        return query.order_by(RegistrationRun.created_at.desc()).limit(limit).all()
