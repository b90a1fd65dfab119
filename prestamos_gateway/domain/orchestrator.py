"""Sequential creation of the admin → workers → clients → loans hierarchy"""

import logging
from dataclasses import replace
from typing import List, Optional, Protocol

from prestamos_gateway.domain.exceptions import RegistrationAbortedError
from prestamos_gateway.domain.models import (
    AdminIntent,
    ClientIntent,
    ClientResult,
    IntentTree,
    LoanIntent,
    PersistedAdmin,
    PersistedClient,
    PersistedLoan,
    PersistedWorker,
    RegistrationProgress,
    ResultTree,
    Step,
    StepKind,
    WorkerIntent,
    WorkerResult,
)


class RecordCreator(Protocol):
    """Single-record creation operations offered by the admin panel"""

    def create_admin(self, admin: AdminIntent) -> PersistedAdmin: ...

    def create_worker(self, worker: WorkerIntent) -> PersistedWorker: ...

    def create_client(self, client: ClientIntent) -> PersistedClient: ...

    def create_loan(self, loan: LoanIntent) -> PersistedLoan: ...


def plan_steps(plan: IntentTree) -> List[Step]:
    """Flatten the intent tree into creation order: depth first, left to right"""
    steps = [Step(StepKind.ADMIN)]
    for i, worker in enumerate(plan.workers):
        steps.append(Step(StepKind.WORKER, worker_index=i))
        for j in range(len(worker.clients)):
            steps.append(Step(StepKind.CLIENT, worker_index=i, client_index=j))
            steps.append(Step(StepKind.LOAN, worker_index=i, client_index=j))
    return steps


class _Walk:
    """Mutable state of one execute() call"""

    def __init__(self):
        self.admin: Optional[PersistedAdmin] = None
        self.worker: Optional[WorkerResult] = None
        self.client: Optional[PersistedClient] = None
        self.workers: List[WorkerResult] = []
        self.progress = RegistrationProgress()


class BulkRegistrationOrchestrator:
    """
    Creates every record of an intent tree through a RecordCreator.

    One call in flight at a time; every level needs its parent's generated
    ID. The first failure stops the walk and is raised as
    RegistrationAbortedError. Nothing already created is retried or
    rolled back.
    """

    def __init__(self, creator: RecordCreator):
        self.creator = creator

    def execute(self, plan: IntentTree) -> ResultTree:
        walk = _Walk()
        steps = plan_steps(plan)

        logging.info(
            "Bulk registration started",
            extra={
                "step": "registration_start",
                "workers": len(plan.workers),
                "clients": plan.total_clients,
                "pending_steps": len(steps),
            },
        )

        for step in steps:
            try:
                self._run(step, plan, walk)
            except Exception as e:
                logging.error(
                    f"Bulk registration aborted at {step.describe()}: {e}",
                    extra={"step": step.kind.value, "progress": walk.progress.as_dict()},
                )
                raise RegistrationAbortedError(step, walk.progress, e) from e
            walk.progress.record(step.kind)

        logging.info(
            "Bulk registration completed",
            extra={"step": "registration_complete", "progress": walk.progress.as_dict()},
        )
        return ResultTree(admin=walk.admin, workers=walk.workers)

    def _run(self, step: Step, plan: IntentTree, walk: _Walk) -> None:
        if step.kind is StepKind.ADMIN:
            walk.admin = self.creator.create_admin(plan.admin)
            return

        worker_intent = plan.workers[step.worker_index]

        if step.kind is StepKind.WORKER:
            worker = self.creator.create_worker(replace(worker_intent, usuario_id=walk.admin.id))
            walk.worker = WorkerResult(worker=worker)
            walk.workers.append(walk.worker)
            logging.info(
                f"Worker {worker.name} created",
                extra={"step": "worker_created", "worker_id": worker.id, "worker_index": step.worker_index},
            )
            return

        client_intent = worker_intent.clients[step.client_index]
        worker_id = walk.worker.worker.id

        if step.kind is StepKind.CLIENT:
            walk.client = self.creator.create_client(replace(client_intent, trabajador_id=worker_id))
            return

        loan = self.creator.create_loan(
            replace(client_intent.loan, cliente_id=walk.client.id, trabajador_id=worker_id)
        )
        walk.worker.clients.append(ClientResult(client=walk.client, loan=loan))
        logging.info(
            f"Loan of {loan.amount} created for client {walk.client.name}",
            extra={
                "step": "loan_created",
                "loan_id": loan.id,
                "client_id": walk.client.id,
                "historical": loan.is_manual_entry,
            },
        )
