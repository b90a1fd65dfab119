"""Pytest fixtures for testing"""

import pytest
from datetime import datetime
from typing import Any, Callable, Dict, Generator, List, Optional, Tuple
from zoneinfo import ZoneInfo
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from prestamos_gateway.api.main import create_app
from prestamos_gateway.api.dependencies import get_clock, get_record_creator
from prestamos_gateway.infrastructure.database.models import Base
from prestamos_gateway.infrastructure.database.session import get_db
from prestamos_gateway.domain.models import (
    AdminIntent,
    ClientIntent,
    LoanIntent,
    PersistedAdmin,
    PersistedClient,
    PersistedLoan,
    PersistedWorker,
    WorkerIntent,
)


MEXICO_CITY = ZoneInfo("America/Mexico_City")

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRecordCreator:
    """
    In-memory RecordCreator that records every call.

    `fail_on` maps a call label such as "client(0,1)" to the exception to raise.
    """

    def __init__(self, fail_on: Optional[Dict[str, Exception]] = None):
        self.fail_on = fail_on or {}
        self.calls: List[str] = []
        self.payloads: List[Tuple[str, Any]] = []
        self._next_id = 100
        self._workers = -1
        self._clients = -1

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _call(self, label: str, payload: Any) -> None:
        self.calls.append(label)
        self.payloads.append((label, payload))
        if label in self.fail_on:
            raise self.fail_on[label]

    def create_admin(self, admin: AdminIntent) -> PersistedAdmin:
        # Labels restart with every submission
        self._workers = -1
        self._call("admin", admin)
        return PersistedAdmin(id=self._id(), name=admin.name, email=admin.email, role=admin.role)

    def create_worker(self, worker: WorkerIntent) -> PersistedWorker:
        self._workers += 1
        self._clients = -1
        self._call(f"worker({self._workers})", worker)
        return PersistedWorker(
            id=self._id(), name=worker.name, email=worker.email, phone=worker.phone, usuario_id=worker.usuario_id
        )

    def create_client(self, client: ClientIntent) -> PersistedClient:
        self._clients += 1
        self._call(f"client({self._workers},{self._clients})", client)
        return PersistedClient(id=self._id(), name=client.name, phone=client.phone, trabajador_id=client.trabajador_id)

    def create_loan(self, loan: LoanIntent) -> PersistedLoan:
        self._call(f"loan({self._workers},{self._clients})", loan)
        return PersistedLoan(
            id=self._id(),
            cliente_id=loan.cliente_id,
            trabajador_id=loan.trabajador_id,
            amount=loan.amount,
            start_date=loan.start_date.isoformat(),
            end_date=loan.end_date.isoformat(),
            daily_payment=loan.daily_payment,
            is_manual_entry=loan.is_manual_entry,
        )


def fixed_clock(year: int, month: int, day: int, hour: int = 12) -> Callable[[], datetime]:
    """Clock frozen at the given local time in Mexico City"""
    now = datetime(year, month, day, hour, tzinfo=MEXICO_CITY)
    return lambda: now


def make_client(name: str = "Cliente Uno", amount: float = 1000, term: int = 15, **loan: Any) -> Dict[str, Any]:
    return {
        "name": name,
        "phone": "5512345678",
        "address": "Calle 1 #23",
        "occupation": "Comerciante",
        "loan": {"amount": amount, "term": term, "notes": "", **loan},
    }


def make_worker(name: str, email: str, clients: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "name": name,
        "email": email,
        "phone": "5587654321",
        "password": "secret123",
        "clients": clients,
    }


def make_submission(clients_per_worker: Tuple[int, ...] = (2, 1)) -> Dict[str, Any]:
    """Raw submission with one worker per entry, each with that many clients"""
    return {
        "admin": {"name": "Ana Admin", "email": "ana@example.com", "password": "secret123"},
        "workers": [
            make_worker(
                f"Trabajador {i + 1}",
                f"worker{i + 1}@example.com",
                [make_client(f"Cliente {i + 1}-{j + 1}", amount=1000 * (j + 1)) for j in range(n)],
            )
            for i, n in enumerate(clients_per_worker)
        ],
    }


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return fixed_clock(2024, 1, 10)


@pytest.fixture
def creator() -> FakeRecordCreator:
    return FakeRecordCreator()


@pytest.fixture
def submission() -> Dict[str, Any]:
    return make_submission()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session, creator: FakeRecordCreator, clock) -> TestClient:
    """Create FastAPI test client with test database and fake admin panel"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_record_creator] = lambda: creator
    app.dependency_overrides[get_clock] = lambda: clock
    return TestClient(app)
