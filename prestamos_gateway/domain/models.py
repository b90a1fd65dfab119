"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import List, Optional, Tuple, Union

from prestamos_gateway.domain.exceptions import ValidationError


class TermCode(IntEnum):
    """Repayment term (plazo) in days; 28 is four weeks billed weekly"""

    DAYS_15 = 15
    DAYS_20 = 20
    DAYS_23 = 23
    FOUR_WEEKS = 28

    @classmethod
    def parse(cls, value: Union[str, int]) -> "TermCode":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid term {value!r}, expected one of 15, 20, 23, 28") from None

    @property
    def days(self) -> int:
        return int(self)

    @property
    def is_four_weeks(self) -> bool:
        return self is TermCode.FOUR_WEEKS


@dataclass(frozen=True)
class RepaymentSchedule:
    """Output of the terms calculator"""

    total_interest: float
    total_payment: float
    daily_payment: float
    weekly_payment: float
    interest_rate: float  # decimal fraction, 0.38 == 38%
    fine_per_day: int
    weekly_fine: int


@dataclass(frozen=True)
class StartDatePolicy:
    """Explicit start date, or `None` for automatic (tomorrow)"""

    explicit: Optional[date] = None

    @classmethod
    def automatic(cls) -> "StartDatePolicy":
        return cls()

    @classmethod
    def on(cls, start: date) -> "StartDatePolicy":
        return cls(explicit=start)


@dataclass(frozen=True)
class LoanWindow:
    """Resolved loan dates in the reference timezone"""

    start_date: date
    end_date: date
    is_historical: bool


# Intent tree: records to create, parent IDs still unresolved (0)


@dataclass(frozen=True)
class AdminIntent:
    name: str
    email: str
    password: str
    role: str = "admin"


@dataclass(frozen=True)
class LoanIntent:
    amount: float
    interest_rate: float
    start_date: date
    end_date: date
    daily_payment: float  # weekly payment for four-week terms
    is_manual_entry: bool
    is_four_week_term: bool
    notes: str = ""
    status: str = "activo"
    cliente_id: int = 0
    trabajador_id: int = 0


@dataclass(frozen=True)
class ClientIntent:
    name: str
    phone: str
    address: str
    occupation: str
    loan: LoanIntent
    trabajador_id: int = 0


@dataclass(frozen=True)
class WorkerIntent:
    name: str
    email: str
    phone: str
    password: str
    clients: Tuple[ClientIntent, ...] = ()
    status: str = "active"
    usuario_id: int = 0


@dataclass(frozen=True)
class IntentTree:
    admin: AdminIntent
    workers: Tuple[WorkerIntent, ...]

    @property
    def total_clients(self) -> int:
        return sum(len(w.clients) for w in self.workers)


# Records as persisted by the admin panel


@dataclass
class PersistedAdmin:
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class PersistedWorker:
    id: int
    name: str
    email: str
    phone: str
    usuario_id: int
    status: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class PersistedClient:
    id: int
    name: str
    phone: str
    trabajador_id: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class PersistedLoan:
    id: int
    cliente_id: int
    trabajador_id: int
    amount: float
    start_date: str
    end_date: str
    daily_payment: float
    is_manual_entry: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class ClientResult:
    client: PersistedClient
    loan: PersistedLoan


@dataclass
class WorkerResult:
    worker: PersistedWorker
    clients: List[ClientResult] = field(default_factory=list)


@dataclass
class ResultTree:
    """Persisted hierarchy, same shape and order as the intent tree"""

    admin: PersistedAdmin
    workers: List[WorkerResult] = field(default_factory=list)

    @property
    def total_clients(self) -> int:
        return sum(len(w.clients) for w in self.workers)

    @property
    def total_loans(self) -> int:
        return self.total_clients


class StepKind(str, Enum):
    ADMIN = "admin"
    WORKER = "worker"
    CLIENT = "client"
    LOAN = "loan"


@dataclass(frozen=True)
class Step:
    """One pending creation call in the registration walk"""

    kind: StepKind
    worker_index: Optional[int] = None
    client_index: Optional[int] = None

    def describe(self) -> str:
        if self.kind is StepKind.ADMIN:
            return "admin"
        if self.kind is StepKind.WORKER:
            return f"worker {self.worker_index + 1}"
        return f"{self.kind.value} {self.client_index + 1} of worker {self.worker_index + 1}"


def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


@dataclass
class RegistrationProgress:
    """Records successfully created so far"""

    admins: int = 0
    workers: int = 0
    clients: int = 0
    loans: int = 0

    @property
    def total_created(self) -> int:
        return self.admins + self.workers + self.clients + self.loans

    def record(self, kind: StepKind) -> None:
        if kind is StepKind.ADMIN:
            self.admins += 1
        elif kind is StepKind.WORKER:
            self.workers += 1
        elif kind is StepKind.CLIENT:
            self.clients += 1
        else:
            self.loans += 1

    def describe(self) -> str:
        if self.admins == 0:
            return "no records created"
        return (
            f"{_count(self.workers, 'worker')}, {_count(self.clients, 'client')}, "
            f"{_count(self.loans, 'loan')} created"
        )

    def as_dict(self) -> dict:
        return {
            "admins": self.admins,
            "workers": self.workers,
            "clients": self.clients,
            "loans": self.loans,
        }
