"""Admin panel HTTP client: single-record creation endpoints"""

import httpx
from typing import Any, Dict, Tuple
from prestamos_gateway.config import settings
from prestamos_gateway.domain.exceptions import RemoteError, TransportError
from prestamos_gateway.domain.failures import categorize
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
from prestamos_gateway.infrastructure.observability.metrics import (
    remote_create_failures_counter,
    remote_create_latency_histogram,
)


class AdminPanelClient:
    """
    RecordCreator backed by the admin panel REST API.

    Only connection failures are retried (by the transport); a request
    that reached the server is never re-sent, creation is not idempotent.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.base_url = base_url or settings.admin_panel_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.http_client = http_client or httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=httpx.HTTPTransport(retries=settings.http_connect_retries),
            headers={"Content-Type": "application/json"},
        )

    def close(self) -> None:
        self.http_client.close()

    def _post(self, entity: str, path: str, payload: Dict[str, Any], envelope: str) -> Tuple[int, Dict[str, Any]]:
        """
        POST one record and unwrap the created entity from its envelope.

        Returns the response status code along with the entity data.

        Raises:
            TransportError: On timeout or connection failure
            RemoteError: On HTTP errors or an unexpected response body
        """
        step = f"create_{entity}"
        try:
            with remote_create_latency_histogram.labels(entity=entity).time():
                response = self.http_client.post(path, json=payload)
        except httpx.TimeoutException as e:
            raise _failed(entity, TransportError(step, f"Admin panel timeout after {self.timeout}s", timeout=True)) from e
        except httpx.RequestError as e:
            raise _failed(entity, TransportError(step, f"Network Error: {e}")) from e

        if response.is_error:
            raise _failed(entity, _remote_error(step, response))

        try:
            return response.status_code, response.json()[envelope]
        except (KeyError, ValueError, TypeError) as e:
            raise _failed(
                entity, RemoteError(step, response.status_code, f"Invalid {entity} response from admin panel: {e}")
            ) from e

    def create_admin(self, admin: AdminIntent) -> PersistedAdmin:
        status, data = self._post(
            "admin",
            "/admin",
            {
                "nombre": admin.name,
                "email": admin.email,
                "password": admin.password,
                "role": admin.role,
            },
            envelope="user",
        )
        return _parse(
            "admin",
            status,
            lambda: PersistedAdmin(
                id=data["id"],
                name=data["nombre"],
                email=data["email"],
                role=data.get("role", admin.role),
                created_at=data.get("created_at"),
                updated_at=data.get("updated_at"),
            ),
        )

    def create_worker(self, worker: WorkerIntent) -> PersistedWorker:
        status, data = self._post(
            "worker",
            "/trabajador",
            {
                "nombre": worker.name,
                "email": worker.email,
                "phone": worker.phone,
                "password": worker.password,
                "status": worker.status,
                "usuario_id": worker.usuario_id,
            },
            envelope="trabajador",
        )
        return _parse(
            "worker",
            status,
            lambda: PersistedWorker(
                id=data["id"],
                name=data["nombre"],
                email=data["email"],
                phone=data.get("phone", worker.phone),
                usuario_id=data.get("usuario_id", worker.usuario_id),
                status=data.get("status"),
                created_at=data.get("created_at"),
                updated_at=data.get("updated_at"),
            ),
        )

    def create_client(self, client: ClientIntent) -> PersistedClient:
        status, data = self._post(
            "client",
            "/cliente",
            {
                "nombre": client.name,
                "telefono": client.phone,
                "direccion": client.address,
                "ocupacion": client.occupation,
                "trabajador_id": client.trabajador_id,
            },
            envelope="client",
        )
        return _parse(
            "client",
            status,
            lambda: PersistedClient(
                id=data["id"],
                name=data["nombre"],
                phone=data.get("telefono", client.phone),
                trabajador_id=data.get("trabajador_id", client.trabajador_id),
                created_at=data.get("created_at"),
                updated_at=data.get("updated_at"),
            ),
        )

    def create_loan(self, loan: LoanIntent) -> PersistedLoan:
        status, data = self._post(
            "loan",
            "/prestamo",
            {
                "cliente_id": loan.cliente_id,
                "trabajador_id": loan.trabajador_id,
                "monto": loan.amount,
                "interes": loan.interest_rate,
                "fecha_inicio": loan.start_date.isoformat(),
                "fecha_fin": loan.end_date.isoformat(),
                "pago_diario": loan.daily_payment,
                "observaciones": loan.notes,
                "es_registro_manual": loan.is_manual_entry,
                "estado": loan.status,
                "plazo_cuatro_semanas": loan.is_four_week_term,
            },
            envelope="loan",
        )
        return _parse(
            "loan",
            status,
            lambda: PersistedLoan(
                id=data["id"],
                cliente_id=data["cliente_id"],
                trabajador_id=data["trabajador_id"],
                amount=data["monto"],
                start_date=data["fecha_inicio"],
                end_date=data["fecha_fin"],
                daily_payment=data["pago_diario"],
                is_manual_entry=data.get("es_registro_manual", loan.is_manual_entry),
                created_at=data.get("created_at"),
                updated_at=data.get("updated_at"),
            ),
        )


def _parse(entity: str, status_code: int, build):
    """Build the persisted record, reporting a malformed success body as a RemoteError"""
    try:
        return build()
    except (KeyError, TypeError) as e:
        raise _failed(
            entity, RemoteError(f"create_{entity}", status_code, f"Invalid {entity} data from admin panel: {e}")
        ) from e


def _failed(entity: str, error: Exception) -> Exception:
    """Count a failed creation call under its error category"""
    remote_create_failures_counter.labels(entity=entity, category=categorize(error).value).inc()
    return error


def _remote_error(step: str, response: httpx.Response) -> RemoteError:
    """Build a RemoteError from an error response, JSON body or not"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        return RemoteError(step, response.status_code, response.text or response.reason_phrase)

    error = body.get("error") or body.get("detail") or response.reason_phrase
    details = body.get("details") or body.get("message")
    return RemoteError(
        step,
        response.status_code,
        str(error),
        details=str(details) if details else None,
        category=body.get("category"),
    )
