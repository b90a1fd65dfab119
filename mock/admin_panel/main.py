from datetime import datetime, timezone
from itertools import count
from typing import Any, Dict

from fastapi import APIRouter, FastAPI
from fastapi.responses import JSONResponse

app = FastAPI(title="Mock Admin Panel", version="1.0.0")
router = APIRouter(prefix="/admin-panel")

# In-memory store, reset with POST /admin-panel/reset
_ids = count(1)
_store: Dict[str, Dict[int, Dict[str, Any]]] = {"users": {}, "trabajadores": {}, "clients": {}, "loans": {}}


def _error(status: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": error, "details": details})


def _save(table: str, body: Dict[str, Any]) -> Dict[str, Any]:
    now = datetime.now(timezone.utc).isoformat()
    record = {**body, "id": next(_ids), "created_at": now, "updated_at": now}
    record.pop("password", None)
    _store[table][record["id"]] = record
    return record


def _email_taken(email: str) -> bool:
    return any(r["email"] == email for t in ("users", "trabajadores") for r in _store[t].values())


@app.get("/health")
def health(): return {"status": "ok"}


@router.post("/reset")
def reset():
    global _ids
    _ids = count(1)
    for table in _store.values():
        table.clear()
    return {"status": "ok"}


@router.post("/admin", status_code=201)
def create_admin(body: Dict[str, Any]):
    if not body.get("email"):
        return _error(400, "Email requerido", "El email del administrador es requerido")
    if _email_taken(body["email"]):
        return _error(400, "Email ya registrado", f"{body['email']} already exists")
    return {"user": _save("users", body)}


@router.post("/trabajador", status_code=201)
def create_trabajador(body: Dict[str, Any]):
    if body.get("usuario_id") not in _store["users"]:
        return _error(400, "Error de validación", "usuario_id no existe")
    if _email_taken(body.get("email", "")):
        return _error(400, "Email ya registrado", f"{body.get('email')} already exists")
    return {"trabajador": _save("trabajadores", body)}


@router.post("/cliente", status_code=201)
def create_cliente(body: Dict[str, Any]):
    if body.get("trabajador_id") not in _store["trabajadores"]:
        return _error(400, "Error de validación", "trabajador_id no existe")
    return {"client": _save("clients", body)}


@router.post("/prestamo", status_code=201)
def create_prestamo(body: Dict[str, Any]):
    if body.get("cliente_id") not in _store["clients"]:
        return _error(400, "Error de validación", "cliente_id no existe")
    if body.get("trabajador_id") not in _store["trabajadores"]:
        return _error(400, "Error de validación", "trabajador_id no existe")
    return {"loan": _save("loans", body)}


app.include_router(router)
