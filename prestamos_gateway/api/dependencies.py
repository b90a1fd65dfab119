"""Dependency injection for FastAPI endpoints"""

from typing import Iterator
from fastapi import Request
from prestamos_gateway.domain.orchestrator import RecordCreator
from prestamos_gateway.infrastructure.clients.admin_panel import AdminPanelClient
from prestamos_gateway.utils.date_utils import Clock, system_clock


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_record_creator() -> Iterator[RecordCreator]:
    """Provide an admin panel client, closed after the request"""
    client = AdminPanelClient()
    try:
        yield client
    finally:
        client.close()


def get_clock() -> Clock:
    """Source of "now" for loan dates"""
    return system_clock
