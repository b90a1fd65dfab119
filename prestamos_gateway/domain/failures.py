"""Categorize registration failures into operator-facing reports"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from prestamos_gateway.domain.exceptions import (
    RegistrationAbortedError,
    RemoteError,
    TransportError,
    ValidationError,
)
from prestamos_gateway.domain.models import RegistrationProgress


class ErrorCategory(str, Enum):
    DUPLICATE_EMAIL = "duplicate_email"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


# Free-text indicators the admin panel is known to send. Only used when the
# response carries no structured category.
DUPLICATE_MARKERS = ("ya registrado", "already exists", "duplicate")
AUTH_MARKERS = ("Auth", "autenticación")
VALIDATION_MARKERS = ("validation", "validación", "requerido")
NETWORK_MARKERS = ("Network Error", "ERR_NETWORK")
TIMEOUT_MARKERS = ("timeout", "timed out")

_STRUCTURED_CATEGORIES = {
    "duplicate": ErrorCategory.DUPLICATE_EMAIL,
    "duplicate_email": ErrorCategory.DUPLICATE_EMAIL,
    "authentication": ErrorCategory.AUTHENTICATION,
    "auth": ErrorCategory.AUTHENTICATION,
    "validation": ErrorCategory.VALIDATION,
}

PARTIAL_WARNING = (
    "Some records may have been created before the failure. "
    "Check the system state before trying again."
)


def _matches(text: str, markers) -> bool:
    return any(marker in text for marker in markers)


def categorize(error: Exception) -> ErrorCategory:
    """Map an error (or the cause of an aborted registration) to a category"""
    if isinstance(error, RegistrationAbortedError):
        error = error.cause

    if isinstance(error, ValidationError):
        return ErrorCategory.VALIDATION

    if isinstance(error, TransportError):
        return ErrorCategory.TIMEOUT if error.timeout else ErrorCategory.NETWORK

    if isinstance(error, RemoteError):
        if error.category:
            structured = _STRUCTURED_CATEGORIES.get(error.category.lower())
            if structured:
                return structured
        text = error.error
    else:
        text = str(error)

    if _matches(text, DUPLICATE_MARKERS):
        return ErrorCategory.DUPLICATE_EMAIL
    if _matches(text, AUTH_MARKERS):
        return ErrorCategory.AUTHENTICATION
    if _matches(text, VALIDATION_MARKERS):
        return ErrorCategory.VALIDATION
    if _matches(text, NETWORK_MARKERS):
        return ErrorCategory.NETWORK
    if _matches(text, TIMEOUT_MARKERS):
        return ErrorCategory.TIMEOUT
    return ErrorCategory.UNKNOWN


@dataclass
class FailureReport:
    """What the operator is shown when a submission fails"""

    category: ErrorCategory
    title: str
    message: str
    partial_records_possible: bool
    progress: Optional[RegistrationProgress] = None

    def as_dict(self) -> dict:
        return {
            "category": self.category.value,
            "title": self.title,
            "message": self.message,
            "partial_records_possible": self.partial_records_possible,
            "progress": self.progress.as_dict() if self.progress else None,
        }


_TITLES = {
    ErrorCategory.DUPLICATE_EMAIL: "Duplicate email detected",
    ErrorCategory.AUTHENTICATION: "Authentication error",
    ErrorCategory.VALIDATION: "Validation error",
    ErrorCategory.NETWORK: "Connection error",
    ErrorCategory.TIMEOUT: "Request timed out",
    ErrorCategory.UNKNOWN: "Unexpected error",
}


def _body(category: ErrorCategory, error: Exception) -> str:
    if isinstance(error, RemoteError):
        details = error.details or error.error
    else:
        details = str(error)

    if category is ErrorCategory.DUPLICATE_EMAIL:
        return f"One of the emails is already registered. Details: {details}. Check every email and try again."
    if category is ErrorCategory.AUTHENTICATION:
        return f"The authentication system failed during registration. Details: {details}. Please try again."
    if category is ErrorCategory.VALIDATION:
        return f"Some fields do not meet the requirements: {details}. Correct them and try again."
    if category is ErrorCategory.NETWORK:
        return f"Could not reach the server. Check the connection and that the server is running. Error: {details}"
    if category is ErrorCategory.TIMEOUT:
        return f"The registration took too long to complete. Try again with fewer records. Error: {details}"
    return f"Error: {details}"


def describe_failure(error: Exception) -> FailureReport:
    """
    Build the operator-facing report for a failed submission.

    Local validation failures never created anything. Failures raised by
    the orchestrator carry the progress reached; any created record
    means partial data may now exist in the admin panel.
    """
    category = categorize(error)
    progress = None
    cause = error

    if isinstance(error, RegistrationAbortedError):
        progress = error.progress
        cause = error.cause

    message = _body(category, cause)
    partial = progress is not None and progress.total_created > 0
    if isinstance(error, RegistrationAbortedError):
        message += f" Failed at {error.step.describe()}; {progress.describe()}."
    if partial:
        message += " " + PARTIAL_WARNING

    return FailureReport(
        category=category,
        title=_TITLES[category],
        message=message,
        partial_records_possible=partial,
        progress=progress,
    )
