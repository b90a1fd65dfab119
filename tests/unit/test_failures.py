"""Unit tests for failure categorization and operator messages"""

import pytest
from prestamos_gateway.domain.exceptions import (
    RegistrationAbortedError,
    RemoteError,
    TransportError,
    ValidationError,
)
from prestamos_gateway.domain.failures import ErrorCategory, categorize, describe_failure
from prestamos_gateway.domain.models import RegistrationProgress, Step, StepKind


def _aborted(cause, **progress):
    step = Step(StepKind.CLIENT, worker_index=0, client_index=1)
    return RegistrationAbortedError(step, RegistrationProgress(**progress), cause)


@pytest.mark.parametrize(
    "error,expected",
    [
        ("Email ya registrado", ErrorCategory.DUPLICATE_EMAIL),
        ("User already exists", ErrorCategory.DUPLICATE_EMAIL),
        ("Auth service unavailable", ErrorCategory.AUTHENTICATION),
        ("Error de autenticación", ErrorCategory.AUTHENTICATION),
        ("validation failed", ErrorCategory.VALIDATION),
        ("Error de validación", ErrorCategory.VALIDATION),
        ("Campo requerido", ErrorCategory.VALIDATION),
        ("Internal Server Error", ErrorCategory.UNKNOWN),
    ],
)
def test_remote_error_substring_fallback(error, expected):
    assert categorize(RemoteError("create_admin", 400, error)) is expected


def test_structured_category_wins_over_text():
    error = RemoteError("create_worker", 409, "Conflict: validation", category="duplicate")

    assert categorize(error) is ErrorCategory.DUPLICATE_EMAIL


def test_unknown_structured_category_falls_back_to_text():
    error = RemoteError("create_worker", 400, "Email ya registrado", category="other")

    assert categorize(error) is ErrorCategory.DUPLICATE_EMAIL


def test_transport_errors():
    assert categorize(TransportError("create_loan", "timed out", timeout=True)) is ErrorCategory.TIMEOUT
    assert categorize(TransportError("create_loan", "Network Error: refused")) is ErrorCategory.NETWORK


def test_plain_exception_text():
    assert categorize(RuntimeError("ERR_NETWORK")) is ErrorCategory.NETWORK
    assert categorize(RuntimeError("read timeout")) is ErrorCategory.TIMEOUT
    assert categorize(RuntimeError("boom")) is ErrorCategory.UNKNOWN


def test_aborted_registration_uses_cause():
    error = _aborted(RemoteError("create_client", 400, "Email ya registrado"), admins=1)

    assert categorize(error) is ErrorCategory.DUPLICATE_EMAIL


def test_local_validation_never_partial():
    report = describe_failure(ValidationError("Admin email is required"))

    assert report.category is ErrorCategory.VALIDATION
    assert report.partial_records_possible is False
    assert report.progress is None
    assert "Admin email is required" in report.message


def test_partial_progress_reported():
    cause = RemoteError("create_client", 500, "Internal Server Error", details="db down")
    report = describe_failure(_aborted(cause, admins=1, workers=1, clients=1, loans=1))

    assert report.category is ErrorCategory.UNKNOWN
    assert report.title == "Unexpected error"
    assert report.partial_records_possible is True
    assert "1 worker, 1 client, 1 loan created" in report.message
    assert "client 2 of worker 1" in report.message
    assert "db down" in report.message
    assert report.as_dict()["progress"] == {"admins": 1, "workers": 1, "clients": 1, "loans": 1}


def test_duplicate_with_partial_records_still_warns():
    cause = RemoteError("create_worker", 400, "Email ya registrado", details="w@example.com already exists")
    report = describe_failure(_aborted(cause, admins=1))

    assert report.category is ErrorCategory.DUPLICATE_EMAIL
    assert report.partial_records_possible is True
    assert "w@example.com already exists" in report.message


def test_failure_before_any_record_has_no_warning():
    report = describe_failure(_aborted(TransportError("create_admin", "Network Error", timeout=False)))

    assert report.category is ErrorCategory.NETWORK
    assert report.partial_records_possible is False
    assert "no records created" in report.message
