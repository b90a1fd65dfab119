"""Domain-specific exceptions"""

from typing import Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Submission rejected locally, before any record was created"""

    pass


class RemoteError(DomainException):
    """Admin panel answered a creation request with an error"""

    def __init__(
        self,
        step: str,
        status_code: int,
        error: str,
        details: Optional[str] = None,
        category: Optional[str] = None,
    ):
        self.step = step
        self.status_code = status_code
        self.error = error
        self.details = details
        self.category = category
        message = f"{step} failed with status {status_code}: {error}"
        if details:
            message += f" ({details})"
        super().__init__(message)


class TransportError(DomainException):
    """Admin panel could not be reached, no response was received"""

    def __init__(self, step: str, message: str, timeout: bool = False):
        self.step = step
        self.timeout = timeout
        super().__init__(f"{step}: {message}")


class RegistrationAbortedError(DomainException):
    """
    Bulk registration stopped at the first failing step.

    Records created before the failure are left in the admin panel;
    `progress` says how many of each kind exist.
    """

    def __init__(self, step, progress, cause: Exception):
        self.step = step
        self.progress = progress
        self.cause = cause
        super().__init__(
            f"Registration aborted at {step.describe()}: {cause}. "
            f"Partial progress: {progress.describe()}"
        )
