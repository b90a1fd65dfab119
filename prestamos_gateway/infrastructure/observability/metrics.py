"""Prometheus metrics for registration outcomes and admin panel performance"""

from prometheus_client import Counter, Histogram

from prestamos_gateway.domain.models import RegistrationProgress

# Registration metrics
registration_counter = Counter(
    "prestamos_registration_total",
    "Bulk registrations submitted",
    ["outcome"],  # completed | rejected | aborted
)

records_created_counter = Counter(
    "prestamos_records_created_total",
    "Records created in the admin panel",
    ["entity"],  # admin | worker | client | loan
)

registration_failure_counter = Counter(
    "prestamos_registration_failures_total",
    "Failed bulk registrations by error category",
    ["category"],
)

# Admin panel metrics
remote_create_latency_histogram = Histogram(
    "admin_panel_create_latency_seconds",
    "Admin panel record creation response time",
    ["entity"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

remote_create_failures_counter = Counter(
    "admin_panel_create_failures_total",
    "Failed admin panel creation calls",
    ["entity", "category"],  # category: see domain.failures.ErrorCategory
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_registration(outcome: str, progress: RegistrationProgress | None = None, category: str | None = None) -> None:
    """Record the outcome of a submission and the records it created"""
    registration_counter.labels(outcome=outcome).inc()

    if category is not None:
        registration_failure_counter.labels(category=category).inc()

    if progress is not None:
        for entity, count in (
            ("admin", progress.admins),
            ("worker", progress.workers),
            ("client", progress.clients),
            ("loan", progress.loans),
        ):
            if count:
                records_created_counter.labels(entity=entity).inc(count)
