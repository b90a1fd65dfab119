"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from prestamos_gateway.config import settings
from prestamos_gateway.domain.models import RegistrationProgress


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_registration(
    request_id: str,
    admin_email: str,
    outcome: str,
    progress: RegistrationProgress,
    duration_ms: float,
    error_category: str | None = None,
) -> None:
    """Log structured registration outcome for analysis"""
    logging.info(
        "Bulk registration finished",
        extra={
            "request_id": request_id,
            "admin_email": admin_email,
            "step": "registration_finished",
            "outcome": outcome,
            "records_created": progress.as_dict(),
            "error_category": error_category,
            "duration_ms": duration_ms,
        },
    )
