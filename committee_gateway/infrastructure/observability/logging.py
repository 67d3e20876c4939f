"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from committee_gateway.config import settings


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


def log_request(request_id: str, method: str, path: str, status: int, duration_ms: float) -> None:
    """One line per handled HTTP request"""
    logging.info(
        f"{method} {path}",
        extra={
            "request_id": request_id,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": duration_ms,
        },
    )


def log_login(request_id: str, username: str, success: bool) -> None:
    """Log login outcome; passwords are never logged"""
    logging.log(
        logging.INFO if success else logging.WARNING,
        "Login succeeded" if success else "Login rejected",
        extra={
            "request_id": request_id,
            "username": username,
            "step": "login",
            "outcome": "success" if success else "rejected",
        },
    )


def log_state_saved(request_id: str, backend: str, counts: Dict[str, int]) -> None:
    """Log a whole-document write with collection sizes"""
    logging.info(
        "State saved",
        extra={
            "request_id": request_id,
            "step": "state_write",
            "backend": backend,
            **{f"{name}_count": n for name, n in counts.items()},
        },
    )
