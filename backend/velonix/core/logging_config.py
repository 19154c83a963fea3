"""
VELONIX - Logging setup

Development: readable single-line console output.
Production: one JSON object per line (stdout and, if LOG_FILE is set, a
rotating file) so the host's log shipper can index the extra fields.

Every record carries the current request id and, on admin routes, the id of
the authenticated admin.
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from velonix.core.config import settings

LOGGER_NAME = "velonix"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
admin_id_var: ContextVar[str] = ContextVar("admin_id", default="")


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_admin_id() -> str:
    return admin_id_var.get()


def set_admin_id(admin_id: str) -> None:
    admin_id_var.set(admin_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


# Attributes every LogRecord has; anything else came in through `extra=`
_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "taskName"}


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if get_request_id():
            entry["request_id"] = get_request_id()
        if get_admin_id():
            entry["admin_id"] = get_admin_id()

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        entry.update({k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS and not k.startswith("_")})
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain-text formatter that can reference %(request_id)s and %(admin_id)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or "-"
        record.admin_id = get_admin_id() or "-"
        return super().format(record)


class VelonixLogger(logging.Logger):
    """Logger with helpers for the events this service cares about"""

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float, **kwargs) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs,
            },
        )

    def log_auth_event(self, event: str, success: bool, username: Optional[str] = None, reason: Optional[str] = None, **kwargs) -> None:
        message = f"Admin {event} {'succeeded' if success else 'failed'}"
        if username:
            message += f" for '{username}'"
        if reason:
            message += f" ({reason})"
        self.log(
            logging.INFO if success else logging.WARNING,
            message,
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "username": username,
                "failure_reason": reason,
                **kwargs,
            },
        )

    def log_registration_event(self, event: str, registration_id: str, **kwargs) -> None:
        """Submissions and status changes"""
        self.info(
            f"Registration {registration_id}: {event}",
            extra={"event_type": "registration", "registration_event": event, "registration_id": registration_id, **kwargs},
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None, **kwargs) -> None:
        self.error(
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=(type(error), error, error.__traceback__),
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs,
            },
        )


def setup_logging() -> VelonixLogger:
    """Configure the application logger from settings; safe to call again"""
    logging.setLoggerClass(VelonixLogger)
    logger = logging.getLogger(LOGGER_NAME)
    logging.setLoggerClass(logging.Logger)

    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    if settings.is_production:
        console_formatter = file_formatter = JSONFormatter()
        backup_count = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(admin_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        backup_count = 5

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(console_formatter)
    logger.addHandler(console)

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=backup_count)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    for noisy in ("aiosmtplib", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(f"Logging initialized (environment={settings.ENVIRONMENT}, json={settings.is_production})")
    return logger


logger: VelonixLogger = setup_logging()
