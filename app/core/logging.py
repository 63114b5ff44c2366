"""
Structured logging for the leave balance service.

Every line is one JSON object carrying the service name, environment and
build, plus the request id of the HTTP request that produced it.
"""
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pythonjsonlogger import jsonlogger

from app.core.config import settings

# Set by CorrelationIdMiddleware for the lifetime of a request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

LOG_FORMAT = "%(timestamp) %(level) %(name) %(message)"

# Libraries that are too chatty at INFO
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "slowapi")


class RequestContextFilter(logging.Filter):
    """Stamps each record with the current request id (empty outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.app_name
        log_record["environment"] = settings.environment
        log_record["build"] = settings.build_id

        if not log_record.get("request_id"):
            log_record.pop("request_id", None)


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Handler:
    """
    Install the JSON handler on the root logger. Calling it again replaces
    the handler installed earlier instead of stacking a second one.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_leave_service", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(ServiceJsonFormatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())
    handler._leave_service = True
    root.addHandler(handler)
    root.setLevel(level or settings.log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
