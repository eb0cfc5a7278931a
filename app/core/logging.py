import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from app.core.config import settings

# Correlation id of the request being handled, set by CorrelationIdMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["env"] = settings.environment


def setup_logging():
    root = logging.getLogger()
    # Importing the app twice (tests, reload) must not stack handlers
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # Library noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
