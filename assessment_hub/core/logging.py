import logging
from datetime import datetime, timezone
from typing import Any, Dict, Union
from pythonjsonlogger import jsonlogger
from contextvars import ContextVar

from assessment_hub.core.config import settings

# Context variable to store request_id for the current task/request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# One line per HTTP request, written by LoggingMiddleware
ACCESS_LOGGER = "assessment_hub.access"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)

        # Inject correlation ID if available
        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        if log_record.get("level"):
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname

        # Several deployments share one log sink
        log_record.setdefault("service", settings.app_name)
        log_record.setdefault("environment", settings.environment)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Union[int, str, None] = None, access_log: Union[bool, None] = None):
    """Install the JSON handler on the root logger.

    `level` and `access_log` default to LOG_LEVEL and ACCESS_LOG from the config.
    """
    level = _resolve_level(settings.log_level if level is None else level)
    access_log = settings.access_log if access_log is None else access_log

    # Request lines can be silenced without touching application logs
    access_logger = logging.getLogger(ACCESS_LOGGER)
    access_logger.setLevel(logging.INFO if access_log else logging.WARNING)
    access_logger.propagate = True

    logger = logging.getLogger()
    logger.setLevel(level)
    # Avoid stacking handlers when the app module is imported more than once
    for handler in logger.handlers:
        if isinstance(handler.formatter, CustomJsonFormatter):
            return

    log_handler = logging.StreamHandler()
    formatter = CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)")
    log_handler.setFormatter(formatter)
    logger.addHandler(log_handler)

    # uvicorn's own access line duplicates ours
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
