"""
Logging setup.

Plain text lines in development, one JSON object per line (via
python-json-logger) everywhere else so log shippers can index fields.
"""
import logging
import sys
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from blogcore.config import settings


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that stamps every record with service metadata."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["service"] = settings.APP_NAME
        log_record["version"] = settings.VERSION
        log_record["level"] = record.levelname


def setup_logging() -> None:
    """Install a single stdout handler on the root logger (idempotent)."""
    root_logger = logging.getLogger()
    if any(getattr(h, "_blogcore", False) for h in root_logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    if settings.LOG_JSON:
        formatter: logging.Formatter = ServiceJsonFormatter(
            "%(asctime)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)
    handler._blogcore = True  # type: ignore[attr-defined]

    root_logger.setLevel(logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper())
    root_logger.addHandler(handler)

    # SQL echo is controlled by the engine, not by the root level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
