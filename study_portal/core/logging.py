"""Structured Logging Configuration

JSON lines in deployed environments, a readable single-line format locally.
Request-scoped fields (correlation_id, user_id, path) are passed through
`extra=` by middleware and services and end up as top-level JSON keys.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from study_portal.config import settings

_HANDLER_MARK = "_study_portal_handler"

# Chatty libraries that only matter when debugging them directly
_QUIET_LOGGERS = (
    "uvicorn.access",
    "sqlalchemy.engine",
    "aiosqlite",
    "botocore",
    "boto3",
    "s3transfer",
    "urllib3",
)


class PortalJsonFormatter(jsonlogger.JsonFormatter):
    """Adds service identity and the request correlation id to each record"""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["service"] = settings.APP_NAME
        log_record["version"] = settings.APP_VERSION
        log_record["environment"] = settings.ENVIRONMENT
        log_record.setdefault("correlation_id", getattr(record, "correlation_id", None))


class PortalTextFormatter(logging.Formatter):
    """Readable format; appends the correlation id when a request set one"""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            line = f"{line} [{correlation_id}]"
        return line


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return PortalJsonFormatter(
            fmt="%(asctime)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    return PortalTextFormatter(
        fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def setup_logging() -> None:
    """Install the stdout handler on the root logger (idempotent)"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    setattr(handler, _HANDLER_MARK, True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    for existing in list(root_logger.handlers):
        if getattr(existing, _HANDLER_MARK, False):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; call with __name__."""
    return logging.getLogger(name)
