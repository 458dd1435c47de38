"""Logging utilities for typed errors.

This module centralizes logging configuration, including:
- A filter expanding typed errors into structured record fields
- JSON formatter for machine-friendly logs
- Level selection from an error's category and code
- Configurable stdout/file handlers with rotation support
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from typed_errors.core.accessors import get_cause, get_code, get_message, to_payload
from typed_errors.core.config import LogSettings, settings
from typed_errors.core.errors import FatalError, TypedError, category_of

# Logging fields we intentionally exclude from extra payload capture
_EXCLUDED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}


def error_fields(err: BaseException) -> dict[str, Any]:
    """Structured log fields describing an error.

    Args:
        err: Typed or plain exception.

    Returns:
        Dict of ``error_*`` fields; typed errors add their code, stack and
        stack message.
    """

    category = category_of(err)
    fields: dict[str, Any] = {
        "error_type": type(err).__name__,
        "error_category": category.value if category else None,
        "error_code": get_code(err),
        "error_cause": get_cause(err),
        "error_message": get_message(err),
    }
    payload = to_payload(err)
    if payload is not None:
        fields["error_stack_message"] = payload.stack_message
        fields["error_stack"] = [entry.model_dump() for entry in payload.stack]
    return fields


def level_for(err: BaseException | None) -> int:
    """Pick a log level from an error's category and status code."""

    if not isinstance(err, TypedError):
        return logging.ERROR
    if isinstance(err, FatalError):
        return logging.CRITICAL
    if err.code >= 500:
        return logging.ERROR
    if err.code < 300:
        return logging.INFO
    return logging.WARNING


def log_error(
    logger: logging.Logger,
    err: BaseException,
    event: str = "error",
    **fields: Any,
) -> None:
    """Log ``err`` at the level its category calls for.

    Args:
        logger: Destination logger.
        err: Error to describe; expanded by ``TypedErrorFilter``.
        event: Dotted event name used as the log message.
        **fields: Extra structured fields.
    """

    logger.log(level_for(err), event, extra={"error": err, **fields})


class TypedErrorFilter(logging.Filter):
    """Expand an attached error into ``error_*`` fields on the record.

    The error is taken from ``extra={"error": exc}`` or, failing that, from
    ``exc_info``. Fields already present on the record are left alone.
    """

    def filter(self, record: LogRecord) -> bool:  # noqa: D401
        err = getattr(record, "error", None)
        if not isinstance(err, BaseException) and record.exc_info:
            err = record.exc_info[1]
        if not isinstance(err, BaseException):
            return True

        for key, value in error_fields(err).items():
            if getattr(record, key, None) is None:
                setattr(record, key, value)
        if getattr(record, "error", None) is err:
            record.error = str(err)
        return True


def _default_timestamp() -> str:
    """Generate an ISO-8601 UTC timestamp string."""

    return datetime.now(timezone.utc).isoformat()


class JsonFormatter(logging.Formatter):
    """Format LogRecord as a single JSON object."""

    def __init__(self, *, ensure_ascii: bool = True) -> None:
        super().__init__()
        self.ensure_ascii = ensure_ascii

    def format(self, record: LogRecord) -> str:  # noqa: D401
        record_data: dict[str, Any] = {
            "timestamp": _default_timestamp(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _EXCLUDED_ATTRS or key.startswith("_"):
                continue
            record_data[key] = value

        if record.exc_info:
            record_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(record_data, default=str, ensure_ascii=self.ensure_ascii)


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    """Construct the logging handler based on configuration.

    Args:
        log_settings: Resolved logging settings from environment.

    Returns:
        Configured logging handler (stdout or rotating file).
    """

    if log_settings.output.lower() == "file":
        file_path = Path(log_settings.file_path or "logs/errors.log")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if log_settings.max_bytes:
            return RotatingFileHandler(
                file_path,
                maxBytes=log_settings.max_bytes,
                backupCount=log_settings.backup_count,
                encoding="utf-8",
            )
        return logging.FileHandler(file_path, encoding="utf-8")

    return logging.StreamHandler(sys.stdout)


def configure_logging(log_settings: LogSettings | None = None) -> logging.Handler:
    """Configure the root logger with the typed-error filter and formatter.

    Args:
        log_settings: Optional log settings; defaults to global settings if omitted.

    Returns:
        The installed handler.
    """

    cfg = log_settings or settings.log

    level = getattr(logging, cfg.level.upper(), logging.INFO)
    handler = _build_handler(cfg)
    handler.addFilter(TypedErrorFilter())

    if cfg.format.lower() == "plain":
        formatter: logging.Formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
    else:
        formatter = JsonFormatter()

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler
