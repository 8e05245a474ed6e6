"""
Structured Logging

JSON log lines for fetches. Every fetch runs inside its own correlation
scope, so the count query, data query and render of one fetch share a
correlation_id even when several fetches interleave on the event loop.
"""

import json
import logging
import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Context passed as ``extra={"extra_fields": {...}}`` is merged into the
    top level; the active correlation id is added when a fetch is running.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id

        payload.update(getattr(record, 'extra_fields', None) or {})

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


def setup_structured_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> None:
    """
    Route the root logger through StructuredFormatter.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Also append JSON lines to this file
        enable_console: Write JSON lines to stderr
    """
    formatter = StructuredFormatter()
    handlers = []

    if enable_console:
        handlers.append(logging.StreamHandler())
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=log_level.upper(), handlers=handlers, force=True)

    logging.getLogger(__name__).debug("Structured logging configured", extra={
        "extra_fields": {"log_level": log_level, "log_file": log_file}
    })


@contextmanager
def fetch_correlation() -> Iterator[str]:
    """Run the enclosed block under a fresh correlation id."""
    correlation_id = uuid.uuid4().hex
    token = correlation_id_var.set(correlation_id)
    try:
        yield correlation_id
    finally:
        correlation_id_var.reset(token)


def log_with_context(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """
    Log ``message`` with ``fields`` as structured context.

    Example:
        >>> log_with_context(logger, logging.INFO, "Fetch finished", state="rendered", page=2)
    """
    logger.log(level, message, extra={"extra_fields": fields})
