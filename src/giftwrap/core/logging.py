# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Logging for giftwrap.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers; :func:`configure_logging` does that for the CLI.

Wrap and unwrap calls are reported by :data:`operation_logger`, which only
ever sees public values (event ids, public keys, counts). Calls made inside
one :func:`correlation_context` share a correlation id, so the wrap of an
envelope and its later unwrap can be matched up in the logs.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

_correlation_id: ContextVar[str | None] = ContextVar("giftwrap_correlation_id", default=None)


def get_correlation_id() -> str | None:
    """The correlation id of the current context, if any."""
    return _correlation_id.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under one correlation id (a fresh UUID unless given).

    Example:
        with correlation_context() as cid:
            envelope = wrap(alice, shared.public_key, "hi")
            note = unwrap(shared, envelope)  # both logged with cid
    """
    token = _correlation_id.set(correlation_id or str(uuid.uuid4()))
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for files and non-terminal stderr."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = get_correlation_id()
        if cid:
            entry["correlation_id"] = cid
        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.pathname}:{record.lineno}"
        extra = getattr(record, "extra_data", None)
        if extra is not None:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """``time - logger - LEVEL - [cid] message``, colored on a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"
        message = record.getMessage()
        cid = get_correlation_id()
        if cid:
            message = f"[{cid[:8]}] {message}"
        line = f"{self.formatTime(record, self.datefmt)} - {record.name} - {level} - {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Install giftwrap's handlers on the root logger.

    Arguments left as ``None`` fall back to the ``GIFTWRAP_LOG_LEVEL``,
    ``GIFTWRAP_LOG_FORMAT`` and ``GIFTWRAP_LOG_FILE`` settings. Without a
    format setting, JSON is used unless stderr is a terminal. A log file
    always gets JSON.

    Raises:
        ConfigException: If the settings cannot be loaded.
    """
    from .config import get_config

    config = get_config()

    if level is None:
        level = config.log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if json_format is None:
        fmt = config.log_format.lower()
        json_format = fmt == "json" or (fmt != "text" and not sys.stderr.isatty())

    if log_file is None:
        log_file = config.log_file

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(JSONFormatter() if json_format else StandardFormatter())
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JSONFormatter())
        root.addHandler(file_handler)


class OperationLogger:
    """Reports wrap / unwrap calls with sensitive fields redacted."""

    # Substrings of field names whose values never reach a handler
    SENSITIVE_FIELDS = ("secret", "nsec", "private", "plaintext", "content", "message", "shared")
    MAX_VALUE_LENGTH = 200

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("giftwrap.operations")

    def _extra(self, operation: str, **data: Any) -> dict[str, Any]:
        extra_data: dict[str, Any] = {"operation": operation, **data}
        cid = get_correlation_id()
        if cid:
            extra_data["correlation_id"] = cid
        return {"extra_data": extra_data}

    def log_operation(self, operation: str, fields: dict[str, Any], level: int = logging.DEBUG) -> None:
        """Log a completed operation with its (sanitized) public fields."""
        self.logger.log(
            level,
            f"Operation: {operation}",
            extra=self._extra(operation, fields=self._sanitize(fields)),
        )

    def log_failure(self, operation: str, error: Exception, level: int = logging.WARNING) -> None:
        """Log a failed operation by error type only; messages may quote input."""
        name = type(error).__name__
        self.logger.log(
            level,
            f"Operation failed: {operation} -> {name}",
            extra=self._extra(operation, error=name),
        )

    def _sanitize(self, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: "[REDACTED]"
                if any(s in key.lower() for s in self.SENSITIVE_FIELDS)
                else self._sanitize(value)
                for key, value in data.items()
            }
        if isinstance(data, list | tuple):
            return [self._sanitize(item) for item in data]
        if isinstance(data, str) and len(data) > self.MAX_VALUE_LENGTH:
            return data[: self.MAX_VALUE_LENGTH] + "..."
        return data


operation_logger = OperationLogger()
