# ruff: noqa: PLR6301
"""Logging helpers for schemashift.

Every logger lives under the ``schemashift`` namespace. Structured events carry
their fields on the record as ``extra_fields`` and are rendered as JSON by
:class:`StructuredFormatter`. Each migration command runs inside
:func:`correlation_context`, so all records of one command share a
``correlation_id``.
"""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import msgspec

if TYPE_CHECKING:
    from collections.abc import Generator
    from logging import LogRecord

__all__ = (
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_context",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME = "schemashift"

correlation_id_var: ContextVar[str | None] = ContextVar("schemashift_correlation_id", default=None)

_json_encoder = msgspec.json.Encoder(enc_hook=str)


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation id of the current context, or clear it with None."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    return correlation_id_var.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Bind a correlation id for the duration of the block.

    An id already bound by an outer block is reused so nested commands (``reset``
    runs ``migrate``) log under one id. Otherwise ``correlation_id`` or a fresh
    ``uuid4`` hex is bound and the previous value is restored on exit.

    Yields:
        The bound correlation id.
    """
    current = get_correlation_id()
    if current is not None and correlation_id is None:
        yield current
        return
    token = correlation_id_var.set(correlation_id or uuid4().hex)
    try:
        yield correlation_id_var.get()  # type: ignore[misc]
    finally:
        correlation_id_var.reset(token)


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if correlation_id := get_correlation_id():
            log_entry["correlation_id"] = correlation_id

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)  # pyright: ignore

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return _json_encoder.encode(log_entry).decode("utf-8")


class CorrelationIDFilter(logging.Filter):
    """Copy the bound correlation id onto each record."""

    def filter(self, record: LogRecord) -> bool:
        if correlation_id := get_correlation_id():
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``schemashift`` namespace.

    ``get_logger("stores.sqlite")`` and ``get_logger("schemashift.stores.sqlite")``
    return the same logger. Named loggers carry a :class:`CorrelationIDFilter`.
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIDFilter) for f in logger.filters):
        logger.addFilter(CorrelationIDFilter())

    return logger


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: str | None = None,
    extra_handlers: list[logging.Handler] | None = None,
) -> None:
    """Install handlers on the ``schemashift`` logger.

    Applications that already configure logging can skip this; schemashift only
    emits records and never adds handlers on its own.

    Args:
        level: Level name for the ``schemashift`` logger.
        format_style: ``"structured"`` for JSON lines, ``"simple"`` for plain text.
        log_to_file: Also write JSON lines to this path.
        extra_handlers: Handlers attached as given.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

    for handler in extra_handlers or ():
        root_logger.addHandler(handler)

    root_logger.propagate = False

    log_with_context(
        root_logger,
        logging.INFO,
        "schemashift logging configured",
        level=level,
        format_style=format_style,
        handlers_count=len(root_logger.handlers),
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Emit ``message`` with ``extra_fields`` attached for :class:`StructuredFormatter`."""
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "(unknown file)", 0, message, (), None)
    record.extra_fields = extra_fields  # type: ignore[attr-defined]
    logger.handle(record)
