"""JSON logging for the fit14 services.

Log calls attach structured fields through ``extra={"ctx_*": ...}``. Fields
that apply to a whole operation, such as the generation request id, are bound
once with ``log_context`` and appear on every record emitted inside it,
including records from other modules.
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping

CONTEXT_PREFIX = "ctx_"

_bound_context: ContextVar[Mapping[str, Any]] = ContextVar("fit14_log_context", default={})

_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore")


def current_context() -> dict[str, Any]:
    """Fields bound by the enclosing ``log_context`` blocks, prefixed with ``ctx_``."""
    return {f"{CONTEXT_PREFIX}{key}": value for key, value in _bound_context.get().items()}


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Bind ``fields`` to every record logged in this block (and tasks it spawns)."""
    token = _bound_context.set({**_bound_context.get(), **fields})
    try:
        yield
    finally:
        _bound_context.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Bound context comes first; ``ctx_*`` extras passed to the log call win on
    conflicting keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["exception"] = {"type": type(exc).__name__, "message": str(exc)}

        context = current_context()
        context.update((k, v) for k, v in record.__dict__.items() if k.startswith(CONTEXT_PREFIX))
        if context:
            entry["context"] = context
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Send JSON logs to stdout. Does nothing if the root logger already has handlers."""
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
