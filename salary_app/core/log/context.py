"""Context helpers that enrich log records with request metadata."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Dict, Iterator


_log_fields: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar(
    "salary_log_context", default={}
)


class LogContext:
    """Key-value pairs (request id, actor id) attached to log records in scope."""

    def as_dict(self) -> Dict[str, object]:
        return dict(_log_fields.get())

    @contextmanager
    def scoped(self, **values: object) -> Iterator[None]:
        """Bind ``values`` for the duration of the ``with`` block."""

        token = _log_fields.set(
            {**_log_fields.get(), **{k: v for k, v in values.items() if v is not None}}
        )
        try:
            yield
        finally:
            _log_fields.reset(token)


class ContextFilter(logging.Filter):
    """Attach contextual key-value pairs to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _log_fields.get()
        if context:
            record.context = " ".join(f"{k}={v}" for k, v in context.items()) + " "
        else:
            record.context = ""
        return True


log_context = LogContext()
