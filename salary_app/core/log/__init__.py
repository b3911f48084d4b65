"""Logging for the salary service.

Records go to a rich console handler and, when a log directory is configured,
to one file per day. Records emitted on the ``salary_app.audit`` channel are
additionally written to ``audit_<date>.log`` so salary changes can be reviewed
on their own. Handlers run behind a queue listener so request threads never
block on file I/O.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import date, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import SimpleQueue
from threading import RLock
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_rich_traceback

from .context import ContextFilter, log_context
from .timing import timeit

if TYPE_CHECKING:
    from salary_app.core.config import LoggingSettings

__all__ = [
    "AUDIT_CHANNEL",
    "init_logging",
    "get_logger",
    "get_audit_logger",
    "shutdown_logging",
    "log_context",
    "timeit",
]

AUDIT_CHANNEL = "salary_app.audit"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(context)s%(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """Resolved logging options."""

    level: str | int = "INFO"
    log_dir: Optional[Path] = None
    console: bool = True
    audit_file: bool = True
    queue: bool = True

    @classmethod
    def from_settings(cls, settings: "LoggingSettings | None", **overrides: object) -> "LoggingConfig":
        base = cls() if settings is None else cls(level=settings.level, log_dir=settings.log_dir)
        known = {key: value for key, value in overrides.items() if hasattr(base, key)}
        return replace(base, **known)

    @property
    def numeric_level(self) -> int:
        if isinstance(self.level, int):
            return self.level
        return getattr(logging, str(self.level).upper(), logging.INFO)


class DailyFileHandler(logging.FileHandler):
    """Append to ``<prefix><YYYY_MM_DD>.log`` and switch files when the day changes."""

    def __init__(self, directory: Path, *, prefix: str = "", encoding: str = "utf-8") -> None:
        self.directory = Path(directory)
        self.prefix = prefix
        self.directory.mkdir(parents=True, exist_ok=True)
        self._day: date = date.today()
        super().__init__(self._filename(self._day), mode="a", encoding=encoding)

    def _filename(self, day: date) -> str:
        return os.fspath(self.directory / f"{self.prefix}{day:%Y_%m_%d}.log")

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.fromtimestamp(record.created).date()
        if day != self._day:
            self.acquire()
            try:
                self._day = day
                self.close()
                self.baseFilename = self._filename(day)
            finally:
                self.release()
        super().emit(record)


class _LoggingState:
    def __init__(self) -> None:
        self.lock = RLock()
        self.config: LoggingConfig | None = None
        self.listener: QueueListener | None = None
        self.context_filter = ContextFilter()

    def handlers_for(self, cfg: LoggingConfig) -> list[logging.Handler]:
        level = cfg.numeric_level
        handlers: list[logging.Handler] = []

        if cfg.console:
            install_rich_traceback(show_locals=False)
            console = RichHandler(
                console=Console(stderr=True),
                rich_tracebacks=True,
                show_path=False,
                markup=False,
                log_time_format=_DATE_FORMAT,
            )
            console.setFormatter(logging.Formatter("%(context)s%(message)s"))
            handlers.append(console)

        if cfg.log_dir:
            handlers.append(DailyFileHandler(cfg.log_dir))
            if cfg.audit_file:
                audit = DailyFileHandler(cfg.log_dir, prefix="audit_")
                audit.addFilter(logging.Filter(AUDIT_CHANNEL))
                handlers.append(audit)

        for handler in handlers:
            handler.setLevel(level)
            handler.addFilter(self.context_filter)
            if not isinstance(handler, RichHandler):
                handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
        return handlers

    def apply(self, cfg: LoggingConfig) -> None:
        with self.lock:
            if self.config == cfg:
                return
            self.teardown()

            root = logging.getLogger()
            root.setLevel(logging.NOTSET)
            handlers = self.handlers_for(cfg)
            if cfg.queue and handlers:
                log_queue: SimpleQueue = SimpleQueue()
                front = QueueHandler(log_queue)
                front.setLevel(cfg.numeric_level)
                # Context must be captured on the calling thread, not the listener's.
                front.addFilter(self.context_filter)
                root.addHandler(front)
                self.listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
                self.listener.start()
            else:
                for handler in handlers:
                    root.addHandler(handler)
            self.config = cfg

    def teardown(self) -> None:
        with self.lock:
            if self.listener is not None:
                self.listener.stop()
                self.listener = None
            root = logging.getLogger()
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            self.config = None


_state = _LoggingState()


def init_logging(settings: "LoggingSettings | None" = None, **overrides: object) -> None:
    """Configure root logging from ``settings``; repeated identical calls are no-ops.

    Keyword overrides (``level``, ``log_dir``, ``console``, ``audit_file``,
    ``queue``) take precedence over the settings object.
    """

    _state.apply(LoggingConfig.from_settings(settings, **overrides))


def shutdown_logging() -> None:
    """Stop the queue listener and detach every root handler."""

    _state.teardown()


def get_logger(name: str | None = None) -> logging.Logger:
    with _state.lock:
        if _state.config is None:
            init_logging()
    return logging.getLogger(name or "salary_app")


def get_audit_logger(name: str | None = None) -> logging.Logger:
    """Logger on the audit channel; ``name`` becomes a child of it."""

    channel = f"{AUDIT_CHANNEL}.{name}" if name else AUDIT_CHANNEL
    return get_logger(channel)
