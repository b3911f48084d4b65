"""Duration and throughput logging for long-running operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from time import perf_counter
from typing import Iterator, Optional


class TimedOperation:
    """Counts processed items while a ``timeit`` block runs."""

    def __init__(self, label: str, *, unit: str = "items", total: Optional[int] = None) -> None:
        self.label = label
        self.unit = unit
        self.total = total
        self.succeeded = 0
        self.failed = 0
        self._started = perf_counter()

    @property
    def processed(self) -> int:
        return self.succeeded + self.failed

    @property
    def elapsed(self) -> float:
        return perf_counter() - self._started

    def tick(self, ok: bool = True, amount: int = 1) -> None:
        if ok:
            self.succeeded += amount
        else:
            self.failed += amount

    def completed_message(self) -> str:
        elapsed = self.elapsed
        count = self.total if self.total is not None else self.processed
        message = f"{self.label} completed in {elapsed:.2f}s ({count:,} {self.unit}"
        if count and elapsed > 0:
            message += f" @ {count / elapsed:,.0f} {self.unit}/s"
        message += ")"
        if self.failed:
            message += f", {self.failed:,} failed"
        return message

    def aborted_message(self) -> str:
        message = f"{self.label} aborted after {self.elapsed:.2f}s"
        if self.total is not None:
            message += f" ({self.processed:,}/{self.total:,} {self.unit})"
        return message


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "items",
    total: Optional[int] = None,
) -> Iterator[TimedOperation]:
    """Log how long the block took and how many ``unit`` it handled.

    The yielded operation is ticked by the caller; an exception escaping the
    block is logged as an abort and re-raised.
    """

    log = logger or logging.getLogger("salary_app.timer")
    operation = TimedOperation(label, unit=unit, total=total)
    try:
        yield operation
    except Exception:
        log.error(operation.aborted_message())
        raise
    log.log(level, operation.completed_message())
