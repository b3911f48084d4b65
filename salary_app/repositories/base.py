"""Shared helpers for repositories."""
from __future__ import annotations

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session


class BaseRepository:
    """Base repository holding the unit-of-work session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    @staticmethod
    def _to_decimal(value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if value is None:
            return Decimal(0)
        return Decimal(str(value))

    @staticmethod
    def _coerce_datetime(value: date | datetime | None, *, end_of_day: bool = False) -> datetime | None:
        """Normalise a date boundary into a UTC ``datetime``.

        Plain dates expand to the start (or end) of that day.
        """

        if value is None:
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        boundary = time.max if end_of_day else time.min
        return datetime.combine(value, boundary, tzinfo=timezone.utc)
