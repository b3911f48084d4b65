"""Append-only access to the salary history ledger.

The ledger exposes no update or delete method; ``SalaryHistoryEntry``
also rejects mutation at flush time.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.sql import Select

from salary_app.models import SalaryHistoryEntry

from .base import BaseRepository


class HistoryLedger(BaseRepository):
    def append(self, entry: SalaryHistoryEntry) -> int:
        self._session.add(entry)
        self._session.flush()
        return int(entry.id)

    def _windowed(
        self,
        statement: Select[Any],
        start: date | datetime | None,
        end: date | datetime | None,
    ) -> Select[Any]:
        start_at = self._coerce_datetime(start)
        end_at = self._coerce_datetime(end, end_of_day=True)
        if start_at is not None:
            statement = statement.where(SalaryHistoryEntry.created_at >= start_at)
        if end_at is not None:
            statement = statement.where(SalaryHistoryEntry.created_at <= end_at)
        return statement

    def _page(self, statement: Select[Any], limit: int, offset: int) -> list[SalaryHistoryEntry]:
        statement = statement.order_by(
            SalaryHistoryEntry.created_at.desc(), SalaryHistoryEntry.id.desc()
        ).limit(limit).offset(offset)
        return list(self._session.execute(statement).scalars())

    def query_by_user(
        self,
        user_id: int,
        *,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SalaryHistoryEntry]:
        """Entries for ``user_id``, newest first (insertion order breaks timestamp ties)."""

        statement = select(SalaryHistoryEntry).where(SalaryHistoryEntry.user_id == user_id)
        return self._page(self._windowed(statement, start, end), limit, offset)

    def query_by_actor(
        self,
        actor_id: int,
        *,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[SalaryHistoryEntry]:
        statement = select(SalaryHistoryEntry).where(SalaryHistoryEntry.changed_by == actor_id)
        return self._page(self._windowed(statement, start, end), limit, offset)

    def count_by_user(
        self,
        user_id: int,
        *,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> int:
        statement = select(func.count(SalaryHistoryEntry.id)).where(
            SalaryHistoryEntry.user_id == user_id
        )
        return int(self._session.execute(self._windowed(statement, start, end)).scalar() or 0)

    def between(
        self,
        start: date | datetime,
        end: date | datetime,
        *,
        actor_id: int | None = None,
    ) -> list[SalaryHistoryEntry]:
        statement = select(SalaryHistoryEntry)
        if actor_id is not None:
            statement = statement.where(SalaryHistoryEntry.changed_by == actor_id)
        statement = self._windowed(statement, start, end).order_by(
            SalaryHistoryEntry.created_at, SalaryHistoryEntry.id
        )
        return list(self._session.execute(statement).scalars())
