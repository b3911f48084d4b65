"""Data access for audit log events."""
from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from sqlalchemy import select

from salary_app.models import AuditLogEntry

from .base import BaseRepository


class AuditLogRepository(BaseRepository):
    def append(self, entry: AuditLogEntry) -> AuditLogEntry:
        self._session.add(entry)
        self._session.flush()
        return entry

    def list_events(
        self,
        *,
        actor_id: int | None = None,
        event_types: Sequence[str] | None = None,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditLogEntry]:
        statement = select(AuditLogEntry)
        if actor_id is not None:
            statement = statement.where(AuditLogEntry.actor_id == actor_id)
        if event_types:
            statement = statement.where(AuditLogEntry.event_type.in_(list(event_types)))
        start_at = self._coerce_datetime(start)
        end_at = self._coerce_datetime(end, end_of_day=True)
        if start_at is not None:
            statement = statement.where(AuditLogEntry.created_at >= start_at)
        if end_at is not None:
            statement = statement.where(AuditLogEntry.created_at <= end_at)
        statement = (
            statement.order_by(AuditLogEntry.created_at.desc(), AuditLogEntry.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self._session.execute(statement).scalars())
