"""Audit trail for user, file, bulk and system events plus ledger statistics."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy.orm import Session, sessionmaker

from salary_app.core.log import get_audit_logger, log_context
from salary_app.domain.errors import RecordNotFound
from salary_app.domain.records import AuditEvent, HistoryEntryDetail, UserDetail
from salary_app.models import AuditLogEntry, ChangeType
from salary_app.models.base import utcnow
from salary_app.repositories import AuditLogRepository, HistoryLedger, UserRepository

from .salary_service import BulkItemResult, SalaryChangeEvent

AUDIT_LOGGER = get_audit_logger("events")

EVENT_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "user_created": "User Created",
        "user_updated": "User Updated",
        "user_deleted": "User Deleted",
        "salary_created": "Salary Created",
        "salary_updated": "Salary Updated",
        "commission_updated": "Commission Updated",
        "file_uploaded": "File Uploaded",
        "file_deleted": "File Deleted",
        "file_verified": "File Verified",
        "bulk_operation": "Bulk Operation",
        "system_action": "System Action",
    }
)

DEFAULT_ACTIVITY_WINDOW = timedelta(days=30)


@dataclass(frozen=True, slots=True)
class UserActivitySummary:
    user: UserDetail
    start: datetime
    end: datetime
    salary_changes: list[HistoryEntryDetail]
    total_salary_changes: int
    last_salary_change: datetime | None


@dataclass(frozen=True, slots=True)
class AuditStatistics:
    """Aggregates over the salary history ledger for a reporting window."""

    start: datetime
    end: datetime
    total_salary_changes: int
    salary_increases: int
    salary_decreases: int
    commission_changes: int
    unique_users_affected: int
    unique_actors_active: int
    average_changes_per_day: Decimal
    most_active_day: date | None
    change_types_distribution: dict[str, int]
    summary: str


def _json_safe(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, datetime.min.time())


def _most_active_day(entries: Sequence[HistoryEntryDetail]) -> date | None:
    if not entries:
        return None
    counts = Counter(entry.created_at.date() for entry in entries)
    # Earliest day wins a tie.
    return min(counts, key=lambda day: (-counts[day], day))


def _summary_sentence(
    total: int, increases: int, decreases: int, users_affected: int
) -> str:
    parts: list[str] = []
    if total:
        parts.append(f"{total} salary changes")
        if increases:
            parts.append(f"{increases} increases")
        if decreases:
            parts.append(f"{decreases} decreases")
    if users_affected:
        parts.append(f"{users_affected} users affected")
    return ", ".join(parts) or "No activity recorded"


class AuditService:
    """Writes audit log rows and answers reporting questions about salary changes."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Event logging
    # ------------------------------------------------------------------
    def log_user_action(
        self,
        event_type: str,
        *,
        actor_id: int | None = None,
        subject_type: str | None = None,
        subject_id: int | None = None,
        metadata: Mapping[str, Any] | None = None,
        description: str | None = None,
    ) -> AuditEvent:
        """Persist one audit event and mirror it to the application log."""

        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown audit event type: {event_type}")

        payload: dict[str, Any] = {"timestamp": utcnow().isoformat()}
        context = log_context.as_dict()
        if context:
            payload["context"] = context
        payload.update(metadata or {})

        entry = AuditLogEntry(
            event_type=event_type,
            actor_id=actor_id,
            subject_type=subject_type,
            subject_id=subject_id,
            description=description or self._describe(event_type, subject_type, subject_id),
            event_metadata=_json_safe(payload),
        )
        with self._session_factory.begin() as session:
            AuditLogRepository(session).append(entry)
            event = AuditEvent.from_row(entry)

        AUDIT_LOGGER.info(
            "Audit event: %s",
            event.description,
            extra={
                "event_type": event_type,
                "actor_id": actor_id,
                "subject_type": subject_type,
                "subject_id": subject_id,
            },
        )
        return event

    def log_user_created(self, user: UserDetail, actor_id: int | None = None) -> AuditEvent:
        return self.log_user_action(
            "user_created",
            actor_id=actor_id,
            subject_type="User",
            subject_id=user.id,
            metadata={"name": user.name, "email": user.email},
            description=f"User created: {user.name} ({user.email})",
        )

    def log_user_updated(self, user: UserDetail, actor_id: int | None = None) -> AuditEvent:
        return self.log_user_action(
            "user_updated",
            actor_id=actor_id,
            subject_type="User",
            subject_id=user.id,
            metadata={"name": user.name, "email": user.email},
            description=f"User updated: {user.name} ({user.email})",
        )

    def log_user_deleted(self, user: UserDetail, actor_id: int | None = None) -> AuditEvent:
        return self.log_user_action(
            "user_deleted",
            actor_id=actor_id,
            subject_type="User",
            subject_id=user.id,
            metadata={"name": user.name, "email": user.email},
            description=f"User deleted: {user.name} ({user.email})",
        )

    def log_file_uploaded(
        self,
        user_id: int,
        original_filename: str,
        *,
        file_size: int | None = None,
        mime_type: str | None = None,
        document_type: str | None = None,
        document_id: int | None = None,
        actor_id: int | None = None,
    ) -> AuditEvent:
        return self.log_user_action(
            "file_uploaded",
            actor_id=actor_id,
            subject_type="UploadedDocument",
            subject_id=document_id,
            metadata={
                "user_id": user_id,
                "original_filename": original_filename,
                "file_size": file_size,
                "mime_type": mime_type,
                "document_type": document_type,
            },
            description=f"File uploaded: {original_filename} for user #{user_id}",
        )

    def log_file_deleted(
        self,
        user_id: int,
        original_filename: str,
        *,
        reason: str | None = None,
        document_id: int | None = None,
        actor_id: int | None = None,
    ) -> AuditEvent:
        return self.log_user_action(
            "file_deleted",
            actor_id=actor_id,
            subject_type="UploadedDocument",
            subject_id=document_id,
            metadata={"user_id": user_id, "original_filename": original_filename, "reason": reason},
            description=f"File deleted: {original_filename} for user #{user_id}",
        )

    def log_file_verified(
        self,
        user_id: int,
        original_filename: str,
        *,
        document_id: int | None = None,
        actor_id: int | None = None,
    ) -> AuditEvent:
        return self.log_user_action(
            "file_verified",
            actor_id=actor_id,
            subject_type="UploadedDocument",
            subject_id=document_id,
            metadata={"user_id": user_id, "original_filename": original_filename},
            description=f"File verified: {original_filename} for user #{user_id}",
        )

    def log_bulk_operation(
        self,
        operation_type: str,
        results: Iterable[BulkItemResult | Mapping[str, Any]],
        actor_id: int | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> AuditEvent:
        rows: list[dict[str, Any]] = []
        for result in results:
            if isinstance(result, BulkItemResult):
                rows.append(
                    {"user_id": result.user_id, "success": result.success, "error": result.error}
                )
            else:
                rows.append(dict(result))
        succeeded = sum(1 for row in rows if row.get("success"))
        failed = len(rows) - succeeded

        payload: dict[str, Any] = {
            "operation_type": operation_type,
            "total_records": len(rows),
            "successful_operations": succeeded,
            "failed_operations": failed,
            "results": rows,
        }
        payload.update(metadata or {})
        return self.log_user_action(
            "bulk_operation",
            actor_id=actor_id,
            metadata=payload,
            description=f"Bulk {operation_type}: {succeeded} successful, {failed} failed",
        )

    def record_salary_change(self, event: SalaryChangeEvent) -> AuditEvent:
        """Listener for committed salary changes."""

        metadata: dict[str, Any] = {
            "reason": event.reason,
            "salary_euros": event.salary.salary_euros,
            "commission": event.salary.commission,
            "displayed_salary": event.salary.displayed_salary,
            "currency": event.salary.local_currency_code,
        }
        history = event.history
        if history is not None:
            metadata["salary_history_id"] = history.id
            metadata["change_type"] = history.change_type
            metadata["changes"] = {
                "salary_local_currency": {
                    "old": history.old_salary_local_currency,
                    "new": history.new_salary_local_currency,
                },
                "salary_euros": {"old": history.old_salary_euros, "new": history.new_salary_euros},
                "commission": {"old": history.old_commission, "new": history.new_commission},
            }

        label = EVENT_TYPES.get(event.event_type, event.event_type)
        return self.log_user_action(
            event.event_type,
            actor_id=event.actor_id,
            subject_type="Salary",
            subject_id=event.salary.id,
            metadata=metadata,
            description=f"{label} for user #{event.user_id}",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_events(
        self,
        *,
        actor_id: int | None = None,
        event_types: Sequence[str] | None = None,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[AuditEvent]:
        with self._session_factory() as session:
            rows = AuditLogRepository(session).list_events(
                actor_id=actor_id,
                event_types=event_types,
                start=start,
                end=end,
                limit=limit,
                offset=offset,
            )
            return [AuditEvent.from_row(row) for row in rows]

    def get_user_activity_summary(
        self,
        user_id: int,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> UserActivitySummary:
        end_at = _as_datetime(end) if end is not None else utcnow()
        start_at = _as_datetime(start) if start is not None else end_at - DEFAULT_ACTIVITY_WINDOW

        with self._session_factory() as session:
            user = UserRepository(session).find_user_by_id(user_id, include_deleted=True)
            if user is None:
                raise RecordNotFound(f"User {user_id} not found")
            ledger = HistoryLedger(session)
            window_end = end if end is not None else end_at
            total = ledger.count_by_user(user_id, start=start_at, end=window_end)
            entries = [
                HistoryEntryDetail.from_row(row)
                for row in ledger.query_by_user(
                    user_id, start=start_at, end=window_end, limit=max(total, 1)
                )
            ]
            detail = UserDetail.from_row(user)

        return UserActivitySummary(
            user=detail,
            start=start_at,
            end=end_at,
            salary_changes=entries,
            total_salary_changes=len(entries),
            last_salary_change=entries[0].created_at if entries else None,
        )

    def get_audit_statistics(
        self,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        actor_id: int | None = None,
    ) -> AuditStatistics:
        end_at = _as_datetime(end) if end is not None else utcnow()
        start_at = _as_datetime(start) if start is not None else end_at - DEFAULT_ACTIVITY_WINDOW

        with self._session_factory() as session:
            rows = HistoryLedger(session).between(
                start if start is not None else start_at,
                end if end is not None else end_at,
                actor_id=actor_id,
            )
            entries = [HistoryEntryDetail.from_row(row) for row in rows]
            increases = sum(1 for row in rows if row.is_salary_increase)
            decreases = sum(1 for row in rows if row.is_salary_decrease)

        total = len(entries)
        days = (end_at.date() - start_at.date()).days
        if days > 0:
            per_day = (Decimal(total) / Decimal(days)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )
        else:
            per_day = Decimal("0.00")

        unique_users = len({entry.user_id for entry in entries})
        return AuditStatistics(
            start=start_at,
            end=end_at,
            total_salary_changes=total,
            salary_increases=increases,
            salary_decreases=decreases,
            commission_changes=sum(
                1 for entry in entries if entry.change_type == ChangeType.COMMISSION_CHANGE.value
            ),
            unique_users_affected=unique_users,
            unique_actors_active=len(
                {entry.changed_by for entry in entries if entry.changed_by is not None}
            ),
            average_changes_per_day=per_day,
            most_active_day=_most_active_day(entries),
            change_types_distribution=dict(Counter(entry.change_type for entry in entries)),
            summary=_summary_sentence(total, increases, decreases, unique_users),
        )

    @staticmethod
    def _describe(event_type: str, subject_type: str | None, subject_id: int | None) -> str:
        name = EVENT_TYPES.get(event_type, event_type)
        if subject_type is None:
            return name
        if subject_id is None:
            return f"{name} - {subject_type}"
        return f"{name} - {subject_type} #{subject_id}"


__all__ = [
    "AuditService",
    "AuditStatistics",
    "DEFAULT_ACTIVITY_WINDOW",
    "EVENT_TYPES",
    "UserActivitySummary",
]
