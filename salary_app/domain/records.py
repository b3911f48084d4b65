"""Detached, immutable views of persisted rows returned by the services."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class SalaryDetail:
    """Current salary of a user."""

    id: int
    user_id: int
    salary_local_currency: Decimal
    local_currency_code: str
    salary_euros: Decimal
    commission: Decimal
    displayed_salary: Decimal
    effective_date: date
    notes: str | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: object) -> "SalaryDetail":
        return cls(
            id=int(getattr(row, "id")),
            user_id=int(getattr(row, "user_id")),
            salary_local_currency=Decimal(getattr(row, "salary_local_currency")),
            local_currency_code=str(getattr(row, "local_currency_code")),
            salary_euros=Decimal(getattr(row, "salary_euros")),
            commission=Decimal(getattr(row, "commission")),
            displayed_salary=Decimal(getattr(row, "displayed_salary")),
            effective_date=getattr(row, "effective_date"),
            notes=getattr(row, "notes"),
            created_at=getattr(row, "created_at", None),
            updated_at=getattr(row, "updated_at", None),
        )


def _optional_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(value)


@dataclass(frozen=True, slots=True)
class HistoryEntryDetail:
    id: int
    user_id: int
    salary_id: int
    old_salary_local_currency: Decimal | None
    new_salary_local_currency: Decimal
    old_currency_code: str | None
    new_currency_code: str
    old_salary_euros: Decimal | None
    new_salary_euros: Decimal
    old_commission: Decimal | None
    new_commission: Decimal
    old_displayed_salary: Decimal | None
    new_displayed_salary: Decimal
    changed_by: int | None
    change_reason: str
    change_type: str
    change_summary: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: object) -> "HistoryEntryDetail":
        return cls(
            id=int(getattr(row, "id")),
            user_id=int(getattr(row, "user_id")),
            salary_id=int(getattr(row, "salary_id")),
            old_salary_local_currency=_optional_decimal(getattr(row, "old_salary_local_currency")),
            new_salary_local_currency=Decimal(getattr(row, "new_salary_local_currency")),
            old_currency_code=getattr(row, "old_currency_code"),
            new_currency_code=str(getattr(row, "new_currency_code")),
            old_salary_euros=_optional_decimal(getattr(row, "old_salary_euros")),
            new_salary_euros=Decimal(getattr(row, "new_salary_euros")),
            old_commission=_optional_decimal(getattr(row, "old_commission")),
            new_commission=Decimal(getattr(row, "new_commission")),
            old_displayed_salary=_optional_decimal(getattr(row, "old_displayed_salary")),
            new_displayed_salary=Decimal(getattr(row, "new_displayed_salary")),
            changed_by=getattr(row, "changed_by"),
            change_reason=str(getattr(row, "change_reason")),
            change_type=str(getattr(row, "change_type")),
            change_summary=str(getattr(row, "change_summary")),
            created_at=getattr(row, "created_at"),
        )


@dataclass(frozen=True, slots=True)
class HistoryPage:
    items: Sequence[HistoryEntryDetail]
    total: int
    limit: int
    offset: int


@dataclass(frozen=True, slots=True)
class UserDetail:
    id: int
    name: str
    email: str
    deleted_at: datetime | None = None

    @classmethod
    def from_row(cls, row: object) -> "UserDetail":
        return cls(
            id=int(getattr(row, "id")),
            name=str(getattr(row, "name")),
            email=str(getattr(row, "email")),
            deleted_at=getattr(row, "deleted_at", None),
        )


@dataclass(frozen=True, slots=True)
class CommissionPolicyDetail:
    amount: Decimal
    is_active: bool
    description: str | None
    id: int | None = None


@dataclass(frozen=True, slots=True)
class AuditEvent:
    id: int
    event_type: str
    actor_id: int | None
    subject_type: str | None
    subject_id: int | None
    description: str
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: object) -> "AuditEvent":
        return cls(
            id=int(getattr(row, "id")),
            event_type=str(getattr(row, "event_type")),
            actor_id=getattr(row, "actor_id"),
            subject_type=getattr(row, "subject_type"),
            subject_id=getattr(row, "subject_id"),
            description=str(getattr(row, "description")),
            metadata=dict(getattr(row, "event_metadata") or {}),
            created_at=getattr(row, "created_at"),
        )
