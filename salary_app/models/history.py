"""Append-only ledger of salary and commission changes."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, event
from sqlalchemy.orm import Mapped, mapped_column

from salary_app.core.formatting import format_signed_currency
from salary_app.domain.errors import ImmutableRecordError
from salary_app.domain.money import quantize_money

from .base import ID_TYPE, Base, utcnow


class ChangeType(str, Enum):
    CREATE = "create"
    SALARY_CHANGE = "salary_change"
    COMMISSION_CHANGE = "commission_change"
    GENERAL_UPDATE = "general_update"


def _difference(old: Decimal | None, new: Decimal | None) -> Decimal | None:
    if old is None or new is None:
        return None
    return quantize_money(new - old)


class SalaryHistoryEntry(Base):
    """One committed change to a salary record. Never updated or deleted."""

    __tablename__ = "salary_histories"
    __table_args__ = (
        Index("ix_salary_histories_user_created", "user_id", "created_at"),
        Index("ix_salary_histories_changed_by", "changed_by"),
    )

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    salary_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("salaries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    old_salary_local_currency: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    new_salary_local_currency: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    old_currency_code: Mapped[str | None] = mapped_column(String(3))
    new_currency_code: Mapped[str] = mapped_column(String(3), nullable=False)
    old_salary_euros: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    new_salary_euros: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    old_commission: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    new_commission: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    old_displayed_salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    new_displayed_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    changed_by: Mapped[int | None] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="SET NULL")
    )
    change_reason: Mapped[str] = mapped_column(String(500), nullable=False)
    change_type: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    @staticmethod
    def determine_change_type(
        old_local: Decimal | None,
        new_local: Decimal,
        old_commission: Decimal | None,
        new_commission: Decimal,
    ) -> ChangeType:
        if old_local is None:
            return ChangeType.CREATE
        if old_local != new_local:
            return ChangeType.SALARY_CHANGE
        if old_commission != new_commission:
            return ChangeType.COMMISSION_CHANGE
        return ChangeType.GENERAL_UPDATE

    @property
    def salary_change_amount(self) -> Decimal | None:
        return _difference(self.old_salary_euros, self.new_salary_euros)

    @property
    def commission_change_amount(self) -> Decimal | None:
        return _difference(self.old_commission, self.new_commission)

    @property
    def total_change_amount(self) -> Decimal | None:
        return _difference(self.old_displayed_salary, self.new_displayed_salary)

    @property
    def is_salary_increase(self) -> bool:
        amount = self.salary_change_amount
        return amount is not None and amount > 0

    @property
    def is_salary_decrease(self) -> bool:
        amount = self.salary_change_amount
        return amount is not None and amount < 0

    @property
    def change_summary(self) -> str:
        parts: list[str] = []
        salary_change = self.salary_change_amount
        if salary_change:
            parts.append(f"Salary: {format_signed_currency(salary_change)}")
        commission_change = self.commission_change_amount
        if commission_change:
            parts.append(f"Commission: {format_signed_currency(commission_change)}")
        return ", ".join(parts) or "No changes"


@event.listens_for(SalaryHistoryEntry, "before_update")
def _reject_history_update(mapper, connection, target: SalaryHistoryEntry) -> None:
    raise ImmutableRecordError(f"Salary history entry {target.id} is immutable")


@event.listens_for(SalaryHistoryEntry, "before_delete")
def _reject_history_delete(mapper, connection, target: SalaryHistoryEntry) -> None:
    raise ImmutableRecordError(f"Salary history entry {target.id} cannot be deleted")
