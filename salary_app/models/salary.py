"""ORM model for the current salary of a user."""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Text, event
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salary_app.domain.money import calculate_displayed_salary

from .base import ID_TYPE, Base, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from salary_app.models.users import User

DEFAULT_COMMISSION = Decimal("500.00")


class SalaryRecord(TimestampMixin, Base):
    """One row per user holding local, euro and commission amounts.

    ``displayed_salary`` is always ``salary_euros + commission``; it is
    recomputed before every insert and update.
    """

    __tablename__ = "salaries"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    salary_local_currency: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    local_currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")
    salary_euros: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, index=True)
    commission: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=DEFAULT_COMMISSION
    )
    displayed_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    notes: Mapped[str | None] = mapped_column(Text)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    user: Mapped["User"] = relationship(back_populates="salary")

    __mapper_args__ = {"version_id_col": version}

    def recalculate_displayed_salary(self) -> Decimal:
        commission = self.commission if self.commission is not None else DEFAULT_COMMISSION
        self.displayed_salary = calculate_displayed_salary(self.salary_euros, commission)
        return self.displayed_salary


@event.listens_for(SalaryRecord, "before_insert")
@event.listens_for(SalaryRecord, "before_update")
def _reconcile_displayed_salary(mapper, connection, target: SalaryRecord) -> None:
    if target.commission is None:
        target.commission = DEFAULT_COMMISSION
    target.recalculate_displayed_salary()
