"""Data access for current salary records."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from salary_app.models import SalaryRecord, User

from .base import BaseRepository


class SalaryRepository(BaseRepository):
    def get_by_user(self, user_id: int, *, for_update: bool = False) -> SalaryRecord | None:
        """Load the salary of ``user_id``; ``for_update`` takes a row lock where supported."""

        statement = select(SalaryRecord).where(SalaryRecord.user_id == user_id)
        if for_update:
            statement = statement.with_for_update()
        return self._session.execute(statement).scalar_one_or_none()

    def add(self, record: SalaryRecord) -> SalaryRecord:
        self._session.add(record)
        self._session.flush()
        return record

    def statistics_rows(self) -> list[tuple[Decimal, Decimal, str]]:
        """Return ``(salary_euros, commission, currency)`` for every active user's salary."""

        statement = (
            select(
                SalaryRecord.salary_euros,
                SalaryRecord.commission,
                SalaryRecord.local_currency_code,
            )
            .join(User, User.id == SalaryRecord.user_id)
            .where(User.deleted_at.is_(None))
        )
        return [
            (self._to_decimal(euros), self._to_decimal(commission), str(code))
            for euros, commission, code in self._session.execute(statement)
        ]
