"""Data access for the default commission policy."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from salary_app.models import CommissionPolicy

from .base import BaseRepository


class CommissionPolicyRepository(BaseRepository):
    def get_active(self) -> CommissionPolicy | None:
        statement = (
            select(CommissionPolicy)
            .where(CommissionPolicy.is_active.is_(True))
            .order_by(CommissionPolicy.id)
            .limit(1)
        )
        return self._session.execute(statement).scalar_one_or_none()

    def get_or_create_active(self, default_amount: Decimal) -> CommissionPolicy:
        policy = self.get_active()
        if policy is None:
            policy = CommissionPolicy(
                amount=default_amount,
                is_active=True,
                description="Default commission rate",
            )
            self._session.add(policy)
            self._session.flush()
        return policy
