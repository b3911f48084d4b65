"""Default commission applied to newly created salary records."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from salary_app.core.config import SalaryPolicySettings, get_settings
from salary_app.core.log import get_logger
from salary_app.domain.errors import SalaryError
from salary_app.domain.money import quantize_money
from salary_app.domain.records import CommissionPolicyDetail
from salary_app.domain.validation import check_commission
from salary_app.models import AuditLogEntry
from salary_app.repositories import AuditLogRepository, CommissionPolicyRepository

LOGGER = get_logger(__name__)


class CommissionPolicyService:
    """Reads and updates the active commission policy row.

    Changing the default never touches existing salary records; only records
    created afterwards pick up the new amount.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        policy: SalaryPolicySettings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._policy = policy or get_settings().salary_policy

    def get_active_default(self) -> Decimal:
        with self._session_factory() as session:
            row = CommissionPolicyRepository(session).get_active()
            if row is None:
                return quantize_money(self._policy.default_commission)
            return quantize_money(row.amount)

    def get_default_commission(self) -> CommissionPolicyDetail:
        with self._session_factory() as session:
            row = CommissionPolicyRepository(session).get_active()
            if row is None:
                return CommissionPolicyDetail(
                    amount=quantize_money(self._policy.default_commission),
                    is_active=True,
                    description="Default commission rate",
                )
            return CommissionPolicyDetail(
                id=row.id,
                amount=quantize_money(row.amount),
                is_active=row.is_active,
                description=row.description,
            )

    def update_default_commission(
        self,
        amount: Any,
        actor_id: int | None = None,
        description: str | None = None,
    ) -> CommissionPolicyDetail:
        checked = check_commission(amount, self._policy)
        if isinstance(checked, SalaryError):
            raise checked

        with self._session_factory.begin() as session:
            row = CommissionPolicyRepository(session).get_or_create_active(
                quantize_money(self._policy.default_commission)
            )
            previous = quantize_money(row.amount)
            row.amount = checked
            if description is not None:
                row.description = description
            session.flush()
            AuditLogRepository(session).append(
                AuditLogEntry(
                    event_type="system_action",
                    actor_id=actor_id,
                    subject_type="CommissionPolicy",
                    subject_id=row.id,
                    description=f"Default commission changed from {previous} to {checked}",
                    event_metadata={"old_amount": str(previous), "new_amount": str(checked)},
                )
            )
            detail = CommissionPolicyDetail(
                id=row.id,
                amount=checked,
                is_active=row.is_active,
                description=row.description,
            )

        LOGGER.info(
            "Default commission updated",
            extra={"actor_id": actor_id, "old_amount": str(previous), "new_amount": str(checked)},
        )
        return detail


__all__ = ["CommissionPolicyService"]
