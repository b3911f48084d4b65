"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.orm import Session, sessionmaker

from salary_app.db.session import get_sessionmaker
from salary_app.services import (
    AuditService,
    CommissionPolicyService,
    SalaryService,
    UserService,
)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Create the session factory once so every request shares one engine."""

    return get_sessionmaker()


def get_actor_id(x_actor_id: int | None = Header(default=None, alias="X-Actor-Id")) -> int | None:
    return x_actor_id


def get_audit_service(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> AuditService:
    return AuditService(session_factory)


def get_commission_service(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
) -> CommissionPolicyService:
    return CommissionPolicyService(session_factory)


def get_salary_service(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
    audit: AuditService = Depends(get_audit_service),
    commissions: CommissionPolicyService = Depends(get_commission_service),
) -> SalaryService:
    """Return a salary service whose committed changes are written to the audit log."""

    return SalaryService(
        session_factory,
        commission_reader=commissions,
        listeners=[audit.record_salary_change],
    )


def get_user_service(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
    audit: AuditService = Depends(get_audit_service),
) -> UserService:
    return UserService(session_factory, audit=audit)
