from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from salary_app.core.config import SalaryPolicySettings
from salary_app.db import create_all, create_sync_engine, get_sessionmaker
from salary_app.models import User
from salary_app.models.base import utcnow
from salary_app.services import (
    AuditService,
    CommissionPolicyService,
    SalaryService,
    UserLockRegistry,
)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_sync_engine(
        "sqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return get_sessionmaker(engine=engine)


@pytest.fixture
def policy() -> SalaryPolicySettings:
    return SalaryPolicySettings()


@pytest.fixture
def make_user(session_factory: sessionmaker[Session]) -> Callable[..., int]:
    """Insert a user and return its id."""

    def _make(name: str = "Ada Lovelace", email: str | None = None, *, deleted: bool = False) -> int:
        with session_factory.begin() as session:
            user = User(
                name=name,
                email=email or f"{name.split()[0].lower()}@example.com",
                deleted_at=utcnow() if deleted else None,
            )
            session.add(user)
            session.flush()
            return user.id

    return _make


@pytest.fixture
def commission_service(
    session_factory: sessionmaker[Session], policy: SalaryPolicySettings
) -> CommissionPolicyService:
    return CommissionPolicyService(session_factory, policy=policy)


@pytest.fixture
def audit_service(session_factory: sessionmaker[Session]) -> AuditService:
    return AuditService(session_factory)


@pytest.fixture
def salary_service(
    session_factory: sessionmaker[Session],
    policy: SalaryPolicySettings,
    commission_service: CommissionPolicyService,
) -> SalaryService:
    return SalaryService(
        session_factory,
        policy=policy,
        commission_reader=commission_service,
        locks=UserLockRegistry(),
    )
