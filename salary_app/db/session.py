"""Session factory used by services and scripts."""
from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .engine import create_sync_engine


def get_sessionmaker(url: str | None = None, *, engine: Engine | None = None, **kwargs) -> sessionmaker:
    """Return a ``sessionmaker`` bound to ``engine`` or a new engine for ``url``.

    Sessions keep loaded attributes after commit so services can hand detached
    snapshots back to callers.
    """

    bind = engine or create_sync_engine(url, **kwargs)
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)
