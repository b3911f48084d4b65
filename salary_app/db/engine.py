"""Database engine factories."""
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url

from salary_app.core.config import get_settings
from salary_app.core.log import get_logger

LOGGER = get_logger(__name__)


def get_sqlalchemy_url() -> str:
    """Return the configured SQLAlchemy URL."""

    settings = get_settings()
    return settings.database.sqlalchemy_url


def create_sync_engine(url: str | None = None, **kwargs) -> Engine:
    """Create a synchronous SQLAlchemy engine using configured defaults."""

    settings = get_settings()
    resolved_url = url or settings.database.sqlalchemy_url

    options = dict(kwargs)
    options.setdefault("echo", settings.sqlalchemy_echo)
    if not resolved_url.startswith("sqlite"):
        options.setdefault("pool_pre_ping", True)

    masked_url = make_url(resolved_url).render_as_string(hide_password=True)
    LOGGER.debug("Creating SQLAlchemy engine", extra={"url": masked_url, "options": options})
    engine = create_engine(resolved_url, future=True, **options)
    if engine.dialect.name == "sqlite":
        _use_explicit_sqlite_transactions(engine)
    return engine


def _use_explicit_sqlite_transactions(engine: Engine) -> None:
    """Emit BEGIN ourselves so pysqlite honours SAVEPOINT for batch updates."""

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(connection) -> None:
        connection.exec_driver_sql("BEGIN")


def create_all(engine: Engine) -> None:
    """Create every table registered on the declarative metadata."""

    from salary_app.models import Base

    LOGGER.info("Creating salary schema on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(engine)
