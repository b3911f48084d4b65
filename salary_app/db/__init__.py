"""Engine and session factories for the salary database."""

from .engine import create_all, create_sync_engine, get_sqlalchemy_url
from .session import get_sessionmaker

__all__ = ["create_all", "create_sync_engine", "get_sessionmaker", "get_sqlalchemy_url"]
