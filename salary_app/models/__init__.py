"""Database models for the salary domain."""
from __future__ import annotations

from .base import Base, TimestampMixin
from .users import User
from .salary import DEFAULT_COMMISSION, SalaryRecord
from .history import ChangeType, SalaryHistoryEntry
from .commission import CommissionPolicy
from .audit import AuditLogEntry

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "DEFAULT_COMMISSION",
    "SalaryRecord",
    "ChangeType",
    "SalaryHistoryEntry",
    "CommissionPolicy",
    "AuditLogEntry",
]
