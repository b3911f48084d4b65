"""Repositories wrapping SQLAlchemy sessions for each aggregate."""

from .audit import AuditLogRepository
from .commission import CommissionPolicyRepository
from .history import HistoryLedger
from .salaries import SalaryRepository
from .users import UserRepository

__all__ = [
    "AuditLogRepository",
    "CommissionPolicyRepository",
    "HistoryLedger",
    "SalaryRepository",
    "UserRepository",
]
