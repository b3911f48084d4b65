"""Service layer entrypoints for domain logic."""

from .audit_service import EVENT_TYPES, AuditService, AuditStatistics, UserActivitySummary
from .commission_service import CommissionPolicyService
from .locks import UserLockRegistry, user_locks
from .salary_service import (
    BulkItemResult,
    BulkSalaryUpdate,
    BulkUpdateSummary,
    CommissionDefaultReader,
    SalaryChangeEvent,
    SalaryService,
)
from .user_service import UserService

__all__ = [
    "EVENT_TYPES",
    "AuditService",
    "AuditStatistics",
    "BulkItemResult",
    "BulkSalaryUpdate",
    "BulkUpdateSummary",
    "CommissionDefaultReader",
    "CommissionPolicyService",
    "SalaryChangeEvent",
    "SalaryService",
    "UserActivitySummary",
    "UserLockRegistry",
    "UserService",
    "user_locks",
]
