"""Pydantic schemas shared by the HTTP routers."""

from .audit import AuditEventResponse, AuditStatisticsResponse
from .salary import (
    BulkItemResponse,
    BulkSalaryItem,
    BulkSalaryRequest,
    BulkSalaryResponse,
    CommissionPolicyRequest,
    CommissionPolicyResponse,
    CommissionUpdateRequest,
    CurrencyListResponse,
    HistoryEntryResponse,
    HistoryPageResponse,
    SalaryResponse,
    SalaryStatisticsResponse,
    SalaryUpdateRequest,
)
from .users import UserCreateRequest, UserRegistrationResponse, UserResponse

__all__ = [
    "AuditEventResponse",
    "AuditStatisticsResponse",
    "BulkItemResponse",
    "BulkSalaryItem",
    "BulkSalaryRequest",
    "BulkSalaryResponse",
    "CommissionPolicyRequest",
    "CommissionPolicyResponse",
    "CommissionUpdateRequest",
    "CurrencyListResponse",
    "HistoryEntryResponse",
    "HistoryPageResponse",
    "SalaryResponse",
    "SalaryStatisticsResponse",
    "SalaryUpdateRequest",
    "UserCreateRequest",
    "UserRegistrationResponse",
    "UserResponse",
]
