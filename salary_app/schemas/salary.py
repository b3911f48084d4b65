"""Request and response models for the salary endpoints."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from salary_app.services.salary_service import DEFAULT_BULK_REASON, DEFAULT_UPDATE_REASON

MAX_BULK_ITEMS = 50


class SalaryUpdateRequest(BaseModel):
    """Body of ``PUT /api/salaries/{user_id}``."""

    local_amount: Decimal
    currency_code: str = Field(default="EUR", min_length=3, max_length=3)
    commission: Decimal | None = None
    reason: str = Field(default=DEFAULT_UPDATE_REASON, min_length=10, max_length=255)
    notes: str | None = Field(default=None, max_length=1000)


class CommissionUpdateRequest(BaseModel):
    commission: Decimal
    reason: str = Field(default="Commission update", min_length=10, max_length=255)


class BulkSalaryItem(BaseModel):
    user_id: int
    local_amount: Decimal | None = None
    currency_code: str | None = Field(default=None, min_length=3, max_length=3)
    commission: Decimal | None = None
    reason: str = Field(default=DEFAULT_BULK_REASON, min_length=10, max_length=255)
    notes: str | None = Field(default=None, max_length=1000)


class BulkSalaryRequest(BaseModel):
    updates: list[BulkSalaryItem] = Field(min_length=1, max_length=MAX_BULK_ITEMS)


class SalaryResponse(BaseModel):
    """Current salary of one user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    salary_local_currency: Decimal
    local_currency_code: str
    salary_euros: Decimal
    commission: Decimal
    displayed_salary: Decimal
    effective_date: date
    notes: str | None = None
    updated_at: datetime | None = None

    @field_serializer(
        "salary_local_currency",
        "salary_euros",
        "commission",
        "displayed_salary",
    )
    def _serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class BulkItemResponse(BaseModel):
    user_id: int | None
    success: bool
    salary: SalaryResponse | None = None
    error: str | None = None
    error_kind: str | None = None


class BulkSalaryResponse(BaseModel):
    results: list[BulkItemResponse]
    total: int
    succeeded: int
    failed: int


class HistoryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    old_salary_local_currency: Decimal | None = None
    new_salary_local_currency: Decimal
    old_currency_code: str | None = None
    new_currency_code: str
    old_salary_euros: Decimal | None = None
    new_salary_euros: Decimal
    old_commission: Decimal | None = None
    new_commission: Decimal
    old_displayed_salary: Decimal | None = None
    new_displayed_salary: Decimal
    changed_by: int | None = None
    change_reason: str
    change_type: str
    change_summary: str
    created_at: datetime

    @field_serializer(
        "old_salary_local_currency",
        "new_salary_local_currency",
        "old_salary_euros",
        "new_salary_euros",
        "old_commission",
        "new_commission",
        "old_displayed_salary",
        "new_displayed_salary",
    )
    def _serialize_decimal(self, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None


class HistoryPageResponse(BaseModel):
    items: list[HistoryEntryResponse]
    total: int
    limit: int
    offset: int


class CurrencyListResponse(BaseModel):
    base_currency: str = "EUR"
    rates: dict[str, Decimal]

    @field_serializer("rates")
    def _serialize_rates(self, value: dict[str, Decimal]) -> dict[str, str]:
        return {code: str(rate) for code, rate in value.items()}


class SalaryStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    count: int
    average_euros: Decimal
    median_euros: Decimal
    min_euros: Decimal
    max_euros: Decimal
    total_commission: Decimal
    average_commission: Decimal
    currency_distribution: dict[str, int]

    @field_serializer(
        "average_euros",
        "median_euros",
        "min_euros",
        "max_euros",
        "total_commission",
        "average_commission",
    )
    def _serialize_decimal(self, value: Decimal) -> str:
        return str(value)


class CommissionPolicyRequest(BaseModel):
    amount: Decimal
    description: str | None = Field(default=None, max_length=255)


class CommissionPolicyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    amount: Decimal
    is_active: bool
    description: str | None = None

    @field_serializer("amount")
    def _serialize_amount(self, value: Decimal) -> str:
        return str(value)
