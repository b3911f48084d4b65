"""Schema definitions for audit listings and statistics."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer


class AuditEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_type: str
    actor_id: int | None = None
    subject_type: str | None = None
    subject_id: int | None = None
    description: str
    metadata: dict[str, Any]
    created_at: datetime | None = None


class AuditStatisticsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    start: datetime
    end: datetime
    total_salary_changes: int
    salary_increases: int
    salary_decreases: int
    commission_changes: int
    unique_users_affected: int
    unique_actors_active: int
    average_changes_per_day: Decimal
    most_active_day: date | None = None
    change_types_distribution: dict[str, int]
    summary: str

    @field_serializer("average_changes_per_day")
    def _serialize_average(self, value: Decimal) -> str:
        return str(value)
