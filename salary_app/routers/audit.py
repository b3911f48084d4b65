"""JSON endpoints exposing the audit trail."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from salary_app.schemas.audit import AuditEventResponse, AuditStatisticsResponse
from salary_app.services import AuditService

from .dependencies import get_audit_service

router = APIRouter(prefix="/api/audit", tags=["audit"])


@router.get("/events", response_model=list[AuditEventResponse])
def list_events(
    actor_id: int | None = None,
    event_type: list[str] | None = Query(default=None),
    start: date | None = None,
    end: date | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    service: AuditService = Depends(get_audit_service),
) -> list[AuditEventResponse]:
    events = service.list_events(
        actor_id=actor_id,
        event_types=event_type,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )
    return [AuditEventResponse.model_validate(event) for event in events]


@router.get("/statistics", response_model=AuditStatisticsResponse)
def audit_statistics(
    start: date | None = None,
    end: date | None = None,
    actor_id: int | None = None,
    service: AuditService = Depends(get_audit_service),
) -> AuditStatisticsResponse:
    return AuditStatisticsResponse.model_validate(
        service.get_audit_statistics(start, end, actor_id=actor_id)
    )
