"""JSON endpoints for salaries, commissions and salary history."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from salary_app.core.log import get_logger
from salary_app.domain.records import SalaryDetail
from salary_app.schemas.salary import (
    BulkItemResponse,
    BulkSalaryRequest,
    BulkSalaryResponse,
    CommissionUpdateRequest,
    CurrencyListResponse,
    HistoryEntryResponse,
    HistoryPageResponse,
    SalaryResponse,
    SalaryStatisticsResponse,
    SalaryUpdateRequest,
)
from salary_app.services import (
    AuditService,
    BulkSalaryUpdate,
    SalaryService,
    UserService,
)

from .dependencies import (
    get_actor_id,
    get_audit_service,
    get_salary_service,
    get_user_service,
)

router = APIRouter(prefix="/api/salaries", tags=["salaries"])
LOGGER = get_logger(__name__)


def _salary_response(detail: SalaryDetail) -> SalaryResponse:
    return SalaryResponse.model_validate(detail)


@router.get("/currencies", response_model=CurrencyListResponse)
def list_currencies(service: SalaryService = Depends(get_salary_service)) -> CurrencyListResponse:
    return CurrencyListResponse(rates=service.get_supported_currencies())


@router.get("/statistics", response_model=SalaryStatisticsResponse)
def salary_statistics(
    service: SalaryService = Depends(get_salary_service),
) -> SalaryStatisticsResponse:
    return SalaryStatisticsResponse.model_validate(service.get_salary_statistics())


@router.post("/bulk", response_model=BulkSalaryResponse)
def bulk_update(
    payload: BulkSalaryRequest,
    service: SalaryService = Depends(get_salary_service),
    audit: AuditService = Depends(get_audit_service),
    actor_id: int | None = Depends(get_actor_id),
) -> BulkSalaryResponse:
    summary = service.bulk_update_salaries(
        [BulkSalaryUpdate(**item.model_dump()) for item in payload.updates],
        actor_id=actor_id,
    )
    audit.log_bulk_operation("salary_update", summary.results, actor_id=actor_id)
    return BulkSalaryResponse(
        results=[
            BulkItemResponse(
                user_id=result.user_id,
                success=result.success,
                salary=_salary_response(result.salary) if result.salary is not None else None,
                error=result.error,
                error_kind=result.error_kind.value if result.error_kind is not None else None,
            )
            for result in summary.results
        ],
        total=summary.total,
        succeeded=summary.succeeded,
        failed=summary.failed,
    )


@router.get("/{user_id}", response_model=SalaryResponse)
def get_salary(user_id: int, service: SalaryService = Depends(get_salary_service)) -> SalaryResponse:
    detail = service.get_salary(user_id)
    if detail is None:
        raise HTTPException(status_code=404, detail="Salary record not found")
    return _salary_response(detail)


@router.put("/{user_id}", response_model=SalaryResponse)
def update_salary(
    user_id: int,
    payload: SalaryUpdateRequest,
    service: SalaryService = Depends(get_salary_service),
    actor_id: int | None = Depends(get_actor_id),
) -> SalaryResponse:
    detail = service.create_or_update_salary(
        user_id,
        payload.local_amount,
        currency_code=payload.currency_code,
        commission=payload.commission,
        reason=payload.reason,
        actor_id=actor_id,
        notes=payload.notes,
    )
    return _salary_response(detail)


@router.patch("/{user_id}/commission", response_model=SalaryResponse)
def update_commission(
    user_id: int,
    payload: CommissionUpdateRequest,
    service: SalaryService = Depends(get_salary_service),
    actor_id: int | None = Depends(get_actor_id),
) -> SalaryResponse:
    detail = service.update_commission(
        user_id, payload.commission, actor_id=actor_id, reason=payload.reason
    )
    return _salary_response(detail)


@router.get("/{user_id}/history", response_model=HistoryPageResponse)
def salary_history(
    user_id: int,
    start: date | None = None,
    end: date | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    service: SalaryService = Depends(get_salary_service),
    users: UserService = Depends(get_user_service),
) -> HistoryPageResponse:
    if users.get_user(user_id, include_deleted=True) is None:
        raise HTTPException(status_code=404, detail="User not found")
    if start is not None and end is not None and end < start:
        raise HTTPException(status_code=422, detail="end must not be before start")

    page = service.get_salary_history(user_id, start=start, end=end, limit=limit, offset=offset)
    return HistoryPageResponse(
        items=[HistoryEntryResponse.model_validate(item) for item in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )
