"""JSON endpoints for the default commission policy."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from salary_app.schemas.salary import CommissionPolicyRequest, CommissionPolicyResponse
from salary_app.services import CommissionPolicyService

from .dependencies import get_actor_id, get_commission_service

router = APIRouter(prefix="/api/commission", tags=["commission"])


@router.get("", response_model=CommissionPolicyResponse)
def get_default_commission(
    service: CommissionPolicyService = Depends(get_commission_service),
) -> CommissionPolicyResponse:
    return CommissionPolicyResponse.model_validate(service.get_default_commission())


@router.put("", response_model=CommissionPolicyResponse)
def update_default_commission(
    payload: CommissionPolicyRequest,
    service: CommissionPolicyService = Depends(get_commission_service),
    actor_id: int | None = Depends(get_actor_id),
) -> CommissionPolicyResponse:
    detail = service.update_default_commission(
        payload.amount, actor_id=actor_id, description=payload.description
    )
    return CommissionPolicyResponse.model_validate(detail)
