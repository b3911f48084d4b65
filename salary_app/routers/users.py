"""JSON endpoints for user registration and removal."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from salary_app.schemas.users import UserCreateRequest, UserRegistrationResponse, UserResponse
from salary_app.services import UserService

from .dependencies import get_actor_id, get_user_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserRegistrationResponse)
def register_user(
    payload: UserCreateRequest,
    response: Response,
    service: UserService = Depends(get_user_service),
    actor_id: int | None = Depends(get_actor_id),
) -> UserRegistrationResponse:
    user, created = service.register_user(payload.name, payload.email, actor_id=actor_id)
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return UserRegistrationResponse(user=UserResponse.model_validate(user), created=created)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    actor_id: int | None = Depends(get_actor_id),
) -> Response:
    service.delete_user(user_id, actor_id=actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
