"""User registration and soft deletion."""
from __future__ import annotations

from sqlalchemy.orm import Session, sessionmaker

from salary_app.core.log import get_logger
from salary_app.domain.errors import RecordNotFound
from salary_app.domain.records import UserDetail
from salary_app.repositories import UserRepository

from .audit_service import AuditService

LOGGER = get_logger(__name__)


class UserService:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        audit: AuditService | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._audit = audit or AuditService(session_factory)

    def register_user(
        self, name: str, email: str, actor_id: int | None = None
    ) -> tuple[UserDetail, bool]:
        """Create a user, or update the one already registered with ``email``."""

        cleaned_name = (name or "").strip()
        cleaned_email = (email or "").strip().lower()
        if not cleaned_name:
            raise ValueError("User name is required")
        if not cleaned_email:
            raise ValueError("User email is required")

        with self._session_factory.begin() as session:
            user, created = UserRepository(session).upsert_by_email(
                name=cleaned_name, email=cleaned_email
            )
            detail = UserDetail.from_row(user)

        LOGGER.info(
            "User %s",
            "registered" if created else "updated",
            extra={"user_id": detail.id, "actor_id": actor_id},
        )
        if created:
            self._audit.log_user_created(detail, actor_id=actor_id)
        else:
            self._audit.log_user_updated(detail, actor_id=actor_id)
        return detail, created

    def delete_user(self, user_id: int, actor_id: int | None = None) -> UserDetail:
        with self._session_factory.begin() as session:
            repository = UserRepository(session)
            user = repository.find_user_by_id(user_id)
            if user is None:
                raise RecordNotFound(f"User {user_id} not found")
            repository.soft_delete(user)
            detail = UserDetail.from_row(user)

        LOGGER.info("User soft deleted", extra={"user_id": user_id, "actor_id": actor_id})
        self._audit.log_user_deleted(detail, actor_id=actor_id)
        return detail

    def get_user(self, user_id: int, *, include_deleted: bool = False) -> UserDetail | None:
        with self._session_factory() as session:
            user = UserRepository(session).find_user_by_id(user_id, include_deleted=include_deleted)
            return UserDetail.from_row(user) if user is not None else None


__all__ = ["UserService"]
