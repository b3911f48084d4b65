"""Data access for users."""
from __future__ import annotations

from sqlalchemy import func, select

from salary_app.models import User
from salary_app.models.base import utcnow

from .base import BaseRepository


class UserRepository(BaseRepository):
    def find_user_by_id(self, user_id: int, *, include_deleted: bool = False) -> User | None:
        user = self._session.get(User, user_id)
        if user is None or (user.is_deleted and not include_deleted):
            return None
        return user

    def lock_active_user(self, user_id: int) -> User | None:
        """Load a non-deleted user and hold its row lock until the transaction ends.

        Salary writes take this lock before reading or inserting the user's
        salary row, which also covers users without a row yet.
        """

        statement = (
            select(User)
            .where(User.id == user_id, User.deleted_at.is_(None))
            .with_for_update()
        )
        return self._session.execute(statement).scalar_one_or_none()

    def find_by_email(self, email: str) -> User | None:
        statement = select(User).where(func.lower(User.email) == email.strip().lower())
        return self._session.execute(statement).scalar_one_or_none()

    def upsert_by_email(self, *, name: str, email: str) -> tuple[User, bool]:
        """Create a user, or update the one already holding ``email``.

        Returns the user and whether it was newly created. A soft-deleted user
        registering again is restored.
        """

        normalized = email.strip().lower()
        existing = self.find_by_email(normalized)
        if existing is not None:
            existing.name = name
            existing.deleted_at = None
            self._session.flush()
            return existing, False

        user = User(name=name, email=normalized)
        self._session.add(user)
        self._session.flush()
        return user, True

    def soft_delete(self, user: User) -> None:
        user.deleted_at = utcnow()
        self._session.flush()
