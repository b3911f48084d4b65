"""ORM model for registered users."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ID_TYPE, Base, TimestampMixin

if TYPE_CHECKING:  # pragma: no cover
    from salary_app.models.salary import SalaryRecord


class User(TimestampMixin, Base):
    """A person whose compensation is tracked; soft-deleted via ``deleted_at``."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    salary: Mapped["SalaryRecord | None"] = relationship(back_populates="user", uselist=False)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
