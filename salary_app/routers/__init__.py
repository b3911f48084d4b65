"""FastAPI routers for the salary application."""

from .audit import router as audit_router
from .commission import router as commission_router
from .salaries import router as salaries_router
from .users import router as users_router

__all__ = [
    "audit_router",
    "commission_router",
    "salaries_router",
    "users_router",
]
