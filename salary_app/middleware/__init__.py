"""ASGI middleware for the salary application."""

from .request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
