"""Middleware binding request metadata to log records."""
from __future__ import annotations

from uuid import uuid4

from starlette.types import ASGIApp, Receive, Scope, Send

from salary_app.core.log import log_context


class RequestContextMiddleware:
    """ASGI middleware that binds ``request_id`` and ``actor_id`` for the request.

    The actor id is taken from the ``X-Actor-Id`` header and the request id
    from ``X-Request-Id``, generating one when absent. Both appear in every
    log line emitted while the request is handled.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode("latin-1") or uuid4().hex[:12]
        actor_id = headers.get(b"x-actor-id", b"").decode("latin-1") or None

        with log_context.scoped(request_id=request_id, actor_id=actor_id):
            await self.app(scope, receive, send)


__all__ = ["RequestContextMiddleware"]
