"""Attach the auth context and restore the logged-in user from the session."""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roost.auth.manager import SESSION_KEY, AuthContext, AuthManager

logger = logging.getLogger("roost.auth")


class AuthenticationStage(BaseHTTPMiddleware):
    def __init__(self, app: object, manager: AuthManager) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.manager = manager

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.auth = AuthContext(self.manager, request)
        request.state.user = None

        session = request.scope.get("session")
        user_id = session.get(SESSION_KEY) if session is not None else None
        if user_id is not None:
            user = await run_in_threadpool(self.manager.deserialize_user, user_id)
            if user is None:
                logger.info("Session refers to missing user %r; dropping it", user_id)
                session.pop(SESSION_KEY, None)
            else:
                request.state.user = user

        return await call_next(request)
