"""Server-side sessions keyed by a signed cookie.

Sessions are created lazily: a new session is stored, and its cookie issued,
only when a handler writes to it. A loaded session that nobody modified is
never written back. Store failures degrade to an unsaved session and are
logged; they never fail the request.
"""

from __future__ import annotations

import logging

from itsdangerous import BadSignature, Signer
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roost.context import AppContext
from roost.sessions.base import SessionData, SessionStoreError, new_session_id

logger = logging.getLogger("roost.session")

_SALT = "roost.session"


class SessionStage(BaseHTTPMiddleware):
    def __init__(self, app: object, ctx: AppContext) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        settings = ctx.settings
        self.ctx = ctx
        self.signer = Signer(settings.cookie_secret, salt=_SALT)
        self.cookie_name = settings.session_cookie_name
        self.cookie_secure = settings.session_cookie_secure
        self.ttl = settings.session_ttl
        self.trust_proxy = ctx.mode.is_production

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        session = await self._load(request)
        request.scope["session"] = session
        response = await call_next(request)
        await self._commit(request, session, response)
        return response

    def sign(self, sid: str) -> str:
        return self.signer.sign(sid).decode()

    def _unsign(self, value: str) -> str | None:
        try:
            return self.signer.unsign(value).decode()
        except BadSignature:
            return None

    async def _load(self, request: Request) -> SessionData:
        cookie = request.cookies.get(self.cookie_name)
        sid = self._unsign(cookie) if cookie else None
        if sid is None:
            return SessionData(new_session_id())
        try:
            data = await self.ctx.session_store.get(sid)
        except SessionStoreError as exc:
            logger.warning("Session load failed, continuing without session: %s", exc)
            return SessionData(new_session_id())
        if data is None:
            return SessionData(new_session_id())
        return SessionData(sid, data, new=False)

    async def _commit(self, request: Request, session: SessionData, response: Response) -> None:
        if session.previous_sid is not None:
            await self._destroy(session.previous_sid)

        if session.invalidated:
            if not session.new:
                await self._destroy(session.sid)
            if self.cookie_name in request.cookies:
                response.delete_cookie(self.cookie_name, path="/", httponly=True, samesite="lax")
            return

        if not session.modified or (session.new and not session):
            return

        try:
            await self.ctx.session_store.set(session.sid, dict(session), self.ttl)
        except SessionStoreError as exc:
            logger.error("Session save failed for %s %s: %s", request.method, request.url.path, exc)
            return

        if session.new:
            self._issue_cookie(request, response, session.sid)

    async def _destroy(self, sid: str) -> None:
        try:
            await self.ctx.session_store.destroy(sid)
        except SessionStoreError as exc:
            logger.error("Session destroy failed: %s", exc)

    def _is_secure(self, request: Request) -> bool:
        if self.trust_proxy:
            forwarded = request.headers.get("x-forwarded-proto", "")
            if forwarded:
                return forwarded.split(",", 1)[0].strip().lower() == "https"
        return request.url.scheme == "https"

    def _issue_cookie(self, request: Request, response: Response, sid: str) -> None:
        if self.cookie_secure and not self._is_secure(request):
            logger.warning("Not issuing secure session cookie over insecure connection")
            return
        response.set_cookie(
            self.cookie_name,
            self.sign(sid),
            path="/",
            httponly=True,
            secure=self.cookie_secure,
            samesite="lax",
        )
