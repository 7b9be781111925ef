"""Cookie parsing with signature verification.

Signed cookie values look like ``s:<value>.<signature>``. Values whose
signature does not verify are dropped; they never raise.
"""

from __future__ import annotations

from itsdangerous import BadSignature, Signer
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SIGNED_PREFIX = "s:"
_SALT = "roost.cookie"


def cookie_signer(secret: str) -> Signer:
    return Signer(secret, salt=_SALT)


def sign_cookie_value(value: str, secret: str) -> str:
    return SIGNED_PREFIX + cookie_signer(secret).sign(value).decode()


def unsign_cookie_value(value: str, secret: str) -> str | None:
    if not value.startswith(SIGNED_PREFIX):
        return None
    try:
        return cookie_signer(secret).unsign(value[len(SIGNED_PREFIX):]).decode()
    except BadSignature:
        return None


class CookieParsingStage(BaseHTTPMiddleware):
    def __init__(self, app: object, secret: str) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.secret = secret

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        cookies: dict[str, str] = {}
        signed: dict[str, str] = {}
        for name, value in request.cookies.items():
            if not value.startswith(SIGNED_PREFIX):
                cookies[name] = value
                continue
            unsigned = unsign_cookie_value(value, self.secret)
            if unsigned is not None:
                signed[name] = unsigned
        request.state.cookies = cookies
        request.state.signed_cookies = signed
        return await call_next(request)
