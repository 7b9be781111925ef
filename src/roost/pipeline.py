"""Request pipeline composition.

:func:`build_stages` returns the middleware stages as an explicit ordered
list. Requests enter at the top and travel down; responses and errors travel
back up. The error stage is listed first so that it wraps every other stage
and sees every failure on the way back out.

Request order:

1. static files
2. body parsing
3. cookie parsing
4. deployment-mode group: proxy trust, combined access log, security
   headers, parameter pollution (production) or dev access log
5. session
6. authentication
7. feature routers (mounted by the app factory)
8. not-found fallback (:func:`route_not_found`)
9. error stage
"""

from __future__ import annotations

from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.types import Receive, Scope, Send
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from roost.context import AppContext
from roost.errors import NotFound
from roost.middleware import (
    AccessLogStage,
    AuthenticationStage,
    BodyParsingStage,
    CookieParsingStage,
    ErrorStage,
    ParameterPollutionStage,
    SecurityHeadersStage,
    SessionStage,
    StaticFilesStage,
)
from roost.middleware.access_log import request_target


def mode_stages(ctx: AppContext) -> list[Middleware]:
    settings = ctx.settings
    if not ctx.mode.is_production:
        return [Middleware(AccessLogStage, log_format="dev")]
    return [
        Middleware(ProxyHeadersMiddleware, trusted_hosts=settings.trusted_proxies),
        Middleware(AccessLogStage, log_format="combined"),
        Middleware(
            SecurityHeadersStage,
            content_security_policy=None,
            cross_origin_embedder_policy=None,
            cross_origin_resource_policy=None,
        ),
        Middleware(ParameterPollutionStage, whitelist=settings.hpp_whitelist),
    ]


def build_stages(ctx: AppContext) -> list[Middleware]:
    settings = ctx.settings
    return [
        Middleware(ErrorStage, templates=ctx.templates, mode=ctx.mode),
        Middleware(StaticFilesStage, directory=settings.public_dir),
        Middleware(BodyParsingStage, max_bytes=settings.body_limit),
        Middleware(CookieParsingStage, secret=settings.cookie_secret),
        *mode_stages(ctx),
        Middleware(SessionStage, ctx=ctx),
        Middleware(AuthenticationStage, manager=ctx.auth),
    ]


def route_not_found_error(request: Request) -> NotFound:
    return NotFound(f"{request.method} {request_target(request)} route not found")


async def route_not_found(scope: Scope, receive: Receive, send: Send) -> None:
    """Router default: no mounted route matched the request."""
    raise route_not_found_error(Request(scope))
