"""Error taxonomy and the terminal error renderer.

Every failure response in the application is produced by :func:`render_error`.
Stages and routes only raise; they never build their own error pages.
"""

from __future__ import annotations

import logging
import traceback
from typing import Any

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.templating import Jinja2Templates

from roost.config import DeploymentMode

logger = logging.getLogger("roost.errors")

ERROR_TEMPLATE = "error.html"


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(AppError):
    status_code = 400


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class PayloadTooLarge(AppError):
    status_code = 413


class StartupError(RuntimeError):
    """Raised from the lifespan when a startup step fails."""


def error_status(exc: BaseException) -> int:
    if isinstance(exc, RequestValidationError):
        return 400
    status = getattr(exc, "status_code", None)
    return status if isinstance(status, int) else 500


def error_message(exc: BaseException) -> str:
    if isinstance(exc, AppError):
        return exc.message
    if isinstance(exc, RequestValidationError):
        parts = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()))
            parts.append(f"{loc}: {err.get('msg', 'invalid')}")
        return "Invalid request: " + "; ".join(parts)
    if isinstance(exc, StarletteHTTPException):
        return exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return str(exc) or type(exc).__name__


def error_context(exc: BaseException, mode: DeploymentMode) -> dict[str, Any]:
    """Detail exposed to the error template; empty in production."""
    if mode.is_production:
        return {}
    return {
        "type": type(exc).__name__,
        "status": error_status(exc),
        "message": error_message(exc),
        "stack": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    }


def render_error(
    request: Request,
    exc: BaseException,
    templates: Jinja2Templates,
    mode: DeploymentMode,
) -> Response:
    status = error_status(exc)
    message = error_message(exc)

    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, message, exc_info=exc)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, status, message)

    headers = getattr(exc, "headers", None) if isinstance(exc, StarletteHTTPException) else None
    try:
        return templates.TemplateResponse(
            request,
            ERROR_TEMPLATE,
            {
                "message": message,
                "error": error_context(exc, mode),
                "user": getattr(request.state, "user", None),
            },
            status_code=status,
            headers=headers,
        )
    except Exception:
        logger.exception("Rendering %s failed", ERROR_TEMPLATE)
        return PlainTextResponse(message, status_code=status, headers=headers)
