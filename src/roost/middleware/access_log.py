"""Per-request access logging in ``combined`` (production) or ``dev`` format."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Literal

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("roost.access")

LogFormat = Literal["combined", "dev"]


def request_target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def format_combined(request: Request, status: int, length: str | None, now: datetime) -> str:
    client = request.client.host if request.client else "-"
    http_version = request.scope.get("http_version", "1.1")
    referer = request.headers.get("referer", "-")
    agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - - [{now:%d/%b/%Y:%H:%M:%S %z}] '
        f'"{request.method} {request_target(request)} HTTP/{http_version}" '
        f'{status} {length or "-"} "{referer}" "{agent}"'
    )


def format_dev(request: Request, status: int, length: str | None, elapsed_ms: float) -> str:
    return f"{request.method} {request_target(request)} {status} {elapsed_ms:.3f} ms - {length or '-'}"


class AccessLogStage(BaseHTTPMiddleware):
    def __init__(self, app: object, log_format: LogFormat = "dev") -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.log_format = log_format

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, None, start)
            raise
        self._log(request, response.status_code, response.headers.get("content-length"), start)
        return response

    def _log(self, request: Request, status: int, length: str | None, start: float) -> None:
        if self.log_format == "combined":
            logger.info(format_combined(request, status, length, datetime.now(timezone.utc)))
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(format_dev(request, status, length, elapsed_ms))
