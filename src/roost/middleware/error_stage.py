"""Terminal stage: turns any error raised further down the chain into a page."""

from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.templating import Jinja2Templates

from roost.config import DeploymentMode
from roost.errors import render_error


class ErrorStage(BaseHTTPMiddleware):
    def __init__(self, app: object, templates: Jinja2Templates, mode: DeploymentMode) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.templates = templates
        self.mode = mode

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return render_error(request, exc, self.templates, self.mode)
