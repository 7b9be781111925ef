"""Jinja2 template loading and page rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from starlette.requests import Request
from starlette.responses import Response
from starlette.templating import Jinja2Templates


def make_templates(views_dir: str | Path) -> Jinja2Templates:
    return Jinja2Templates(directory=str(views_dir))


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """Render a page with the logged-in user available as ``user``."""
    templates: Jinja2Templates = request.app.state.ctx.templates
    page_context = {"user": getattr(request.state, "user", None)}
    page_context.update(context or {})
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
