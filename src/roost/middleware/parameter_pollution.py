"""HTTP parameter pollution protection.

A parameter repeated in the query string (or in a URL-encoded body) is
collapsed to its last value. The repeated values are kept on
``request.state.query_polluted`` and ``request.state.body_polluted``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any
from urllib.parse import parse_qsl, urlencode

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roost.middleware.body_parsing import FORM_TYPE, group_params, media_type


def collapse(
    params: dict[str, Any], whitelist: Iterable[str] = ()
) -> tuple[dict[str, Any], dict[str, list[Any]]]:
    allowed = set(whitelist)
    clean: dict[str, Any] = {}
    polluted: dict[str, list[Any]] = {}
    for key, value in params.items():
        if isinstance(value, list) and key not in allowed:
            polluted[key] = value
            clean[key] = value[-1] if value else ""
        else:
            clean[key] = value
    return clean, polluted


class ParameterPollutionStage(BaseHTTPMiddleware):
    def __init__(self, app: object, whitelist: Iterable[str] = ()) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.whitelist = tuple(whitelist)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        query_string = request.scope.get("query_string", b"").decode("latin-1")
        query = group_params(parse_qsl(query_string, keep_blank_values=True))
        clean_query, query_polluted = collapse(query, self.whitelist)
        if query_polluted:
            request.scope["query_string"] = urlencode(clean_query, doseq=True).encode("latin-1")
        request.state.query_polluted = query_polluted

        body_polluted: dict[str, list[Any]] = {}
        body = getattr(request.state, "body", None)
        if isinstance(body, dict) and media_type(request) == FORM_TYPE:
            request.state.body, body_polluted = collapse(body, self.whitelist)
        request.state.body_polluted = body_polluted

        return await call_next(request)
