"""Decode JSON and URL-encoded request bodies into ``request.state.body``."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from roost.errors import BadRequest, PayloadTooLarge

FORM_TYPE = "application/x-www-form-urlencoded"


def media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";", 1)[0].strip().lower()


def is_json(content_type: str) -> bool:
    return content_type == "application/json" or content_type.endswith("+json")


def group_params(pairs: list[tuple[str, str]]) -> dict[str, str | list[str]]:
    """A key seen once maps to its value, a repeated key to the list of values."""
    grouped: dict[str, str | list[str]] = {}
    for key, value in pairs:
        if key not in grouped:
            grouped[key] = value
            continue
        existing = grouped[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            grouped[key] = [existing, value]
    return grouped


class BodyParsingStage(BaseHTTPMiddleware):
    def __init__(self, app: object, max_bytes: int = 102_400) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        content_type = media_type(request)
        body: Any = {}
        if is_json(content_type):
            raw = await self._read(request)
            if raw.strip():
                body = self._parse_json(raw)
        elif content_type == FORM_TYPE:
            raw = await self._read(request)
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise BadRequest(f"Malformed form body: {exc}") from exc
            body = group_params(parse_qsl(text, keep_blank_values=True))
        request.state.body = body
        return await call_next(request)

    async def _read(self, request: Request) -> bytes:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
            raise PayloadTooLarge(f"Request body too large (max {self.max_bytes} bytes)")
        raw = await request.body()
        if len(raw) > self.max_bytes:
            raise PayloadTooLarge(f"Request body too large (max {self.max_bytes} bytes)")
        return raw

    @staticmethod
    def _parse_json(raw: bytes) -> Any:
        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise BadRequest(f"Malformed JSON body: {exc}") from exc
        if not isinstance(body, (dict, list)):
            raise BadRequest("Malformed JSON body: expected an object or array")
        return body
