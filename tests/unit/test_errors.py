"""Tests for the error taxonomy and the terminal renderer."""

from __future__ import annotations

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request

from roost.config import DeploymentMode
from roost.errors import (
    BadRequest,
    Forbidden,
    NotFound,
    PayloadTooLarge,
    error_context,
    error_message,
    error_status,
    render_error,
)


def make_request(path: str = "/x") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": [],
        "scheme": "http",
        "server": ("testserver", 80),
    })


def raised(exc: Exception) -> Exception:
    try:
        raise exc
    except Exception as caught:
        return caught


@pytest.mark.parametrize("exc, status", [
    (BadRequest("bad"), 400),
    (Forbidden("no"), 403),
    (NotFound("gone"), 404),
    (PayloadTooLarge("big"), 413),
    (HTTPException(status_code=405, detail="Method Not Allowed"), 405),
    (RequestValidationError([]), 400),
    (RuntimeError("boom"), 500),
])
def test_error_status(exc, status):
    assert error_status(exc) == status


def test_error_message():
    assert error_message(NotFound("GET /x route not found")) == "GET /x route not found"
    assert error_message(HTTPException(status_code=405, detail="Method Not Allowed")) == "Method Not Allowed"
    assert error_message(RuntimeError("boom")) == "boom"
    assert error_message(RuntimeError()) == "RuntimeError"


def test_explicit_status_overrides_class_default():
    assert error_status(NotFound("x", status_code=410)) == 410


def test_context_is_detailed_outside_production():
    context = error_context(raised(RuntimeError("boom")), DeploymentMode.DEVELOPMENT)
    assert context["type"] == "RuntimeError"
    assert context["status"] == 500
    assert "Traceback" in context["stack"]


def test_context_is_empty_in_production():
    assert error_context(raised(RuntimeError("boom")), DeploymentMode.PRODUCTION) == {}


def test_render_error_development(templates):
    response = render_error(make_request(), raised(NotFound("GET /x route not found")), templates, DeploymentMode.DEVELOPMENT)
    assert response.status_code == 404
    assert response.context["message"] == "GET /x route not found"
    assert response.context["error"]["type"] == "NotFound"
    assert b"GET /x route not found" in response.body


def test_render_error_production(templates):
    response = render_error(make_request(), raised(RuntimeError("boom")), templates, DeploymentMode.PRODUCTION)
    assert response.status_code == 500
    assert response.context["message"] == "boom"
    assert response.context["error"] == {}
    assert b"Traceback" not in response.body


def test_render_error_survives_missing_template(tmp_path):
    from roost.templating import make_templates

    response = render_error(make_request(), BadRequest("bad input"), make_templates(tmp_path), DeploymentMode.DEVELOPMENT)
    assert response.status_code == 400
    assert response.body == b"bad input"
