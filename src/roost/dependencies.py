"""FastAPI dependency injection wiring."""

from __future__ import annotations

from typing import Any, Generator, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from roost.auth.manager import AuthContext
from roost.context import AppContext
from roost.errors import BadRequest, Forbidden
from roost.models import User

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


def get_db(request: Request) -> Generator[Session, None, None]:
    with get_context(request).session_factory() as session:
        yield session


def get_auth(request: Request) -> AuthContext:
    return request.state.auth


def current_user(request: Request) -> User | None:
    return getattr(request.state, "user", None)


def login_required(request: Request) -> User:
    user = current_user(request)
    if user is None:
        raise Forbidden("Login required")
    return user


def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """Validate the body decoded by the body-parsing stage."""
    body: Any = getattr(request.state, "body", {})
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors())
        raise BadRequest(f"Invalid form fields: {fields}") from exc
