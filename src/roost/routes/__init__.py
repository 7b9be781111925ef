"""Feature routers and the prefixes they are mounted at, in registration order."""

from __future__ import annotations

from fastapi import APIRouter

from roost.routes.auth import router as auth_router
from roost.routes.page import router as page_router
from roost.routes.post import router as post_router
from roost.routes.user import router as user_router

DEFAULT_ROUTERS: list[tuple[str, APIRouter]] = [
    ("", page_router),
    ("/auth", auth_router),
    ("/post", post_router),
    ("/user", user_router),
]
