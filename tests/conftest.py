"""Test fixtures: memory sessions, throwaway SQLite, temp public dir."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from fastapi import APIRouter, Request
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

import roost
from roost.app import create_app
from roost.routes import DEFAULT_ROUTERS
from roost.templating import make_templates

VIEWS_DIR = Path(roost.__file__).resolve().parent / "views"


class FakeRedis:
    """Just enough of the async Redis client for the session store."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.fail = fail
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, key):
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def templates():
    return make_templates(VIEWS_DIR)


@pytest.fixture
def public_dir(tmp_path):
    public = tmp_path / "public"
    (public / "css").mkdir(parents=True)
    (public / "hello.txt").write_text("hello from disk\n")
    (public / "css" / "main.css").write_text("body { color: black; }\n")
    return public


@pytest.fixture
def settings(tmp_path, public_dir):
    return {
        "node_env": "development",
        "cookie_secret": "test-cookie-secret",
        "session_backend": "memory",
        "database_url": f"sqlite:///{tmp_path / 'roost.db'}",
        "public_dir": str(public_dir),
        "log_level": "WARNING",
    }


@pytest.fixture
def prod_settings(settings):
    return {**settings, "node_env": "production"}


@pytest.fixture
def probe_calls():
    return []


@pytest.fixture
def probe_router(probe_calls):
    """Extra routes that expose pipeline state to the tests."""
    router = APIRouter()

    @router.get("/count")
    async def count(request: Request) -> dict:
        request.session["n"] = request.session.get("n", 0) + 1
        return {"n": request.session["n"]}

    @router.get("/peek")
    async def peek(request: Request) -> dict:
        return {"n": request.session.get("n")}

    @router.get("/stamp")
    async def stamp(request: Request) -> dict:
        request.session["seen"] = datetime(2024, 1, 1)
        return {"stamped": True}

    @router.get("/boom")
    async def boom() -> dict:
        raise RuntimeError("boom")

    @router.post("/echo")
    async def echo(request: Request) -> dict:
        return {"body": request.state.body}

    @router.get("/query")
    async def query(request: Request) -> dict:
        return {
            "tag": request.query_params.getlist("tag"),
            "polluted": getattr(request.state, "query_polluted", None),
        }

    @router.get("/client")
    async def client_info(request: Request) -> dict:
        return {"host": request.client.host, "scheme": request.url.scheme}

    @router.get("/cookies")
    async def cookies(request: Request) -> dict:
        return {"cookies": request.state.cookies, "signed": request.state.signed_cookies}

    return router


@pytest.fixture
def shadow_router(probe_calls):
    """Claims the path of a static file; it must never be reached."""
    router = APIRouter()

    @router.get("/hello.txt")
    async def shadowed(request: Request) -> dict:
        probe_calls.append(request.url.path)
        return {"from": "router"}

    return router


@pytest.fixture
def probe_routers(probe_router, shadow_router):
    return [*DEFAULT_ROUTERS, ("/probe", probe_router), ("", shadow_router)]


@pytest.fixture
def app(settings, probe_routers):
    return create_app(settings_override=settings, routers=probe_routers)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def prod_app(prod_settings, probe_routers):
    return create_app(settings_override=prod_settings, routers=probe_routers)


@pytest.fixture
def prod_client(prod_app):
    with TestClient(prod_app) as c:
        yield c
