"""Explicit application context, built once per process."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker
from starlette.templating import Jinja2Templates

from roost.auth.manager import AuthManager, default_auth_manager
from roost.config import DeploymentMode, Settings
from roost.db import make_engine, make_session_factory
from roost.sessions import MemorySessionStore, RedisSessionStore, SessionStore
from roost.templating import make_templates


@dataclass
class AppContext:
    settings: Settings
    session_store: SessionStore
    engine: Engine
    session_factory: sessionmaker[Session]
    templates: Jinja2Templates
    auth: AuthManager

    @property
    def mode(self) -> DeploymentMode:
        return self.settings.mode


def make_session_store(settings: Settings) -> SessionStore:
    if settings.session_backend == "memory":
        return MemorySessionStore()
    return RedisSessionStore(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        socket_timeout=settings.redis_socket_timeout,
    )


def build_context(settings: Settings, session_store: SessionStore | None = None) -> AppContext:
    """Wire collaborators without performing I/O; the lifespan connects them."""
    engine = make_engine(settings.database_url)
    session_factory = make_session_factory(engine)
    return AppContext(
        settings=settings,
        session_store=session_store if session_store is not None else make_session_store(settings),
        engine=engine,
        session_factory=session_factory,
        templates=make_templates(settings.views_dir),
        auth=default_auth_manager(session_factory),
    )
