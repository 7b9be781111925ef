"""SQLAlchemy engine, session factory and schema synchronization."""

from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

from roost.models import Base

logger = logging.getLogger("roost.db")


def make_engine(url: str) -> Engine:
    """Create the engine; SQLite files get their parent directory created."""
    parsed = make_url(url)
    connect_args: dict[str, object] = {}
    if parsed.get_backend_name() == "sqlite":
        # Routes run in the threadpool, so connections cross threads
        connect_args["check_same_thread"] = False
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, connect_args=connect_args)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def sync_schema(engine: Engine) -> None:
    """Create missing tables. Existing tables are left untouched."""

    Base.metadata.create_all(engine)
    logger.info("Database schema synchronized (%s)", engine.url.render_as_string(hide_password=True))
