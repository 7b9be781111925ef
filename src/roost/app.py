"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Sequence

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from roost import __version__
from roost.config import Settings
from roost.context import AppContext, build_context
from roost.db import sync_schema
from roost.errors import AppError, StartupError, render_error
from roost.observability.logging import setup_logging
from roost.pipeline import build_stages, route_not_found, route_not_found_error
from roost.routes import DEFAULT_ROUTERS
from roost.sessions import MemorySessionStore, SessionStore, SessionStoreError

logger = logging.getLogger("roost.app")


async def connect_session_store(ctx: AppContext) -> None:
    try:
        await ctx.session_store.connect()
    except SessionStoreError as exc:
        if not ctx.settings.session_store_fallback_to_memory:
            raise StartupError(f"Session store unavailable: {exc}") from exc
        logger.warning("Session store unavailable (%s), using in-memory sessions", exc)
        ctx.session_store = MemorySessionStore()
        await ctx.session_store.connect()
    logger.info("Session store ready (%s)", type(ctx.session_store).__name__)


async def synchronize_schema(ctx: AppContext) -> None:
    try:
        await run_in_threadpool(sync_schema, ctx.engine)
    except SQLAlchemyError as exc:
        raise StartupError(f"Database schema synchronization failed: {exc}") from exc


STARTUP_STEPS = (connect_session_store, synchronize_schema)


def create_app(
    settings_override: dict[str, Any] | None = None,
    *,
    session_store: SessionStore | None = None,
    routers: Sequence[tuple[str, APIRouter]] | None = None,
) -> FastAPI:
    settings = Settings(**(settings_override or {}))
    setup_logging(settings.log_level, settings.log_dir)
    ctx = build_context(settings, session_store=session_store)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # --- Startup ---
        for step in STARTUP_STEPS:
            await step(ctx)
        logger.info("Roost v%s started in %s mode on port %d", __version__, ctx.mode.value, settings.port)
        yield

        # --- Shutdown ---
        await ctx.session_store.close()
        ctx.engine.dispose()

    app = FastAPI(
        title="Roost",
        version=__version__,
        lifespan=lifespan,
        middleware=build_stages(ctx),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.ctx = ctx

    async def handle_error(request: Request, exc: Exception) -> Response:
        # A known path without a handler for the method falls through like any unrouted request
        if isinstance(exc, StarletteHTTPException) and exc.status_code == 405:
            exc = route_not_found_error(request)
        return render_error(request, exc, ctx.templates, ctx.mode)

    app.add_exception_handler(AppError, handle_error)
    app.add_exception_handler(StarletteHTTPException, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)

    # Routes, first matching prefix wins
    for prefix, router in (routers if routers is not None else DEFAULT_ROUTERS):
        app.include_router(router, prefix=prefix)
    app.router.default = route_not_found

    return app
