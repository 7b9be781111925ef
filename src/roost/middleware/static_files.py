"""Serve files from the public directory before anything else runs."""

from __future__ import annotations

import logging
import stat

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

logger = logging.getLogger("roost.static")


class StaticFilesStage(BaseHTTPMiddleware):
    def __init__(self, app: object, directory: str) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self.files = StaticFiles(directory=directory, check_dir=False)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method in ("GET", "HEAD"):
            path = self.files.get_path(request.scope)
            try:
                full_path, stat_result = await run_in_threadpool(self.files.lookup_path, path)
            except OSError as exc:
                logger.debug("Static lookup for %s failed: %s", path, exc)
                stat_result = None
            if stat_result is not None and stat.S_ISREG(stat_result.st_mode):
                return self.files.file_response(full_path, stat_result, request.scope)
        return await call_next(request)
