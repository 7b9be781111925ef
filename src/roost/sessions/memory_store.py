"""In-process session store with TTL expiration.

Used for tests, ``SESSION_BACKEND=memory`` and the opt-in fallback when
Redis is unavailable at startup. Sessions do not survive a restart and are
not shared between worker processes. Records are kept as JSON text so the
memory and Redis backends accept the same session values.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any

from roost.sessions.base import SessionStoreError


class MemorySessionStore:
    def __init__(self) -> None:
        # sid -> (JSON record, absolute expiry or None)
        self._records: dict[str, tuple[str, float | None]] = {}
        self._lock = threading.Lock()

    def _live(self, sid: str, now: float) -> str | None:
        record = self._records.get(sid)
        if record is None:
            return None
        payload, expires_at = record
        if expires_at is not None and now > expires_at:
            del self._records[sid]
            return None
        return payload

    async def get(self, sid: str) -> dict[str, Any] | None:
        with self._lock:
            payload = self._live(sid, time.time())
        return None if payload is None else json.loads(payload)

    async def set(self, sid: str, data: dict[str, Any], ttl: int) -> None:
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise SessionStoreError(f"Session {sid!r} is not JSON serializable: {exc}") from exc
        expires_at = time.time() + ttl if ttl else None
        with self._lock:
            self._records[sid] = (payload, expires_at)

    async def destroy(self, sid: str) -> None:
        with self._lock:
            self._records.pop(sid, None)

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        now = time.time()
        with self._lock:
            for sid in list(self._records):
                self._live(sid, now)
            return len(self._records)
