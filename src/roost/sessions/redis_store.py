"""Redis-backed session store (``sess:<sid>`` keys holding JSON)."""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from roost.sessions.base import SessionStoreError

logger = logging.getLogger("roost.session")

KEY_PREFIX = "sess:"


class RedisSessionStore:
    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        socket_timeout: float | None = 5.0,
        prefix: str = KEY_PREFIX,
        client: aioredis.Redis | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._password = password
        self._socket_timeout = socket_timeout
        self._prefix = prefix
        self._client = client

    def _key(self, sid: str) -> str:
        return f"{self._prefix}{sid}"

    async def connect(self) -> None:
        if self._client is None:
            self._client = aioredis.Redis(
                host=self._host,
                port=self._port,
                password=self._password,
                socket_timeout=self._socket_timeout,
                socket_connect_timeout=self._socket_timeout,
                decode_responses=True,
            )
        try:
            await self._client.ping()
        except (RedisError, OSError) as exc:
            raise SessionStoreError(f"Redis at {self._host}:{self._port} unreachable: {exc}") from exc
        logger.info("Redis session store connected at %s:%s", self._host, self._port)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(self, sid: str) -> dict[str, Any] | None:
        if not self._client:
            raise SessionStoreError("Redis session store is not connected")
        try:
            raw = await self._client.get(self._key(sid))
        except (RedisError, OSError) as exc:
            raise SessionStoreError(f"Session read failed: {exc}") from exc
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise SessionStoreError(f"Corrupt session record {sid!r}") from exc
        return data if isinstance(data, dict) else None

    async def set(self, sid: str, data: dict[str, Any], ttl: int) -> None:
        if not self._client:
            raise SessionStoreError("Redis session store is not connected")
        try:
            payload = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise SessionStoreError(f"Session {sid!r} is not JSON serializable: {exc}") from exc
        try:
            await self._client.set(self._key(sid), payload, ex=ttl or None)
        except (RedisError, OSError) as exc:
            raise SessionStoreError(f"Session write failed: {exc}") from exc

    async def destroy(self, sid: str) -> None:
        if not self._client:
            raise SessionStoreError("Redis session store is not connected")
        try:
            await self._client.delete(self._key(sid))
        except (RedisError, OSError) as exc:
            raise SessionStoreError(f"Session delete failed: {exc}") from exc
