"""Session state object and the store interface."""

from __future__ import annotations

import secrets
from typing import Any, Protocol


class SessionStoreError(Exception):
    """A session store operation failed (unreachable, timeout, bad payload)."""


class SessionStore(Protocol):
    async def connect(self) -> None: ...

    async def close(self) -> None: ...

    async def get(self, sid: str) -> dict[str, Any] | None: ...

    async def set(self, sid: str, data: dict[str, Any], ttl: int) -> None: ...

    async def destroy(self, sid: str) -> None: ...


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


class SessionData(dict):
    """Dict exposed as ``request.session`` that remembers whether it was written.

    ``new`` sessions have no stored record yet; they are only persisted once
    modified. ``invalidate()`` drops the record and the cookie at the end of
    the request; ``regenerate()`` moves the data under a fresh id.
    """

    def __init__(self, sid: str, data: dict[str, Any] | None = None, *, new: bool = True) -> None:
        super().__init__(data or {})
        self.sid = sid
        self.new = new
        self.modified = False
        self.invalidated = False
        self.previous_sid: str | None = None

    def __setitem__(self, key: str, value: Any) -> None:
        super().__setitem__(key, value)
        self.modified = True

    def __delitem__(self, key: str) -> None:
        super().__delitem__(key)
        self.modified = True

    def pop(self, key: str, *default: Any) -> Any:
        if key in self:
            self.modified = True
        return super().pop(key, *default)

    def popitem(self) -> tuple[str, Any]:
        item = super().popitem()
        self.modified = True
        return item

    def setdefault(self, key: str, default: Any = None) -> Any:
        if key not in self:
            self.modified = True
        return super().setdefault(key, default)

    def update(self, *args: Any, **kwargs: Any) -> None:
        super().update(*args, **kwargs)
        self.modified = True

    def clear(self) -> None:
        if self:
            self.modified = True
        super().clear()

    def regenerate(self) -> None:
        if not self.new:
            self.previous_sid = self.sid
        super().clear()
        self.sid = new_session_id()
        self.new = True
        self.modified = True

    def invalidate(self) -> None:
        super().clear()
        self.invalidated = True
