from roost.sessions.base import SessionData, SessionStore, SessionStoreError
from roost.sessions.memory_store import MemorySessionStore
from roost.sessions.redis_store import RedisSessionStore

__all__ = [
    "MemorySessionStore",
    "RedisSessionStore",
    "SessionData",
    "SessionStore",
    "SessionStoreError",
]
