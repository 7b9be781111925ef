"""Authentication manager: maps users to session values and back."""

from __future__ import annotations

from typing import Any, Callable

from sqlalchemy.orm import Session, sessionmaker
from starlette.requests import Request

from roost.models import User

SESSION_KEY = "auth_user"


class AuthManager:
    def __init__(
        self,
        serialize_user: Callable[[Any], Any],
        deserialize_user: Callable[[Any], Any | None],
    ) -> None:
        self.serialize_user = serialize_user
        self.deserialize_user = deserialize_user


class AuthContext:
    """Per-request handle attached as ``request.state.auth``."""

    def __init__(self, manager: AuthManager, request: Request) -> None:
        self._manager = manager
        self._request = request

    @property
    def user(self) -> Any | None:
        return getattr(self._request.state, "user", None)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def login(self, user: Any) -> None:
        session = self._request.session
        # New id on privilege change so a pre-login id cannot be reused
        session.regenerate()
        session[SESSION_KEY] = self._manager.serialize_user(user)
        self._request.state.user = user

    def logout(self) -> None:
        self._request.session.invalidate()
        self._request.state.user = None


def default_auth_manager(session_factory: sessionmaker[Session]) -> AuthManager:
    def serialize(user: User) -> int:
        return user.id

    def deserialize(user_id: Any) -> User | None:
        with session_factory() as db:
            return db.get(User, user_id)

    return AuthManager(serialize, deserialize)
