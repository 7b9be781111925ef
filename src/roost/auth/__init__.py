from roost.auth.manager import SESSION_KEY, AuthContext, AuthManager, default_auth_manager
from roost.auth.passwords import hash_password, verify_password

__all__ = [
    "SESSION_KEY",
    "AuthContext",
    "AuthManager",
    "default_auth_manager",
    "hash_password",
    "verify_password",
]
