"""Salted PBKDF2-SHA256 password hashes: ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``."""

from __future__ import annotations

import secrets

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 390_000
KEY_LENGTH = 32


def _kdf(salt: str, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt.encode(),
        iterations=iterations,
    )


def hash_password(password: str, *, iterations: int = ITERATIONS) -> str:
    salt = secrets.token_hex(16)
    digest = _kdf(salt, iterations).derive(password.encode())
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
        expected_key = bytes.fromhex(expected)
    except ValueError:
        return False
    if algorithm != ALGORITHM or rounds < 1:
        return False
    try:
        # constant-time comparison
        _kdf(salt, rounds).verify(password.encode(), expected_key)
    except InvalidKey:
        return False
    return True
