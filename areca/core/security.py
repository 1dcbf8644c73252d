"""Password hashing and session token helpers."""

from __future__ import annotations

import hashlib
import hmac
import secrets

from areca.core.config import settings

_ALGORITHM = "pbkdf2_sha256"


def hash_password(password: str, *, salt: str | None = None, iterations: int | None = None) -> str:
    """Hash a password with PBKDF2-SHA256 and a random salt.

    Args:
        password: Plain-text password.
        salt: Optional salt; a random 16-byte hex salt is generated if omitted.
        iterations: PBKDF2 rounds; defaults to ``AUTH_PASSWORD_HASH_ITERATIONS``.

    Returns:
        Encoded hash ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>``.
    """
    if salt is None:
        salt = secrets.token_hex(16)
    if iterations is None:
        iterations = settings.auth.password_hash_iterations

    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
    ).hex()
    return f"{_ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a plain-text password against an encoded hash.

    Returns False for malformed hashes instead of raising.
    """
    try:
        algorithm, iterations, salt, _ = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != _ALGORITHM:
        return False

    candidate = hash_password(password, salt=salt, iterations=rounds)
    return hmac.compare_digest(candidate, encoded)


def generate_session_token() -> str:
    """Opaque, URL-safe bearer token."""
    return secrets.token_urlsafe(32)


def hash_session_token(token: str) -> str:
    """SHA-256 of a bearer token; the only form persisted."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
