"""Password hashing with passlib (Argon2)."""

from __future__ import annotations

from passlib.context import CryptContext
from passlib.exc import UnknownHashError

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a plain text password for storage."""
    return pwd_context.hash(password)


def password_matched(password: str, hashed_password: str | None) -> bool:
    """Check a plain text password against a stored hash.

    Unknown or missing hashes never match.
    """
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(password, hashed_password)
    except (UnknownHashError, ValueError):
        return False
