"""One-way password hashing backed by passlib."""

from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from ..config import get_settings


@lru_cache(maxsize=1)
def get_password_context() -> CryptContext:
    """Return the process-wide hashing context for the configured scheme."""
    return CryptContext(schemes=[get_settings().password_scheme], deprecated="auto")


def hash_password(plain: str) -> str:
    """Return a salted hash of ``plain``; repeated calls yield different strings."""
    return get_password_context().hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Return ``True`` when ``plain`` matches the stored ``hashed`` value."""
    return get_password_context().verify(plain, hashed)


def is_password_hash(value: str) -> bool:
    """Return ``True`` when ``value`` is already a hash produced by the context."""
    return get_password_context().identify(value, required=False) is not None
