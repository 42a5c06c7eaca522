"""Time and code helpers."""

import secrets
from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """UTC now."""
    return datetime.now(timezone.utc)


def new_code(nbytes: int) -> str:
    """Generate a new URL-safe opaque code."""
    return secrets.token_urlsafe(nbytes)


def compute_expiry(ttl_seconds: int, now: datetime | None = None) -> datetime:
    """Return ``now`` shifted by ``ttl_seconds``."""
    now = now or utcnow()
    return now + timedelta(seconds=ttl_seconds)
