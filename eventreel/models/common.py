"""Shared column helpers."""

import secrets
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the stored timestamp format)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Opaque short identifier for primary keys."""
    return secrets.token_urlsafe(9)
