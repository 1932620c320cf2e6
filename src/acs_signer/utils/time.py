"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso8601(value: datetime) -> str:
    return ensure_utc(value).strftime(ISO8601_FORMAT)
