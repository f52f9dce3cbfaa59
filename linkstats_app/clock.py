"""Time helpers. Everything is stored and compared in UTC."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime (the default clock for services)."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
