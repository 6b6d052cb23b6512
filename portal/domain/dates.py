"""Helpers for the timestamp columns, which come back from Supabase as ISO strings."""

from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_datetime(value: datetime | date | str | None) -> datetime | None:
    """Coerce a column value to an aware UTC datetime (None passes through)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso(value: datetime | date | None) -> str | None:
    """Serialize for a Supabase insert/update payload."""
    if value is None:
        return None
    return value.isoformat()
