"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as written by the ledger.

    Naive values are taken as UTC. Raises ValueError on anything unparseable.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"Invalid timestamp: {value!r}")
    # fromisoformat() before 3.11 does not accept a trailing "Z"
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_display(dt: datetime, fmt: str) -> str:
    """Render a timestamp for display, in UTC."""
    return dt.astimezone(timezone.utc).strftime(fmt)
