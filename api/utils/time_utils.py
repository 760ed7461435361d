"""Time utilities."""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def elapsed_seconds(since: datetime, now: datetime | None = None) -> int:
    """Whole seconds elapsed since ``since`` (never negative)."""
    now = now or utc_now()
    return max(0, int((now - since).total_seconds()))
