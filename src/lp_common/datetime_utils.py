"""UTC datetime utilities."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def within_window(
    moment: datetime, start: datetime | None, end: datetime | None
) -> bool:
    """True if start <= moment <= end; a missing bound is open."""
    if start is not None and moment < start:
        return False
    if end is not None and moment > end:
        return False
    return True


def ensure_utc(moment: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC; aware ones are converted to UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)
