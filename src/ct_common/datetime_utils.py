"""UTC datetime utilities."""

from datetime import datetime, time, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def seconds_until_end_of_utc_day(now: datetime | None = None) -> int:
    """Whole seconds from `now` until 23:59:59 UTC of the same day (min 1)."""
    now = (now or utc_now()).astimezone(timezone.utc)
    end_of_day = datetime.combine(now.date(), time(23, 59, 59), tzinfo=timezone.utc)
    remaining = end_of_day - now
    return max(1, int(remaining / timedelta(seconds=1)))


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. from query strings) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
