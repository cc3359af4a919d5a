"""UTC datetime utilities."""

import re
from datetime import datetime, time, timezone

_DATE_ONLY = re.compile(r"^\d{4}-?\d{2}-?\d{2}$")


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def is_date_only(value: str) -> bool:
    return bool(_DATE_ONLY.match(value))


def parse_iso8601(value: str, end_of_day: bool = False) -> datetime:
    """Parse an ISO-8601 date or datetime string into an aware UTC datetime.

    Naive values are taken as UTC. A date-only value maps to the start of the
    day, or to its last microsecond when end_of_day is set (inclusive upper
    bounds). Raises ValueError on anything unparseable or not representable
    in UTC.
    """
    parsed = datetime.fromisoformat(value)
    if is_date_only(value) and end_of_day:
        parsed = datetime.combine(parsed.date(), time.max)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        # e.g. 9999-12-31T23:30:00-01:00 falls past datetime.max in UTC
        raise ValueError(f"{value!r} is out of range in UTC") from exc


def to_naive_utc(dt: datetime | None) -> datetime | None:
    """db-sync stores block.time as TIMESTAMP WITHOUT TIME ZONE (UTC)."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.replace(tzinfo=None)


def as_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime read from the indexer."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def isoformat_z(dt: datetime) -> str:
    """2024-01-01T00:00:00.000Z, the format the dashboard client expects."""
    dt = as_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
