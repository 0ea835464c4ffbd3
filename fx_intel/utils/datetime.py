"""UTC helpers shared by the tracker and the report window."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def window_start(now: datetime, window_ms: int | None) -> datetime | None:
    """Start of a trailing window of ``window_ms`` milliseconds, or None for all time.

    A window reaching back past ``datetime.min`` covers all time as well.
    """

    if window_ms is None:
        return None
    try:
        return ensure_utc(now) - timedelta(milliseconds=window_ms)
    except OverflowError:
        return None
