"""Days-remaining calculation for the three provider time encodings.

Providers report expiry as absolute epoch seconds, as seconds remaining, or
as a calendar timestamp string. All three reduce to (days, expiry) where any
positive remainder rounds up to a whole day, so a subscription with one
second left still reports 1 day rather than 0.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, NamedTuple, Optional

SECONDS_PER_DAY = 86400


class TimeLeft(NamedTuple):
    days: int
    expiry: Optional[datetime]


NO_TIME = TimeLeft(0, None)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_seconds(value: Any) -> Optional[float]:
    """Coerce a JSON scalar to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        secs = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(secs):
        return None
    return secs


def ceil_days(seconds: float) -> int:
    if seconds <= 0:
        return 0
    return math.ceil(seconds / SECONDS_PER_DAY)


def _from_instant(instant: datetime, now: datetime) -> TimeLeft:
    remaining = (instant - now).total_seconds()
    if remaining <= 0:
        return NO_TIME
    return TimeLeft(ceil_days(remaining), instant)


def from_epoch_seconds(value: Any, now: Optional[datetime] = None) -> TimeLeft:
    """Time left until an absolute epoch-seconds instant."""
    secs = as_seconds(value)
    if secs is None or secs <= 0:
        return NO_TIME
    try:
        instant = datetime.fromtimestamp(secs, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return NO_TIME
    return _from_instant(instant, now or utc_now())


def from_duration_seconds(value: Any, now: Optional[datetime] = None) -> TimeLeft:
    """Time left given a count of seconds remaining."""
    secs = as_seconds(value)
    if secs is None or secs <= 0:
        return NO_TIME
    now = now or utc_now()
    try:
        expiry = now + timedelta(seconds=secs)
    except OverflowError:
        expiry = None
    return TimeLeft(ceil_days(secs), expiry)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are read as UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def from_date_string(value: Any, now: Optional[datetime] = None) -> Optional[TimeLeft]:
    """Time left until a calendar timestamp.

    Returns None when the string cannot be parsed; callers treat that as
    "cannot resolve" rather than as an expired subscription.
    """
    instant = parse_timestamp(value)
    if instant is None:
        return None
    return _from_instant(instant, now or utc_now())
