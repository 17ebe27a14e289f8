"""Time utility helpers.

Wall-clock values are wrapped in small dataclasses so units never get mixed
(seconds vs milliseconds) when they cross module boundaries.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class Seconds:
    """Wall-clock timestamp in seconds since epoch."""

    value: float


@dataclass(frozen=True)
class Milliseconds:
    """Wall-clock timestamp in milliseconds since epoch."""

    value: int


def now_s() -> Seconds:
    """
    Get current timestamp in seconds since epoch.

    Returns:
        Current time as Seconds
    """
    return Seconds(time.time())


def now_ms() -> Milliseconds:
    """
    Get current timestamp in milliseconds since epoch.

    Returns:
        Current time as Milliseconds
    """
    return Milliseconds(int(time.time() * 1000))


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """Serialize a datetime the way documents store it (RFC 3339, UTC, 'Z' suffix)."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def from_iso(value: str) -> datetime:
    """Parse a timestamp written by to_iso (or any RFC 3339 string)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
