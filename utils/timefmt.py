"""Time helpers shared by the report, the cache and the dashboards."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union
import math


def now_utc() -> datetime:
    """Return the current time as an aware UTC ``datetime``."""
    return datetime.now(timezone.utc)


def to_utc(dt_or_str: Union[datetime, str]) -> datetime:
    """Return ``datetime`` converted to UTC."""

    if isinstance(dt_or_str, datetime):
        dt = dt_or_str
    else:
        dt = datetime.fromisoformat(dt_or_str.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)
    return dt


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Convert a stored timestamp to a UTC-aware datetime.
    Returns None for empty values and anything that cannot be parsed.
    Accepted forms:
      - aware/naive datetime (naive -> assume UTC)
      - ISO-8601 string
      - int/float unix seconds (0 means "never")
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)) and math.isfinite(value):
        if value <= 0:
            return None
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        v = value.strip()
        if not v:
            return None
        try:
            return to_utc(v)
        except ValueError:
            return None

    return None


def round_duration(delta: timedelta) -> str:
    """Return a short age like ``42s``, ``7m`` or ``1.5h``."""

    secs = max(0.0, delta.total_seconds())
    if secs < 60:
        return f"{int(secs + 0.5)}s"
    if secs < 3600:
        return f"{int(secs / 60 + 0.5)}m"
    return f"{secs / 3600:.1f}h"


def fmt_local(dt_like) -> str:
    """Return ``dt_like`` in local time, ``YYYY-MM-DD HH:MM:SS``."""

    dt = parse_timestamp(dt_like) or now_utc()
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def fmt_iso(dt: datetime) -> str:
    """Return ``dt`` as a UTC ISO8601 string with a ``Z`` suffix."""
    return to_utc(dt).isoformat().replace("+00:00", "Z")


__all__ = ["now_utc", "to_utc", "parse_timestamp", "round_duration", "fmt_local", "fmt_iso"]
