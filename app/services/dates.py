"""
Date helpers shared by transcript search and the Supabase query builder.
All instants are timezone-aware UTC datetimes.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

_US_DATE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# "2024-01-05 10.00.00 notes.txt", "2024/01/05_10:00:00 call.vtt", ...
NAME_TIME_RE = re.compile(r"^(\d{4})[-/](\d{2})[-/](\d{2})[ _T](\d{2})[.:](\d{2})[.:](\d{2})\b")


def parse_date_input(value: Optional[str], end_exclusive: bool = False) -> Optional[datetime]:
    """
    Parse `MM/DD/YYYY` or `YYYY-MM-DD` into UTC midnight.

    With end_exclusive=True the result is advanced by one day, so a range ending
    on that date includes the whole day. Empty or unparseable input returns None.
    """
    s = (value or "").strip()
    if not s:
        return None

    m = _US_DATE.match(s)
    if m:
        year, month, day = int(m.group(3)), int(m.group(1)), int(m.group(2))
    else:
        m = _ISO_DATE.match(s)
        if not m:
            return None
        year, month, day = int(m.group(1)), int(m.group(2)), int(m.group(3))

    try:
        dt = datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None
    if end_exclusive:
        dt += timedelta(days=1)
    return dt


def normalize_date_param(value: Optional[str]) -> str:
    """Render a user date as YYYY-MM-DD when parseable, otherwise pass it through stripped."""
    dt = parse_date_input(value)
    if dt is None:
        return (value or "").strip()
    return dt.strftime("%Y-%m-%d")


def parse_name_timestamp(name: Optional[str]) -> Optional[datetime]:
    """Timestamp embedded at the start of a transcript filename, if any."""
    m = NAME_TIME_RE.match(str(name or ""))
    if not m:
        return None
    try:
        return datetime(*(int(g) for g in m.groups()), tzinfo=timezone.utc)
    except ValueError:
        return None


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse RFC 3339 timestamps as returned by Drive (`...Z` suffix allowed)."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_iso(dt: datetime) -> str:
    """Millisecond-precision UTC ISO-8601 (`2024-01-05T10:00:00.000Z`); sorts chronologically as a string."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today() -> str:
    return utcnow().strftime("%Y-%m-%d")
