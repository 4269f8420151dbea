# src/event_planner/core/timeutil.py

from __future__ import annotations

import math
import uuid
from datetime import date, datetime, timedelta, timezone

from dateutil import parser as dateutil_parser
from dateutil import tz as dateutil_tz


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso(now: datetime | None = None) -> str:
    """UTC timestamp in the same shape browsers emit: 2024-05-01T10:00:00.000Z"""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=dateutil_tz.tzlocal())
    now = now.astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(raw: str | None) -> datetime | None:
    """
    Parse an ISO-8601 string into an aware datetime.

    Naive values are interpreted in local time. Returns None for empty or
    malformed input.
    """
    if not raw:
        return None
    try:
        dt = dateutil_parser.isoparse(raw)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=dateutil_tz.tzlocal())
    return dt


def local_day(raw: str | None) -> date | None:
    """Calendar day of an ISO timestamp, as seen in local time."""
    dt = parse_iso(raw)
    if dt is None:
        return None
    return dt.astimezone(dateutil_tz.tzlocal()).date()


def week_days(today: date) -> list[date]:
    """Sunday..Saturday of the week containing `today`."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return [start + timedelta(days=i) for i in range(7)]


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def percent(part: float, whole: float) -> int:
    """round_half_up(100 * part / whole); 0 when whole is not positive or either side is not finite."""
    if not whole or whole <= 0 or not math.isfinite(whole) or not math.isfinite(part):
        return 0
    ratio = 100.0 * float(part) / float(whole)
    return round_half_up(ratio) if math.isfinite(ratio) else 0


def normalize_date_input(raw: str | None) -> str | None:
    """User-typed date/datetime ("2026-11-01", "2026-11-01T18:00") -> UTC ISO string."""
    dt = parse_iso((raw or "").strip())
    return now_iso(dt) if dt is not None else None
