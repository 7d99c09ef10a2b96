"""
FILE: taskflow/dates.py
PURPOSE: Date formatting and due-date checks for task display
EXPORTS:
  - format_relative(value, now) -> str
  - format_date(value) -> str
  - is_in_past(value, now) -> bool
  - is_today(value, now) -> bool
  - is_overdue(task, now) -> bool
DEPENDENCIES:
  - datetime (stdlib)
  - taskflow.core.models (parse_timestamp, Task)
NOTES:
  - Accepts ISO-8601 strings or datetimes; naive values are UTC
  - Calendar-day checks are done in the timezone of ``now``
  - ``now`` is injectable so output is deterministic in tests
"""

from datetime import datetime, timezone
from typing import Any, Optional

from .core.constants import STATUS_COMPLETED
from .core.models import Task, parse_timestamp


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _short_date(dt: datetime) -> str:
    return f"{dt:%b} {dt.day}, {dt.year}"


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def format_relative(value: Any, now: Optional[datetime] = None) -> str:
    """
    Convert a timestamp to human-readable relative time.

    Returns:
        - "-" for empty/missing values
        - "just now" (< 1 minute ago)
        - "5 minutes ago", "3 hours ago", "2 days ago" (< 1 week)
        - "in 5 minutes", "in 3 hours", "in 2 days" for future times
        - "Jan 15, 2024" for anything a week or more away
        - the original value if it can't be parsed

    Examples:
        >>> format_relative("2025-01-26T14:30:00Z", now=datetime(2025, 1, 26, 16, 30))
        '2 hours ago'
        >>> format_relative(None)
        '-'
    """
    if not value:
        return "-"

    dt = parse_timestamp(value)
    if dt is None:
        return str(value)

    now = _now(now)
    seconds = (now - dt).total_seconds()

    # Future dates
    if seconds < 0:
        ahead = -seconds
        if ahead < 60:
            return "in a moment"
        if ahead < 3600:
            return f"in {_plural(int(ahead // 60), 'minute')}"
        if ahead < 86400:
            return f"in {_plural(int(ahead // 3600), 'hour')}"
        days = int(ahead // 86400)
        if days < 7:
            return f"in {_plural(days, 'day')}"
        return _short_date(dt.astimezone(now.tzinfo))

    # Past dates
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{_plural(int(seconds // 60), 'minute')} ago"
    if seconds < 86400:
        return f"{_plural(int(seconds // 3600), 'hour')} ago"

    days = int(seconds // 86400)
    if days < 7:
        return f"{_plural(days, 'day')} ago"

    return _short_date(dt.astimezone(now.tzinfo))


def format_date(value: Any) -> str:
    """Long date, e.g. "January 15, 2024". Empty string for missing values."""
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    return f"{dt:%B} {dt.day}, {dt.year}"


def is_in_past(value: Any, now: Optional[datetime] = None) -> bool:
    """True if the date falls on a calendar day before today (today is not past)."""
    dt = parse_timestamp(value)
    if dt is None:
        return False
    now = _now(now)
    return dt.astimezone(now.tzinfo).date() < now.date()


def is_today(value: Any, now: Optional[datetime] = None) -> bool:
    dt = parse_timestamp(value)
    if dt is None:
        return False
    now = _now(now)
    return dt.astimezone(now.tzinfo).date() == now.date()


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    """A task is overdue when its due day has passed and it isn't completed."""
    if task.status == STATUS_COMPLETED:
        return False
    return is_in_past(task.due_date, now)
