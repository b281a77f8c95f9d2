"""Date helpers for views and due-date input.

Dates are exchanged as "YYYY-MM-DD" strings in the local timezone; the cache
compares them lexically.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

_ABBREVIATIONS = {
    "tmrw": "tomorrow",
    "tmr": "tomorrow",
    "tom": "tomorrow",
    "tmw": "tomorrow",
    "tod": "today",
    "tdy": "today",
    "yday": "yesterday",
    "yest": "yesterday",
    "mon": "monday",
    "tue": "tuesday",
    "tues": "tuesday",
    "wed": "wednesday",
    "thu": "thursday",
    "thur": "thursday",
    "thurs": "thursday",
    "fri": "friday",
    "sat": "saturday",
    "sun": "sunday",
}


def format_ymd(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_today() -> str:
    return format_ymd(date.today())


def format_date_with_offset(days: int) -> str:
    """Return today plus ``days`` (negative for the past) as "YYYY-MM-DD"."""
    return format_ymd(date.today() + timedelta(days=days))


def next_weekday(start: date, weekday: int) -> date:
    """Return the first ``weekday`` (Monday=0) strictly after ``start``.

    Args:
        start: Reference date
        weekday: Target weekday, as ``date.weekday()`` numbers it

    Returns:
        A date 1 to 7 days after ``start``
    """
    days_ahead = (weekday - start.weekday()) % 7
    return start + timedelta(days=days_ahead or 7)


def normalize_due_string(value: str) -> str:
    """Expand common abbreviations in a natural-language due string.

    Each word is matched case-insensitively; words that are not known
    abbreviations are kept as typed. Runs of spaces collapse to one.
    Blank input is returned unchanged.

    Example:
        "NEXT fri" -> "NEXT friday"
    """
    if not value.strip():
        return value
    return " ".join(_ABBREVIATIONS.get(word.lower(), word) for word in value.split())


def format_human_date(value: str) -> str:
    """Render a "YYYY-MM-DD" date relative to today.

    Returns "today", "tomorrow", "yesterday", a weekday name within the next
    week, otherwise a short date. Unparseable input is returned as-is.
    """
    try:
        day = date.fromisoformat(value[:10])
    except ValueError:
        return value

    delta = (day - date.today()).days
    if delta == 0:
        return "today"
    if delta == 1:
        return "tomorrow"
    if delta == -1:
        return "yesterday"
    if 1 < delta < 7:
        return day.strftime("%A")
    if day.year == date.today().year:
        return day.strftime("%b %d")
    return day.strftime("%b %d, %Y")


def format_human_datetime(value: str) -> str:
    """Render an ISO datetime as "<human date> at HH:MM"."""
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return f"{format_human_date(moment.date().isoformat())} at {moment:%H:%M}"


def format_due(due_date: str | None, due_datetime: str | None = None) -> str:
    """Human-readable due label for a task, empty when it has none."""
    if due_datetime:
        return format_human_datetime(due_datetime)
    if due_date:
        return format_human_date(due_date)
    return ""


def is_overdue(due_date: str | None) -> bool:
    return bool(due_date) and due_date[:10] < format_today()
