"""Task window parsing for StudyHub.

A task window is a weekday label plus a textual time range such as
"6:00 PM - 8:00 PM". Only the end of the range matters for reminders.
"""

import re
from datetime import datetime
from typing import Optional

from studyhub.models.constants import WEEK_DAYS


_CLOCK_PATTERN = re.compile(r"(\d{1,2})\s*:\s*(\d{2})\s*(AM|PM)", re.IGNORECASE)


def day_short(dt: datetime) -> str:
    """Return the Monday-first weekday short name ('Mon'..'Sun') of a date."""
    return WEEK_DAYS[dt.weekday()]


def parse_task_end_time(time_range: str, now: datetime) -> Optional[datetime]:
    """Resolve the end of a task's time range on the same calendar day as ``now``.

    The end segment is the text after the first ``-``; when there is no such
    segment the whole string is used. Returns None when no ``H:MM AM|PM``
    clock can be found.

    Args:
        time_range: Range text, e.g. "9:00am - 11:00am"
        now: Reference time supplying the calendar day

    Returns:
        Datetime of the range end, or None if unparseable
    """
    if not time_range:
        return None

    parts = time_range.split("-")
    raw_end = parts[1].strip() if len(parts) > 1 else ""
    if not raw_end:
        raw_end = time_range.strip()

    match = _CLOCK_PATTERN.search(raw_end)
    if not match:
        return None

    hour = int(match.group(1)) % 12
    minute = int(match.group(2))
    if match.group(3).upper() == "PM":
        hour += 12
    if minute > 59:
        return None

    return now.replace(hour=hour, minute=minute, second=0, microsecond=0)
