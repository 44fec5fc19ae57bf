"""Date Resolver.

- Converts relative date phrases ("tomorrow", "next Friday", "next week") into
  concrete YYYY-MM-DD strings
- The reference moment is always passed in, so results are deterministic
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict

logger = logging.getLogger(__name__)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

FIXED_OFFSETS = {
    "today": 0,
    "tomorrow": 1,
    "day after tomorrow": 2,
    "next week": 7,
}


def _as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def format_date(d: date) -> str:
    """Formats a date as zero-padded YYYY-MM-DD."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def next_weekday(day_name: str, now: date | datetime) -> date | None:
    """Returns the next future occurrence of a weekday.

    The same weekday as ``now`` resolves to seven days out, never to today.
    Returns None for an unknown weekday name.
    """
    today = _as_date(now)
    try:
        target = WEEKDAYS.index(day_name.strip().lower())
    except ValueError:
        return None
    days_to_add = target - today.weekday()
    if days_to_add <= 0:
        days_to_add += 7
    return today + timedelta(days=days_to_add)


def resolve_relative_date(phrase: str, now: date | datetime) -> str:
    """Resolves a relative date phrase against ``now``.

    Recognised phrases (case-insensitive): "today", "tomorrow",
    "day after tomorrow", "next week" and "next <weekday>". Anything else,
    including "next" followed by an unknown weekday, is returned unchanged.

    Args:
        phrase: The phrase to resolve, or a literal date.
        now: The reference moment.

    Returns:
        A YYYY-MM-DD string, or the original phrase if it is not recognised.
    """
    today = _as_date(now)
    term = phrase.strip().lower()

    if term in FIXED_OFFSETS:
        return format_date(today + timedelta(days=FIXED_OFFSETS[term]))

    if term.startswith("next "):
        resolved = next_weekday(term[len("next "):], today)
        if resolved is not None:
            return format_date(resolved)
        logger.debug(f"Unrecognised weekday in phrase '{phrase}', returning it unchanged.")

    return phrase


def build_date_reference(now: date | datetime) -> Dict[str, str]:
    """Resolves the reference dates the assistant prompt relies on."""
    return {
        "today": resolve_relative_date("today", now),
        "tomorrow": resolve_relative_date("tomorrow", now),
        "day_after_tomorrow": resolve_relative_date("day after tomorrow", now),
        "next_monday": resolve_relative_date("next monday", now),
        "next_friday": resolve_relative_date("next friday", now),
        "next_week": resolve_relative_date("next week", now),
    }
