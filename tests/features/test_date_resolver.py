"""Unit tests for relative date resolution."""

from datetime import date, datetime

import pytest

from calendar_assistant.features.date_resolver import (
    build_date_reference,
    format_date,
    next_weekday,
    resolve_relative_date,
)

MONDAY = date(2024, 1, 1)
WEDNESDAY = datetime(2024, 1, 3, 18, 45)


@pytest.mark.parametrize(
    "phrase, expected",
    [
        ("today", "2024-01-01"),
        ("tomorrow", "2024-01-02"),
        ("day after tomorrow", "2024-01-03"),
        ("next week", "2024-01-08"),
        ("next friday", "2024-01-05"),
        ("next tuesday", "2024-01-02"),
    ],
)
def test_resolve_relative_date_from_monday(phrase, expected):
    assert resolve_relative_date(phrase, MONDAY) == expected


def test_same_weekday_resolves_a_week_ahead():
    assert resolve_relative_date("next monday", MONDAY) == "2024-01-08"
    assert resolve_relative_date("next wednesday", WEDNESDAY) == "2024-01-10"


def test_resolution_is_case_insensitive_and_trims():
    assert resolve_relative_date("  Next FRIDAY ", MONDAY) == "2024-01-05"
    assert resolve_relative_date("Tomorrow", MONDAY) == "2024-01-02"


def test_unrecognised_phrases_are_returned_unchanged():
    assert resolve_relative_date("2024-12-25", MONDAY) == "2024-12-25"
    assert resolve_relative_date("next blursday", MONDAY) == "next blursday"
    assert resolve_relative_date("someday", MONDAY) == "someday"


def test_datetime_reference_uses_its_calendar_date():
    assert resolve_relative_date("today", WEDNESDAY) == "2024-01-03"
    assert resolve_relative_date("next monday", WEDNESDAY) == "2024-01-08"


def test_month_and_leap_year_rollover():
    assert resolve_relative_date("tomorrow", date(2024, 2, 28)) == "2024-02-29"
    assert resolve_relative_date("tomorrow", date(2023, 12, 31)) == "2024-01-01"
    assert resolve_relative_date("next week", date(2024, 12, 28)) == "2025-01-04"


def test_next_weekday_unknown_name_returns_none():
    assert next_weekday("funday", MONDAY) is None


def test_next_weekday_is_always_in_the_future():
    for offset in range(7):
        reference = date(2024, 1, 1 + offset)
        for name in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"):
            delta = (next_weekday(name, reference) - reference).days
            assert 1 <= delta <= 7


def test_format_date_zero_pads():
    assert format_date(date(2024, 3, 7)) == "2024-03-07"


def test_build_date_reference():
    reference = build_date_reference(MONDAY)

    assert reference == {
        "today": "2024-01-01",
        "tomorrow": "2024-01-02",
        "day_after_tomorrow": "2024-01-03",
        "next_monday": "2024-01-08",
        "next_friday": "2024-01-05",
        "next_week": "2024-01-08",
    }
