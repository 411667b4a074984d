from __future__ import annotations

from datetime import date, datetime

from flightfocus.formatting import (
    format_clock,
    format_completed_date,
    format_coordinate,
    format_minutes,
)


def test_format_clock() -> None:
    assert format_clock(0) == "00:00"
    assert format_clock(65) == "01:05"
    assert format_clock(3600) == "01:00:00"
    assert format_clock(-3) == "00:00"


def test_format_minutes() -> None:
    assert format_minutes(45) == "45m"
    assert format_minutes(65) == "1h 5m"


def test_format_completed_date() -> None:
    today = date(2026, 3, 10)

    def at(day: date) -> datetime:
        return datetime(day.year, day.month, day.day, 12).astimezone()

    assert format_completed_date(at(today), today) == "Today"
    assert format_completed_date(at(date(2026, 3, 9)), today) == "Yesterday"
    assert format_completed_date(at(date(2026, 2, 5)), today) == "Feb 5"
    assert format_completed_date(at(date(2025, 10, 5)), today) == "Oct 5, 2025"


def test_format_coordinate() -> None:
    assert format_coordinate(51.47, -0.4543) == "51.47°N 0.45°W"
    assert format_coordinate(-33.9399, 151.1753) == "33.94°S 151.18°E"
