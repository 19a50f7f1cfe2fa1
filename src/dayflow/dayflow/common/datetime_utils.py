from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def format_hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def hhmm_to_minutes(value: str) -> int:
    """Minutes since midnight for an ``HH:MM`` string."""
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def iso_week_number(value: date) -> int:
    """ISO-8601 week number: week 1 holds the year's first Thursday."""
    thursday = value + timedelta(days=3 - value.weekday())
    return (thursday.timetuple().tm_yday - 1) // 7 + 1


def iso_week_year(value: date) -> int:
    """Year that owns the ISO week of ``value`` (differs around New Year)."""
    return (value + timedelta(days=3 - value.weekday())).year


def week_dates(week_number: int, year: int) -> tuple[date, date]:
    """Monday and Sunday of ISO week ``week_number`` in ``year``."""
    start = date.fromisocalendar(year, week_number, 1)
    return start, start + timedelta(days=6)


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)
