from datetime import date, timedelta

import pytest

from src.dayflow.dayflow.common.datetime_utils import (
    add_months,
    hhmm_to_minutes,
    iso_week_number,
    iso_week_year,
    week_dates,
)


@pytest.mark.parametrize(
    "value,week,year",
    [
        (date(2025, 3, 10), 11, 2025),
        (date(2024, 12, 30), 1, 2025),
        (date(2021, 1, 3), 53, 2020),
        (date(2026, 1, 1), 1, 2026),
    ],
)
def test_iso_week_number_and_year(value, week, year):
    assert iso_week_number(value) == week
    assert iso_week_year(value) == year
    assert value.isocalendar()[:2] == (year, week)


def test_week_dates_roundtrip_over_a_year():
    day = date(2024, 12, 23)
    while day < date(2026, 1, 10):
        start, end = week_dates(iso_week_number(day), iso_week_year(day))
        assert start <= day <= end
        assert start.weekday() == 0
        assert end - start == timedelta(days=6)
        day += timedelta(days=1)


def test_hhmm_to_minutes():
    assert hhmm_to_minutes("00:00") == 0
    assert hhmm_to_minutes("09:02") == 542
    assert hhmm_to_minutes("23:59:30") == 1439


def test_add_months_clamps_day():
    assert add_months(date(2025, 8, 31), 6) == date(2026, 2, 28)
    assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)
