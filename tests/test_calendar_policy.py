"""Tests for calendar helpers."""

import calendar
from datetime import datetime

import pytest

from live_salary.calendar_policy import (
    GregorianCalendar,
    first_weekday_offset,
    month_grid,
    month_key,
    weekday_symbols,
)


def test_month_lengths():
    policy = GregorianCalendar()
    assert policy.days_in_month(datetime(2026, 2, 10)) == 28
    assert policy.days_in_month(datetime(2028, 2, 10)) == 29
    assert policy.days_in_month(datetime(2026, 1, 31)) == 31


def test_day_helpers():
    policy = GregorianCalendar()
    now = datetime(2026, 2, 10, 13, 45, 12, 500)
    assert policy.start_of_day(now) == datetime(2026, 2, 10)
    assert policy.day_of_month(now) == 10
    assert policy.year_month(now) == (2026, 2)


def test_month_key():
    assert month_key(2026, 2) == "2026-02"
    assert month_key(987, 11) == "0987-11"


def test_weekday_symbols_follow_first_weekday():
    assert weekday_symbols(GregorianCalendar())[0] == "Sun"
    monday_first = weekday_symbols(GregorianCalendar(first_weekday=calendar.MONDAY))
    assert monday_first == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def test_invalid_first_weekday():
    with pytest.raises(ValueError):
        GregorianCalendar(first_weekday=7)


def test_month_grid_sunday_start():
    # February 2026 starts on a Sunday and fills exactly four weeks.
    grid = month_grid(2026, 2, GregorianCalendar())
    assert len(grid) == 4
    assert grid[0] == [1, 2, 3, 4, 5, 6, 7]
    assert grid[-1][-1] == 28


def test_month_grid_monday_start_pads_leading_cells():
    policy = GregorianCalendar(first_weekday=calendar.MONDAY)
    assert first_weekday_offset(2026, 2, policy) == 6
    grid = month_grid(2026, 2, policy)
    assert grid[0] == [None] * 6 + [1]
    assert all(len(row) == 7 for row in grid)
    days = [day for row in grid for day in row if day is not None]
    assert days == list(range(1, 29))
