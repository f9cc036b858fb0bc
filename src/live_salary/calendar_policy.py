"""Calendar arithmetic used by the calculator and the non-work-day picker."""

from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Protocol

_WEEKDAY_SYMBOLS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class CalendarPolicy(Protocol):
    first_weekday: int

    def days_in_month(self, now: datetime) -> int: ...

    def start_of_day(self, now: datetime) -> datetime: ...

    def day_of_month(self, now: datetime) -> int: ...

    def year_month(self, now: datetime) -> tuple[int, int]: ...

    def weekday_of(self, day: date) -> int: ...


class GregorianCalendar:
    """Proleptic Gregorian calendar over local wall-clock datetimes.

    ``first_weekday`` uses the :mod:`calendar` numbering (``calendar.MONDAY``
    is 0, ``calendar.SUNDAY`` is 6) and only affects how month grids are laid
    out.
    """

    def __init__(self, first_weekday: int = calendar.SUNDAY) -> None:
        if not 0 <= first_weekday <= 6:
            raise ValueError(f"first_weekday must be in 0..6, got {first_weekday}")
        self.first_weekday = first_weekday

    def days_in_month(self, now: datetime) -> int:
        return calendar.monthrange(now.year, now.month)[1]

    def start_of_day(self, now: datetime) -> datetime:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)

    def day_of_month(self, now: datetime) -> int:
        return now.day

    def year_month(self, now: datetime) -> tuple[int, int]:
        return now.year, now.month

    def weekday_of(self, day: date) -> int:
        return day.weekday()


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def weekday_symbols(policy: CalendarPolicy) -> list[str]:
    """Short weekday names starting at the policy's first weekday."""
    start = policy.first_weekday
    return [_WEEKDAY_SYMBOLS[(start + offset) % 7] for offset in range(7)]


def first_weekday_offset(year: int, month: int, policy: CalendarPolicy) -> int:
    weekday = policy.weekday_of(date(year, month, 1))
    return (weekday - policy.first_weekday + 7) % 7


def month_grid(
    year: int, month: int, policy: CalendarPolicy
) -> list[list[Optional[int]]]:
    """Lay out a month as week rows of seven cells (day number or ``None``)."""
    days = calendar.monthrange(year, month)[1]
    offset = first_weekday_offset(year, month, policy)
    total = ((offset + days + 6) // 7) * 7
    cells: list[Optional[int]] = []
    for index in range(total):
        day = index - offset + 1
        cells.append(day if 1 <= day <= days else None)
    rows = [cells[start : start + 7] for start in range(0, len(cells), 7)]
    return rows or [[None] * 7]
