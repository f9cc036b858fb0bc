"""Simple reporting utilities for CLI output."""

from __future__ import annotations

from typing import Iterable, Optional

from . import formatting
from .calendar_policy import CalendarPolicy, month_grid, weekday_symbols
from .models import SalarySnapshot
from .store import SalaryStore


class StatusPrinter:
    """Render the earnings panel and month calendar in the console."""

    def __init__(self, store: SalaryStore) -> None:
        self.store = store

    def print_status(self) -> None:
        for line in status_lines(self.store):
            print(line)

    def print_calendar(self) -> None:
        year, month = self.store.calendar_policy.year_month(self.store.now)
        for line in calendar_lines(
            year, month, self.store.non_work_days, self.store.calendar_policy
        ):
            print(line)


def status_lines(store: SalaryStore) -> list[str]:
    snapshot = store.snapshot
    config = store.configuration
    rows = [
        ("Status", snapshot.status.display_name),
        ("Today", today_display(snapshot)),
        ("Worked Hours", formatting.hours_ratio(snapshot.today_worked_hours, snapshot.total_work_hours)),
        ("Month Accumulated", formatting.money(snapshot.month_accumulated)),
        ("Workdays", formatting.workday_count(snapshot.workdays_elapsed, snapshot.workday_count)),
        ("Monthly Salary", formatting.money(config.month_salary) if config.month_salary_set else formatting.PLACEHOLDER),
        ("Work Time", formatting.time_range(config.start_seconds, config.end_seconds)),
        ("Refresh Interval", formatting.refresh_interval(config.refresh_interval)),
    ]
    lines = [f"LiveSalary {config.month_key}", "-" * 40]
    lines.extend(f"{key:<20} {value}" for key, value in rows)
    if not snapshot.has_config:
        lines.append("")
        lines.append(
            "Set the monthly salary and non-work days for this month to start tracking."
        )
    return lines


def today_display(snapshot: SalarySnapshot) -> str:
    if not snapshot.has_config:
        return snapshot.status.display_name
    return formatting.money(snapshot.today_earned)


def calendar_lines(
    year: int,
    month: int,
    non_work_days: Iterable[int],
    policy: CalendarPolicy,
) -> list[str]:
    """Month grid with non-work days wrapped in brackets."""
    marked = set(non_work_days)
    lines = [f"{year:04d}-{month:02d}", " ".join(f"{name:>4}" for name in weekday_symbols(policy))]
    for row in month_grid(year, month, policy):
        lines.append(" ".join(_cell(day, marked) for day in row))
    return lines


def _cell(day: Optional[int], marked: set[int]) -> str:
    if day is None:
        return " " * 4
    if day in marked:
        return f"[{day:>2}]"
    return f" {day:>2} "
