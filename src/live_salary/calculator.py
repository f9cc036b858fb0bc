"""Earnings calculation for a configured salary month."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime, timedelta
from typing import Optional

from .calendar_policy import CalendarPolicy, GregorianCalendar
from .models import SalaryConfiguration, SalarySnapshot, SalaryStatus

_DEFAULT_CALENDAR = GregorianCalendar()


def compute_snapshot(
    now: datetime,
    config: SalaryConfiguration,
    calendar_policy: Optional[CalendarPolicy] = None,
) -> SalarySnapshot:
    """Return today's and this month's earnings as of ``now``.

    Pure function of its arguments. An incomplete configuration yields a
    ``NOT_CONFIGURED`` snapshot with every derived field unset.
    """
    if not config.is_configured:
        return SalarySnapshot.not_configured()

    policy = calendar_policy or _DEFAULT_CALENDAR
    non_work_days = config.non_work_days

    days_in_month = policy.days_in_month(now)
    workday_count = max(days_in_month - len(non_work_days), 0)
    pay_per_day = daily_pay(config.month_salary, workday_count)
    total_work_seconds = max(config.end_seconds - config.start_seconds, 0.0)
    total_work_hours = total_work_seconds / 3600.0

    start_of_day = policy.start_of_day(now)
    start_time = start_of_day + timedelta(seconds=config.start_seconds)
    end_time = start_of_day + timedelta(seconds=config.end_seconds)
    today = policy.day_of_month(now)
    is_non_work_day = today in non_work_days

    if is_non_work_day:
        status = SalaryStatus.RESTING
        today_earned = 0.0
        today_worked_hours = 0.0
    elif start_time <= now < end_time:
        status = SalaryStatus.WORKING
        elapsed = (now - start_time).total_seconds()
        elapsed = max(0.0, min(elapsed, total_work_seconds))
        if total_work_seconds > 0:
            today_earned = pay_per_day * (elapsed / total_work_seconds)
        else:
            today_earned = 0.0
        today_worked_hours = elapsed / 3600.0
    elif now < start_time:
        status = SalaryStatus.PAUSED
        today_earned = 0.0
        today_worked_hours = 0.0
    else:
        status = SalaryStatus.PAUSED
        today_earned = pay_per_day
        today_worked_hours = total_work_hours

    return SalarySnapshot(
        status=status,
        today_earned=today_earned,
        month_accumulated=accumulated_pay(
            today,
            is_non_work_day=is_non_work_day,
            daily_pay=pay_per_day,
            today_earned=today_earned,
            non_work_days=non_work_days,
        ),
        workdays_elapsed=count_workdays_elapsed(today, non_work_days),
        workday_count=workday_count,
        today_worked_hours=today_worked_hours,
        total_work_hours=total_work_hours,
        days_in_month=days_in_month,
    )


def daily_pay(month_salary: float, workday_count: int) -> float:
    if workday_count <= 0:
        return 0.0
    return month_salary / workday_count


def count_workdays_elapsed(today: int, non_work_days: Collection[int]) -> int:
    """Count work days from the 1st up to and including ``today``."""
    if today <= 0:
        return 0
    return sum(1 for day in range(1, today + 1) if day not in non_work_days)


def accumulated_pay(
    today: int,
    *,
    is_non_work_day: bool,
    daily_pay: float,
    today_earned: float,
    non_work_days: Collection[int],
) -> float:
    """Month-to-date pay.

    Every work day before ``today`` counts as fully paid; nothing records
    whether those days were actually worked.
    """
    if today <= 0:
        return 0.0
    prior_workdays = sum(1 for day in range(1, today) if day not in non_work_days)
    total = daily_pay * prior_workdays
    if not is_non_work_day:
        total += today_earned
    return total
