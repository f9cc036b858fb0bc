"""Domain models for salary configuration and earnings snapshots."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Optional

from .config import DEFAULT_END_SECONDS, DEFAULT_REFRESH_INTERVAL, DEFAULT_START_SECONDS


class SalaryStatus(str, enum.Enum):
    NOT_CONFIGURED = "noSet"
    RESTING = "Rest"
    WORKING = "Working"
    PAUSED = "Paused"

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(slots=True)
class SalaryConfiguration:
    """The current month's salary settings plus the daily work window."""

    month_key: str = ""
    month_salary: float = 0.0
    month_salary_set: bool = False
    non_work_days: set[int] = field(default_factory=set)
    non_work_days_set: bool = False
    start_seconds: float = DEFAULT_START_SECONDS
    end_seconds: float = DEFAULT_END_SECONDS
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL

    @property
    def is_configured(self) -> bool:
        return self.month_salary_set and self.non_work_days_set

    def reset_month(self, month_key: str) -> None:
        """Clear the per-month fields; the work window and cadence survive."""
        self.month_key = month_key
        self.month_salary = 0.0
        self.non_work_days = set()
        self.month_salary_set = False
        self.non_work_days_set = False

    def copy(self) -> "SalaryConfiguration":
        return replace(self, non_work_days=set(self.non_work_days))


@dataclass(frozen=True, slots=True)
class SalarySnapshot:
    """Earnings status derived for a single instant. Never persisted."""

    status: SalaryStatus
    today_earned: Optional[float] = None
    month_accumulated: Optional[float] = None
    workdays_elapsed: Optional[int] = None
    workday_count: Optional[int] = None
    today_worked_hours: Optional[float] = None
    total_work_hours: Optional[float] = None
    days_in_month: Optional[int] = None

    @classmethod
    def not_configured(cls) -> "SalarySnapshot":
        return cls(status=SalaryStatus.NOT_CONFIGURED)

    @property
    def has_config(self) -> bool:
        return self.status is not SalaryStatus.NOT_CONFIGURED
