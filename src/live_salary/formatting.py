"""Text formatting shared by the CLI and the web dashboard."""

from __future__ import annotations

import re
from typing import Optional

from .models import SalarySnapshot, SalaryStatus

CURRENCY_SYMBOL = "¥"
PLACEHOLDER = "--"

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def money(value: Optional[float]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{CURRENCY_SYMBOL}{value:.2f}"


def workday_count(elapsed: Optional[int], total: Optional[int]) -> str:
    if elapsed is None or total is None:
        return PLACEHOLDER
    return f"{elapsed}/{total}"


def hours_ratio(elapsed: Optional[float], total: Optional[float]) -> str:
    if elapsed is None or total is None:
        return PLACEHOLDER
    return f"{elapsed:.1f}/{total:.1f}"


def hours(value: Optional[float]) -> str:
    if value is None:
        return PLACEHOLDER
    return f"{value:.1f}"


def time_string(seconds: float) -> str:
    """Render seconds since midnight as 24-hour ``HH:MM``."""
    total_seconds = max(0, int(round(seconds)))
    hours_part, remainder = divmod(total_seconds, 3600)
    return f"{hours_part:02d}:{remainder // 60:02d}"


def time_range(start_seconds: float, end_seconds: float) -> str:
    return f"{time_string(start_seconds)}-{time_string(end_seconds)}"


def refresh_interval(seconds: float) -> str:
    return f"{seconds:.1f} s"


def menu_bar_title(snapshot: SalarySnapshot) -> str:
    if snapshot.status is SalaryStatus.NOT_CONFIGURED:
        return SalaryStatus.NOT_CONFIGURED.display_name
    if snapshot.status is SalaryStatus.RESTING:
        # Non-work days show the status instead of a zero amount.
        return SalaryStatus.RESTING.display_name
    return money(snapshot.today_earned)


def parse_time_string(value: str) -> float:
    """Parse ``HH:MM`` into seconds since midnight."""
    match = _TIME_PATTERN.match(value)
    if not match:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Time of day out of range: {value!r}")
    return float(hour * 3600 + minute * 60)
