"""Configuration defaults and helpers for the salary tracker."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta


DEFAULT_START_SECONDS = 9.0 * 3600.0
DEFAULT_END_SECONDS = 18.0 * 3600.0
DEFAULT_REFRESH_INTERVAL = 1.0
MIN_REFRESH_INTERVAL = 0.1
MAX_REFRESH_INTERVAL = 24 * 3600.0
SECONDS_PER_DAY = 24 * 3600


@dataclass(slots=True)
class RefreshSettings:
    """Cadence of the periodic "now" refresh."""

    interval: timedelta = timedelta(seconds=DEFAULT_REFRESH_INTERVAL)

    @classmethod
    def from_seconds(cls, seconds: float) -> "RefreshSettings":
        # Out-of-range values are clamped, never rejected.
        return cls(interval=timedelta(seconds=clamp_refresh_interval(seconds)))

    @property
    def seconds(self) -> float:
        return self.interval.total_seconds()


def clamp_refresh_interval(seconds: float) -> float:
    """Bound a refresh interval to what a timer can actually wait for."""
    if math.isnan(seconds):
        return DEFAULT_REFRESH_INTERVAL
    return min(max(MIN_REFRESH_INTERVAL, seconds), MAX_REFRESH_INTERVAL)
