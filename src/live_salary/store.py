"""Stateful owner of the salary configuration, its clock and its persistence."""

from __future__ import annotations

import logging
import math
import sqlite3
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from .calculator import compute_snapshot
from .calendar_policy import CalendarPolicy, GregorianCalendar, month_key
from .config import (
    DEFAULT_END_SECONDS,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_START_SECONDS,
    RefreshSettings,
)
from .db import Keys, open_database, read_values, write_values
from .formatting import menu_bar_title
from .models import SalaryConfiguration, SalarySnapshot
from .normalization import coerce_days, validate_days
from .timer import RepeatingTimer

logger = logging.getLogger(__name__)

Listener = Callable[["SalaryStore"], None]


class SalaryStore:
    """Holds the current month's configuration and keeps ``now`` fresh.

    Every mutation is written through to SQLite immediately. A repeating
    timer (armed by :meth:`start`) refreshes ``now`` and resets the
    configuration when the calendar month changes. Configuration and ``now``
    are guarded by one lock because the timer ticks on its own thread.
    """

    def __init__(
        self,
        db_path: Path,
        *,
        calendar_policy: Optional[CalendarPolicy] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.db_path = Path(db_path)
        self.calendar_policy: CalendarPolicy = calendar_policy or GregorianCalendar()
        self._clock = clock
        self._lock = threading.RLock()
        self._timer_lock = threading.Lock()
        self._timer: Optional[RepeatingTimer] = None
        self._listeners: list[Listener] = []
        self._conn = open_database(self.db_path, check_same_thread=False)
        self._config = self._load()
        self._now = clock()
        self.check_month_rollover(self._now)

    # -- lifecycle -----------------------------------------------------------

    def __enter__(self) -> "SalaryStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> None:
        """Arm the periodic refresh. Calling it twice is harmless."""
        with self._timer_lock:
            if self._timer is not None:
                return
            self._timer = self._make_timer()
            self._timer.start()
        logger.info(
            "Refreshing every %.1fs; settings in %s",
            self.effective_refresh_interval,
            self.db_path,
        )

    def stop(self) -> None:
        with self._timer_lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()
            logger.info("Refresh stopped.")

    def close(self) -> None:
        self.stop()
        with self._lock:
            self._conn.close()

    def is_running(self) -> bool:
        with self._timer_lock:
            return bool(self._timer and self._timer.is_running())

    # -- observation ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every tick and mutation."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    @property
    def now(self) -> datetime:
        with self._lock:
            return self._now

    @now.setter
    def now(self, value: datetime) -> None:
        with self._lock:
            self._now = value

    @property
    def snapshot(self) -> SalarySnapshot:
        with self._lock:
            return compute_snapshot(self._now, self._config, self.calendar_policy)

    @property
    def menu_bar_title(self) -> str:
        return menu_bar_title(self.snapshot)

    @property
    def configuration(self) -> SalaryConfiguration:
        with self._lock:
            return self._config.copy()

    @property
    def is_configured(self) -> bool:
        with self._lock:
            return self._config.is_configured

    @property
    def month_key(self) -> str:
        with self._lock:
            return self._config.month_key

    @property
    def month_salary(self) -> float:
        with self._lock:
            return self._config.month_salary

    @property
    def month_salary_set(self) -> bool:
        with self._lock:
            return self._config.month_salary_set

    @property
    def non_work_days(self) -> frozenset[int]:
        with self._lock:
            return frozenset(self._config.non_work_days)

    @property
    def non_work_days_set(self) -> bool:
        with self._lock:
            return self._config.non_work_days_set

    # -- mutation ------------------------------------------------------------

    def set_month_salary(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Monthly salary must be a non-negative number, got {value}")
        with self._lock:
            self._config.month_salary = value
            self._config.month_salary_set = True
            self._config.month_key = self.current_month_key(self._now)
            self._persist(
                {
                    Keys.MONTH_KEY: self._config.month_key,
                    Keys.MONTH_SALARY: self._config.month_salary,
                    Keys.MONTH_SALARY_SET: True,
                }
            )
        logger.debug("Monthly salary set to %.2f", value)
        self._notify()

    def set_non_work_days(self, days: Iterable[int]) -> None:
        days = validate_days(coerce_days(days))
        with self._lock:
            self._config.non_work_days = days
            self._config.non_work_days_set = True
            self._config.month_key = self.current_month_key(self._now)
            self._persist(
                {
                    Keys.MONTH_KEY: self._config.month_key,
                    Keys.NON_WORK_DAYS: days,
                    Keys.NON_WORK_DAYS_SET: True,
                }
            )
        logger.debug("Non-work days set to %s", sorted(days))
        self._notify()

    def toggle_non_work_day(self, day: int) -> bool:
        """Flip one day in or out of the non-work set.

        Returns ``True`` when the day is now a non-work day. Like
        :meth:`set_non_work_days` this marks the days as configured.
        """
        (day,) = coerce_days([day])
        with self._lock:
            days = set(self._config.non_work_days)
        days.symmetric_difference_update({day})
        self.set_non_work_days(days)
        return day in days

    @property
    def start_seconds(self) -> float:
        with self._lock:
            return self._config.start_seconds

    @start_seconds.setter
    def start_seconds(self, value: float) -> None:
        with self._lock:
            self._config.start_seconds = float(value)
            self._persist({Keys.START_SECONDS: self._config.start_seconds})
        self._notify()

    @property
    def end_seconds(self) -> float:
        with self._lock:
            return self._config.end_seconds

    @end_seconds.setter
    def end_seconds(self, value: float) -> None:
        with self._lock:
            self._config.end_seconds = float(value)
            self._persist({Keys.END_SECONDS: self._config.end_seconds})
        self._notify()

    @property
    def refresh_interval(self) -> float:
        with self._lock:
            return self._config.refresh_interval

    @refresh_interval.setter
    def refresh_interval(self, value: float) -> None:
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Refresh interval must be a finite number, got {value}")
        with self._lock:
            self._config.refresh_interval = value
            self._persist({Keys.REFRESH_INTERVAL: self._config.refresh_interval})
        self._restart_timer()
        self._notify()

    @property
    def effective_refresh_interval(self) -> float:
        return RefreshSettings.from_seconds(self.refresh_interval).seconds

    def status(self) -> tuple[datetime, SalarySnapshot]:
        """Return ``now`` together with the snapshot computed from it."""
        with self._lock:
            return self._now, compute_snapshot(
                self._now, self._config, self.calendar_policy
            )

    # -- clock and rollover --------------------------------------------------

    def refresh(self) -> None:
        """One timer tick: advance ``now`` and apply any month rollover."""
        current = self._clock()
        with self._lock:
            self._now = current
            self.check_month_rollover(current)
        self._notify()

    def current_month_key(self, now: datetime) -> str:
        year, month = self.calendar_policy.year_month(now)
        return month_key(year, month)

    def check_month_rollover(self, now: Optional[datetime] = None) -> bool:
        """Reset the month's salary settings if ``now`` is in another month.

        Returns ``True`` when a reset happened. The reset and its write happen
        under the store lock so readers never see a half-cleared month.
        """
        with self._lock:
            current_key = self.current_month_key(now or self._now)
            previous_key = self._config.month_key
            if previous_key == current_key:
                return False
            self._config.reset_month(current_key)
            self._persist(
                {
                    Keys.MONTH_KEY: current_key,
                    Keys.MONTH_SALARY: 0.0,
                    Keys.MONTH_SALARY_SET: False,
                    Keys.NON_WORK_DAYS: [],
                    Keys.NON_WORK_DAYS_SET: False,
                }
            )
        logger.info(
            "Month changed from %s to %s; salary and non-work days cleared.",
            previous_key or "(none)",
            current_key,
        )
        return True

    def time_for_seconds(self, seconds: float) -> datetime:
        """Absolute time today for a seconds-since-midnight value."""
        with self._lock:
            start_of_day = self.calendar_policy.start_of_day(self._now)
        return start_of_day + timedelta(seconds=seconds)

    def seconds_since_start_of_day(self, value: datetime) -> float:
        start_of_day = self.calendar_policy.start_of_day(value)
        return (value - start_of_day).total_seconds()

    # -- internals -----------------------------------------------------------

    def _make_timer(self) -> RepeatingTimer:
        return RepeatingTimer(
            self.effective_refresh_interval, self.refresh, name="live-salary-refresh"
        )

    def _restart_timer(self) -> None:
        with self._timer_lock:
            previous = self._timer
            if previous is None:
                return
            self._timer = self._make_timer()
            current = self._timer
        previous.stop()
        current.start()
        logger.debug("Refresh re-armed at %.1fs.", current.interval)

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("Store listener %r failed.", listener)

    def _persist(self, values: Mapping[str, Any]) -> None:
        # Best effort: in-memory state stays authoritative if the write fails.
        try:
            write_values(self._conn, values)
        except sqlite3.Error:
            logger.exception("Failed to persist %s", ", ".join(values))
        else:
            logger.debug("Persisted %s", ", ".join(values))

    def _load(self) -> SalaryConfiguration:
        values = read_values(self._conn)
        days = values.get(Keys.NON_WORK_DAYS) or []
        return SalaryConfiguration(
            month_key=str(values.get(Keys.MONTH_KEY, "")),
            month_salary=float(values.get(Keys.MONTH_SALARY, 0.0)),
            month_salary_set=bool(values.get(Keys.MONTH_SALARY_SET, False)),
            non_work_days={int(day) for day in days},
            non_work_days_set=bool(values.get(Keys.NON_WORK_DAYS_SET, False)),
            start_seconds=float(values.get(Keys.START_SECONDS, DEFAULT_START_SECONDS)),
            end_seconds=float(values.get(Keys.END_SECONDS, DEFAULT_END_SECONDS)),
            refresh_interval=_finite_or(
                values.get(Keys.REFRESH_INTERVAL), DEFAULT_REFRESH_INTERVAL
            ),
        )


def _finite_or(value: Any, fallback: float) -> float:
    if value is None:
        return fallback
    value = float(value)
    if not math.isfinite(value):
        logger.warning("Ignoring stored value %r; using %s", value, fallback)
        return fallback
    return value
