"""Shared fixtures: a controllable clock and stores backed by temp databases."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from live_salary.store import SalaryStore


class FakeClock:
    """Callable clock whose current time tests move by hand."""

    def __init__(self, value: datetime) -> None:
        self.value = value

    def __call__(self) -> datetime:
        return self.value

    def advance(self, **kwargs: float) -> datetime:
        self.value += timedelta(**kwargs)
        return self.value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 2, 10, 13, 0, 0))


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "settings.sqlite3"


@pytest.fixture
def store(db_path, clock):
    salary_store = SalaryStore(db_path, clock=clock)
    yield salary_store
    salary_store.close()


@pytest.fixture
def configured_store(store):
    store.set_month_salary(22000)
    store.set_non_work_days({6, 7, 13, 14})
    return store
