"""FastAPI application that exposes the live salary status and settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from . import formatting
from .calendar_policy import month_grid, weekday_symbols
from .config import SECONDS_PER_DAY
from .models import SalarySnapshot
from .normalization import parse_day_list, parse_salary_text
from .paths import get_db_path
from .store import SalaryStore

logger = logging.getLogger(__name__)


class MonthSalaryPayload(BaseModel):
    value: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    text: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class NonWorkDaysPayload(BaseModel):
    days: Optional[List[int]] = None
    text: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class WorkTimePayload(BaseModel):
    start: Optional[Union[float, str]] = None
    end: Optional[Union[float, str]] = None

    model_config = ConfigDict(extra="forbid")


class RefreshIntervalPayload(BaseModel):
    seconds: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    store: Optional[SalaryStore] = None,
) -> FastAPI:
    """Instantiate the FastAPI application.

    When ``store`` is given the caller keeps ownership of it; the app only
    arms and disarms its refresh timer.
    """
    owns_store = store is None
    resolved_store = store or SalaryStore(Path(db_path or get_db_path()))

    app = FastAPI(title="LiveSalary", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = resolved_store

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        resolved_store.start()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        if owns_store:
            resolved_store.close()
        else:
            resolved_store.stop()

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        now, snapshot = store.status()
        return {
            "now": now.isoformat(),
            "month_key": store.month_key,
            "refresh_running": store.is_running(),
            "menu_bar_title": formatting.menu_bar_title(snapshot),
            "snapshot": _snapshot_payload(snapshot),
            "display": _snapshot_display(snapshot),
        }

    @app.get("/api/config")
    def get_config(request: Request) -> Dict[str, Any]:
        return _config_payload(request.app.state.store)

    @app.put("/api/month-salary")
    def put_month_salary(payload: MonthSalaryPayload, request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        if payload.value is not None:
            value = payload.value
        else:
            value = parse_salary_text(payload.text)
        if value is None:
            raise HTTPException(status_code=400, detail="A non-negative salary is required")
        store.set_month_salary(value)
        return _config_payload(store)

    @app.put("/api/non-work-days")
    def put_non_work_days(payload: NonWorkDaysPayload, request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        try:
            if payload.days is not None:
                days = set(payload.days)
            elif payload.text is not None:
                days = parse_day_list(payload.text)
            else:
                raise ValueError("Either days or text is required")
            store.set_non_work_days(days)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload(store)

    @app.post("/api/non-work-days/{day}/toggle")
    def toggle_non_work_day(day: int, request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        try:
            store.toggle_non_work_day(day)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload(store)

    @app.patch("/api/work-time")
    def patch_work_time(payload: WorkTimePayload, request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        try:
            start = _time_of_day(payload.start)
            end = _time_of_day(payload.end)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if start is not None:
            store.start_seconds = start
        if end is not None:
            store.end_seconds = end
        return _config_payload(store)

    @app.patch("/api/refresh-interval")
    def patch_refresh_interval(
        payload: RefreshIntervalPayload, request: Request
    ) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        try:
            store.refresh_interval = payload.seconds
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return _config_payload(store)

    @app.get("/api/calendar")
    def month_calendar(request: Request) -> Dict[str, Any]:
        store: SalaryStore = request.app.state.store
        policy = store.calendar_policy
        year, month = policy.year_month(store.now)
        return {
            "month_key": store.current_month_key(store.now),
            "weekdays": weekday_symbols(policy),
            "weeks": month_grid(year, month, policy),
            "non_work_days": sorted(store.non_work_days),
            "non_work_days_set": store.non_work_days_set,
        }

    return app


def _time_of_day(value: Optional[Union[float, str]]) -> Optional[float]:
    if value is None:
        return None
    seconds = formatting.parse_time_string(value) if isinstance(value, str) else float(value)
    if not 0 <= seconds < SECONDS_PER_DAY:
        raise ValueError(f"Time of day must be within one day, got {seconds}")
    return seconds


def _snapshot_payload(snapshot: SalarySnapshot) -> Dict[str, Any]:
    return {
        "status": snapshot.status.value,
        "has_config": snapshot.has_config,
        "today_earned": snapshot.today_earned,
        "month_accumulated": snapshot.month_accumulated,
        "workdays_elapsed": snapshot.workdays_elapsed,
        "workday_count": snapshot.workday_count,
        "today_worked_hours": snapshot.today_worked_hours,
        "total_work_hours": snapshot.total_work_hours,
        "days_in_month": snapshot.days_in_month,
    }


def _snapshot_display(snapshot: SalarySnapshot) -> Dict[str, str]:
    return {
        "today": formatting.money(snapshot.today_earned),
        "month_accumulated": formatting.money(snapshot.month_accumulated),
        "workdays": formatting.workday_count(
            snapshot.workdays_elapsed, snapshot.workday_count
        ),
        "hours": formatting.hours_ratio(
            snapshot.today_worked_hours, snapshot.total_work_hours
        ),
    }


def _config_payload(store: SalaryStore) -> Dict[str, Any]:
    config = store.configuration
    return {
        "month_key": config.month_key,
        "month_salary": config.month_salary,
        "month_salary_set": config.month_salary_set,
        "non_work_days": sorted(config.non_work_days),
        "non_work_days_set": config.non_work_days_set,
        "start_seconds": config.start_seconds,
        "end_seconds": config.end_seconds,
        "work_time": formatting.time_range(config.start_seconds, config.end_seconds),
        "refresh_interval": config.refresh_interval,
        "effective_refresh_interval": store.effective_refresh_interval,
        "is_configured": config.is_configured,
    }
