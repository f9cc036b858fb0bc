"""Tests for the dashboard API."""

import pytest
from fastapi.testclient import TestClient

from live_salary.webapp import create_app


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))


def test_status_before_configuration(client):
    body = client.get("/api/status").json()
    assert body["menu_bar_title"] == "noSet"
    assert body["month_key"] == "2026-02"
    assert body["snapshot"]["status"] == "noSet"
    assert body["snapshot"]["has_config"] is False
    assert body["snapshot"]["today_earned"] is None
    assert body["display"] == {
        "today": "--",
        "month_accumulated": "--",
        "workdays": "--",
        "hours": "--",
    }


def test_configure_then_read_status(client):
    assert client.put("/api/month-salary", json={"text": "22,000"}).status_code == 200
    response = client.put("/api/non-work-days", json={"days": [6, 7, 13, 14]})
    assert response.status_code == 200
    assert response.json()["is_configured"] is True

    body = client.get("/api/status").json()
    assert body["snapshot"]["status"] == "Working"
    assert body["menu_bar_title"] == "¥407.41"
    assert body["display"]["today"] == "¥407.41"
    assert body["display"]["workdays"] == "8/24"
    assert body["display"]["hours"] == "4.0/9.0"
    assert body["snapshot"]["days_in_month"] == 28


def test_salary_value_and_rejections(client):
    response = client.put("/api/month-salary", json={"value": 12000.5})
    assert response.json()["month_salary"] == 12000.5
    assert client.put("/api/month-salary", json={"text": "abc"}).status_code == 400
    assert client.put("/api/month-salary", json={}).status_code == 400
    assert client.put("/api/month-salary", json={"value": -3}).status_code == 422


def test_non_work_days_from_text(client):
    response = client.put("/api/non-work-days", json={"text": "1-3, 10"})
    assert response.json()["non_work_days"] == [1, 2, 3, 10]
    assert client.put("/api/non-work-days", json={"days": [0]}).status_code == 400
    assert client.put("/api/non-work-days", json={"text": "soon"}).status_code == 400
    assert client.put("/api/non-work-days", json={}).status_code == 400


def test_work_time_accepts_seconds_or_clock_text(client):
    body = client.patch("/api/work-time", json={"start": "08:30"}).json()
    assert body["start_seconds"] == 30600
    assert body["end_seconds"] == 64800
    body = client.patch("/api/work-time", json={"end": 61200}).json()
    assert body["work_time"] == "08:30-17:00"
    assert client.patch("/api/work-time", json={"start": "25:00"}).status_code == 400
    assert client.patch("/api/work-time", json={"end": 90000}).status_code == 400


def test_refresh_interval_is_clamped_not_rejected(client, store):
    body = client.patch("/api/refresh-interval", json={"seconds": 0.05}).json()
    assert body["refresh_interval"] == 0.05
    assert body["effective_refresh_interval"] == 0.1
    assert store.refresh_interval == 0.05


def test_unknown_fields_are_rejected(client):
    response = client.put("/api/month-salary", json={"value": 1, "currency": "USD"})
    assert response.status_code == 422


def test_calendar(client):
    client.put("/api/non-work-days", json={"days": [7, 14]})
    body = client.get("/api/calendar").json()
    assert body["month_key"] == "2026-02"
    assert body["weekdays"][0] == "Sun"
    assert body["weeks"][0] == [1, 2, 3, 4, 5, 6, 7]
    assert len(body["weeks"]) == 4
    assert body["non_work_days"] == [7, 14]
    assert body["non_work_days_set"] is True


def test_lifespan_arms_and_stops_refresh(store):
    app = create_app(store=store)
    with TestClient(app) as client:
        assert client.get("/api/status").json()["refresh_running"] is True
    assert not store.is_running()


@pytest.mark.parametrize("huge", [1e10, 1e15])
def test_huge_refresh_interval_keeps_refreshing(store, huge):
    with TestClient(create_app(store=store)) as client:
        response = client.patch("/api/refresh-interval", json={"seconds": huge})
        assert response.status_code == 200
        assert response.json()["effective_refresh_interval"] == 24 * 3600
        assert client.get("/api/config").status_code == 200
        assert client.get("/api/status").json()["refresh_running"] is True


def test_toggle_non_work_day(client):
    body = client.post("/api/non-work-days/6/toggle").json()
    assert body["non_work_days"] == [6]
    assert body["non_work_days_set"] is True
    body = client.post("/api/non-work-days/7/toggle").json()
    assert body["non_work_days"] == [6, 7]
    body = client.post("/api/non-work-days/6/toggle").json()
    assert body["non_work_days"] == [7]
    assert client.post("/api/non-work-days/0/toggle").status_code == 400
    assert client.post("/api/non-work-days/x/toggle").status_code == 422


def test_fractional_days_are_rejected(client):
    assert client.put("/api/non-work-days", json={"days": [6.9]}).status_code == 422
