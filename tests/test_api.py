import datetime

import pytest
from fastapi.testclient import TestClient

from conftest import FakeEphemerisProvider
from muhurat_finder.api.dependencies import get_ephemeris_provider
from muhurat_finder.main import app

DELHI = {"latitude": 28.6139, "longitude": 77.2090, "timezone": "Asia/Kolkata"}
RANK_REQUEST = {
    "birth_profile": {"date": "1993-05-08", "location": "Jaipur"},
    "event_category": "travel",
    "horizon_days": 14,
    "top_n": 5,
    "timezone": "Asia/Kolkata",
    "today": "2026-10-19",
}


@pytest.fixture
def client():
    provider = FakeEphemerisProvider()
    app.dependency_overrides[get_ephemeris_provider] = lambda: provider
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(provider):
    app.dependency_overrides[get_ephemeris_provider] = lambda: provider


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_categories(client):
    res = client.get("/api/v1/muhurat/categories")
    assert res.status_code == 200
    keys = [c["key"] for c in res.json()]
    assert keys == ["wedding", "travel", "business", "property", "education"]
    assert res.json()[0]["favorable_tithi"] == [1, 3, 5, 7, 10, 11, 13]


def test_rank(client):
    res = client.post("/api/v1/muhurat/rank", json=RANK_REQUEST)
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "success"
    assert [c["date"] for c in body["candidates"]] == [
        "2026-10-19", "2026-10-21", "2026-10-22", "2026-10-23", "2026-10-26",
    ]
    assert body["meta"]["ephemeris"] == "fake"


def test_rank_unknown_category(client):
    res = client.post("/api/v1/muhurat/rank", json=dict(RANK_REQUEST, event_category="coronation"))
    assert res.status_code == 404
    assert "coronation" in res.json()["detail"]


def test_rank_ephemeris_down(client):
    _use(FakeEphemerisProvider(fail=True))
    res = client.post("/api/v1/muhurat/rank", json=RANK_REQUEST)
    assert res.status_code == 503


def test_rank_validation(client):
    res = client.post("/api/v1/muhurat/rank", json=dict(RANK_REQUEST, horizon_days=0))
    assert res.status_code == 422


def test_day(client):
    res = client.post("/api/v1/muhurat/day", json={"date": "2026-10-19", "location": DELHI})
    assert res.status_code == 200
    body = res.json()
    assert len(body["muhurtas"]) == 15
    assert body["daylight_source"] == "ephemeris"
    assert body["muhurtas"][1]["quality"] == "Inauspicious"


def test_day_without_daylight(client):
    _use(FakeEphemerisProvider(fail_rise_set=True))
    res = client.post("/api/v1/muhurat/day", json={"date": "2026-10-19", "location": DELHI})
    assert res.status_code == 503


def test_day_inverted_window(client):
    _use(FakeEphemerisProvider(sunrise=datetime.time(19, 0), sunset=datetime.time(7, 0)))
    res = client.post("/api/v1/muhurat/day", json={"date": "2026-10-19", "location": DELHI})
    assert res.status_code == 422


def test_day_requires_a_location(client):
    res = client.post("/api/v1/muhurat/day", json={"date": "2026-10-19", "location": {}})
    assert res.status_code == 422


def test_positions(client):
    res = client.post(
        "/api/v1/muhurat/positions",
        json={"date": "2026-10-21", "time": "10:15:00", "timezone": "Asia/Kolkata"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["tithi"]["number"] == 8
    assert body["positions"]["Ketu"]["derived"] is True
    assert body["geo"] is None
