"""Tests for the timing and report API routes"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fastapi.testclient import TestClient

from app.api.routes.reports import get_report_store
from app.main import app
from app.services.caster_tax_analyser import CASTER_TAX_TITLE, SPELL_SPEED_TITLE
from app.services.combat_events import EventType
from app.services.fflogs_events import FFLOGS_STATUS_OFFSET

from conftest import ACTOR_ID
from test_report_store import CODE, FakeApi, REPORT_NOT_FOUND_MESSAGE

API = "/api/v1"
REPORT_ACTOR_ID = 7
FIGHT_START = 10000

FFLOGS_TYPES = {
    EventType.PREPARE: "begincast",
    EventType.ACTION: "cast",
    EventType.INTERRUPT: "interrupt",
    EventType.STATUS_APPLY: "applybuff",
    EventType.STATUS_REMOVE: "removebuff",
}


def as_json(events):
    return [
        {
            "type": e.type.value,
            "timestamp": e.timestamp,
            "source_id": e.source_id,
            "target_id": e.target_id,
            "action_id": e.action_id,
            "status_id": e.status_id,
        }
        for e in events
    ]


def as_fflogs(events):
    """Split combat events into FF Logs casts and buffs pages for REPORT_ACTOR_ID."""
    casts, buffs = [], []
    for e in events:
        if e.type == EventType.COMPLETE:
            continue
        raw = {"type": FFLOGS_TYPES[e.type], "timestamp": e.timestamp + FIGHT_START}
        if e.type == EventType.STATUS_REMOVE:
            # Buffs sort ahead of casts at equal timestamps
            raw["timestamp"] += 1
        if e.status_id is not None:
            raw.update(targetID=REPORT_ACTOR_ID, ability={"guid": e.status_id + FFLOGS_STATUS_OFFSET})
            buffs.append(raw)
        else:
            raw.update(sourceID=REPORT_ACTOR_ID, ability={"guid": e.action_id})
            casts.append(raw)
    return {
        "casts": {FIGHT_START: {"events": casts}},
        "buffs": {FIGHT_START: {"events": buffs}},
    }


@pytest.fixture(autouse=True)
def no_database(monkeypatch):
    monkeypatch.setattr("app.database.AsyncSessionLocal", None)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_api(api):
    store = api.store()
    app.dependency_overrides[get_report_store] = lambda: store
    return api


class TestAnalyzeEvents:
    """POST /timing/analyze and GET /timing/{id}"""

    def test_analyze_rotation(self, client, rotation_events, true_speed):
        response = client.post(f"{API}/timing/analyze", json={
            "actor_id": ACTOR_ID,
            "events": as_json(rotation_events),
        })

        assert response.status_code == 200
        data = response.json()
        assert data["spell_speed"] == true_speed
        assert data["caster_tax_ms"] == pytest.approx(100 + 50 / 6)
        assert data["record_count"] == 15
        assert data["statistics"][SPELL_SPEED_TITLE] == true_speed
        assert data["statistics"][CASTER_TAX_TITLE] == "0.108s"

    def test_stored_analysis_retrievable(self, client, rotation_events):
        created = client.post(f"{API}/timing/analyze", json={
            "actor_id": ACTOR_ID,
            "events": as_json(rotation_events),
        }).json()

        response = client.get(f"{API}/timing/{created['id']}")

        assert response.status_code == 200
        assert response.json()["spell_speed"] == created["spell_speed"]

    def test_unknown_analysis(self, client):
        assert client.get(f"{API}/timing/does-not-exist").status_code == 404

    def test_insufficient_data(self, client):
        events = [{"type": "action", "timestamp": 2500 * i, "source_id": ACTOR_ID, "action_id": 16507}
                  for i in range(5)]
        response = client.post(f"{API}/timing/analyze", json={"actor_id": ACTOR_ID, "events": events})

        assert response.status_code == 422
        assert "Insufficient data" in response.json()["detail"]

    def test_out_of_order(self, client, rotation_events):
        events = as_json(rotation_events)
        events[3], events[6] = events[6], events[3]
        response = client.post(f"{API}/timing/analyze", json={"actor_id": ACTOR_ID, "events": events})

        assert response.status_code == 422

    def test_invalid_event_type(self, client):
        response = client.post(f"{API}/timing/analyze", json={
            "actor_id": ACTOR_ID,
            "events": [{"type": "damage", "timestamp": 0}],
        })
        assert response.status_code == 422

    def test_negative_timestamp(self, client):
        response = client.post(f"{API}/timing/analyze", json={
            "actor_id": ACTOR_ID,
            "events": [{"type": "action", "timestamp": -5, "action_id": 16507}],
        })
        assert response.status_code == 422


class TestReportRoutes:
    """GET /reports/{code} and POST /reports/{code}/fights/{fight_id}/timing"""

    def test_get_report(self, client):
        use_api(FakeApi())
        response = client.get(f"{API}/reports/{CODE}")

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == CODE
        assert [f["id"] for f in data["fights"]] == [1, 2]
        assert data["fights"][0]["duration_ms"] == 390000

    def test_private_report(self, client):
        use_api(FakeApi(status=400, error_body={"error": REPORT_NOT_FOUND_MESSAGE}))
        assert client.get(f"{API}/reports/{CODE}").status_code == 404

    def test_api_failure(self, client):
        use_api(FakeApi(status=500))
        assert client.get(f"{API}/reports/{CODE}").status_code == 502

    def test_analyze_fight(self, client, rotation_events, true_speed):
        use_api(FakeApi(events=as_fflogs(rotation_events)))
        response = client.post(
            f"{API}/reports/{CODE}/fights/1/timing",
            params={"actor_id": REPORT_ACTOR_ID},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["spell_speed"] == true_speed
        assert data["report_code"] == CODE
        assert data["fight_id"] == 1
        assert data["actor_id"] == REPORT_ACTOR_ID

    def test_unknown_fight(self, client):
        use_api(FakeApi())
        response = client.post(f"{API}/reports/{CODE}/fights/99/timing", params={"actor_id": REPORT_ACTOR_ID})
        assert response.status_code == 404

    def test_unknown_actor(self, client):
        use_api(FakeApi())
        response = client.post(f"{API}/reports/{CODE}/fights/1/timing", params={"actor_id": 99})
        assert response.status_code == 404

    def test_actor_required(self, client):
        use_api(FakeApi())
        assert client.post(f"{API}/reports/{CODE}/fights/1/timing").status_code == 422
