import json

import pytest
from fastapi.testclient import TestClient

from auto_site_drafter.orchestrator import PipelineOrchestrator
from services.api import main

from conftest import FakeCapability, no_sleep


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "orchestrator", PipelineOrchestrator(FakeCapability(), sleep=no_sleep))
    return TestClient(main.app)


def _events(response):
    return [json.loads(line[len("data: "):]) for line in response.iter_lines() if line.startswith("data: ")]


def test_generate_streams_progress_until_complete(client, aurora_payload):
    with client.stream("POST", "/v1/sites:generate", json=aurora_payload) as response:
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        run_id = response.headers["x-run-id"]
        events = _events(response)

    assert events[0]["stage"] == "validating"
    assert events[-1]["stage"] == "complete"
    assert events[-1]["progress"] == 100
    assert events[-1]["data"]["business_name"] == "Aurora Design Studio"
    assert all(event["run_id"] == run_id for event in events)

    status = client.get(f"/v1/runs/{run_id}").json()
    assert status["status"] == "COMPLETED"
    assert status["progress"] == 100
    assert status["summary"]["pages"][0]["slug"] == "index"


def test_invalid_requirements_return_422(client):
    response = client.post("/v1/sites:generate", json={"businessName": "Acme", "brand": {"primaryColor": "nope"}})

    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "INVALID_REQUIREMENTS"
    assert body["errors"][0]["loc"] == ["brand", "primary_color"]


def test_unknown_runs_are_404(client):
    assert client.get("/v1/runs/run_missing").status_code == 404
    assert client.post("/v1/runs/run_missing:cancel").status_code == 404


def test_cancel_after_completion_is_rejected(client, aurora_payload):
    with client.stream("POST", "/v1/sites:generate", json=aurora_payload) as response:
        run_id = response.headers["x-run-id"]
        _events(response)

    response = client.post(f"/v1/runs/{run_id}:cancel")

    assert response.status_code == 200
    assert response.json() == {"run_id": run_id, "cancelled": False}


def test_healthcheck(client):
    assert client.get("/health").json() == {"status": "ok"}
