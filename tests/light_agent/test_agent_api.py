from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from light_agent.agent_api import create_app
from light_agent.config import AgentSettings
from lights.gateway import PublisherGateway
from lights.state import LightState


def _parse_iso_z(ts: str) -> datetime:
    """Parse ISO-8601 timestamps that may end with 'Z' (UTC)."""
    return datetime.fromisoformat(ts.replace("Z", "+00:00"))


LAST_FRAME = datetime(2026, 2, 18, 12, 0, 0, tzinfo=timezone.utc)


class FakeLoop:
    def get_stats(self):
        return {"running": True, "frames_processed": 42, "last_frame_time": LAST_FRAME, "publish_count": 3}


@pytest.fixture
def gateway():
    return PublisherGateway(lambda topic, payload: None, left_light_id="left-1", right_light_id="right-1")


@pytest.fixture
def client(gateway):
    cfg = AgentSettings(agent_id="agent-001")
    return TestClient(create_app(cfg, gateway, FakeLoop()))


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"status": "pose lights agent running"}


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ok"
    _parse_iso_z(data["time_utc"])


def test_heartbeat_endpoint(client):
    response = client.get("/heartbeat")
    assert response.status_code == 200

    data = response.json()
    assert data["agent_id"] == "agent-001"
    assert data["status"] == "running"
    assert data["frames_processed"] == 42
    assert _parse_iso_z(data["last_frame_time"]) == LAST_FRAME
    assert isinstance(data["uptime_seconds"], int)
    assert data["uptime_seconds"] >= 0
    _parse_iso_z(data["time_utc"])


def test_heartbeat_without_loop_is_idle(gateway):
    client = TestClient(create_app(AgentSettings(), gateway))
    data = client.get("/heartbeat").json()
    assert data["status"] == "idle"
    assert data["frames_processed"] == 0


def test_lights_endpoint_reports_states(client, gateway):
    data = client.get("/lights").json()
    assert data["left"] == {"light_id": "left-1", "state": None}
    assert data["right"] == {"light_id": "right-1", "state": None}
    assert data["publish_count"] == 0

    gateway.set_light_state("left-1", LightState.ON)
    gateway.set_light_state("right-1", LightState.OFF)

    data = client.get("/lights").json()
    assert data["left"]["state"] == "ON"
    assert data["right"]["state"] == "OFF"
    assert data["publish_count"] == 2
