from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from pydantic import BaseModel

from lights.gateway import PublisherGateway

from .config import AgentSettings


class HealthOut(BaseModel):
    status: str
    time_utc: datetime

    model_config = {"json_schema_extra": {"examples": [{"status": "ok", "time_utc": "2026-02-18T12:00:00Z"}]}}


class HeartbeatOut(BaseModel):
    agent_id: str
    status: str
    time_utc: datetime
    uptime_seconds: int
    frames_processed: int
    last_frame_time: Optional[datetime] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "agent_id": "pose_lights_demo",
                    "status": "running",
                    "time_utc": "2026-02-18T12:00:00Z",
                    "uptime_seconds": 42,
                    "frames_processed": 1260,
                    "last_frame_time": "2026-02-18T12:00:00Z",
                }
            ]
        }
    }


class LightOut(BaseModel):
    light_id: str
    state: Optional[str] = None  # None until the first command is sent


class LightsOut(BaseModel):
    left: LightOut
    right: LightOut
    publish_count: int


def create_app(cfg: AgentSettings, gateway: PublisherGateway, loop=None) -> FastAPI:
    """
    Create the agent status API.

    `loop` is the running PoseLightLoop (or anything with get_stats()); without
    it the heartbeat reports an idle agent.
    """
    app = FastAPI(
        title="Pose Lights - Agent API",
        version="0.1.0",
        description="Read-only status endpoints for the pose-driven light agent.",
    )

    @app.get("/")
    def root():
        return {"status": "pose lights agent running"}

    # Store start time for uptime calculation
    started_monotonic = time.monotonic()

    @app.get("/health", response_model=HealthOut, tags=["health"])
    def health() -> HealthOut:
        """Liveness check: returns OK if the agent process is running."""
        return HealthOut(status="ok", time_utc=datetime.now(timezone.utc))

    @app.get("/heartbeat", response_model=HeartbeatOut, tags=["health"])
    def heartbeat() -> HeartbeatOut:
        """Agent identity, frame counters and uptime."""
        stats = loop.get_stats() if loop is not None else {}
        return HeartbeatOut(
            agent_id=cfg.agent_id,
            status="running" if stats.get("running") else "idle",
            time_utc=datetime.now(timezone.utc),
            uptime_seconds=int(time.monotonic() - started_monotonic),
            frames_processed=stats.get("frames_processed", 0),
            last_frame_time=stats.get("last_frame_time"),
        )

    @app.get("/lights", response_model=LightsOut, tags=["lights"])
    def lights() -> LightsOut:
        """Last state sent to each light."""
        states = gateway.snapshot()
        return LightsOut(
            left=LightOut(light_id=gateway.left_light_id, state=states.get(gateway.left_light_id)),
            right=LightOut(light_id=gateway.right_light_id, state=states.get(gateway.right_light_id)),
            publish_count=gateway.publish_count,
        )

    return app
