"""
Shared fixtures: a stub monitors API served by FastAPI and reached through
the real httpx client, plus a navigator that records where it was sent.
"""

from __future__ import annotations

import copy
from typing import Any

import httpx
import pytest
from fastapi import Body, FastAPI, HTTPException

from monitor_editor.monitors.api_client import MonitorApiClient
from monitor_editor.monitors.edit_session import MonitorEditSession

BASE_URL = "http://testserver"


def make_monitor(**overrides: Any) -> dict[str, Any]:
    monitor = {
        "id": 42,
        "name": "Ping",
        "url": "http://x",
        "method": "GET",
        "interval": 120,
        "timeout": 30,
        "expected_status": 200,
        "headers": '{"A":"B"}',
        "body": None,
    }
    monitor.update(overrides)
    return monitor


class StubMonitorsBackend:
    """In-memory monitors API mirroring the GET/PUT monitor routes."""

    def __init__(self) -> None:
        self.monitors: dict[str, dict[str, Any]] = {"42": make_monitor()}
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.update_response: dict[str, Any] | None = None
        self.app = self._build_app()

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        backend = self

        @app.get("/api/monitors/{monitor_id}")
        async def get_monitor(monitor_id: str):
            monitor = backend.monitors.get(monitor_id)
            if monitor is None:
                raise HTTPException(status_code=404, detail="Monitor not found")
            return {"success": True, "monitor": copy.deepcopy(monitor)}

        @app.put("/api/monitors/{monitor_id}")
        async def update_monitor(monitor_id: str, payload: dict = Body(...)):
            backend.updates.append((monitor_id, payload))
            if backend.update_response is not None:
                return backend.update_response
            if monitor_id not in backend.monitors:
                raise HTTPException(status_code=404, detail="Monitor not found")
            return {"success": True}

        return app


class RecordingNavigator:
    def __init__(self) -> None:
        self.visited = []

    def navigate(self, target) -> None:
        self.visited.append(target)

    @property
    def paths(self) -> list[str]:
        return [target.path for target in self.visited]


@pytest.fixture
def backend() -> StubMonitorsBackend:
    return StubMonitorsBackend()


@pytest.fixture
def api(backend: StubMonitorsBackend) -> MonitorApiClient:
    return MonitorApiClient(BASE_URL, transport=httpx.ASGITransport(app=backend.app))


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def session(api: MonitorApiClient, navigator: RecordingNavigator) -> MonitorEditSession:
    return MonitorEditSession(api, navigator, owns_api=True)
