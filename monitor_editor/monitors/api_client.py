# ---
# File: monitor_editor/monitors/api_client.py
# Purpose: Async client for the monitors API: fetch a monitor by id and
#          send a partial update. Both calls return the {success, message}
#          envelope; transport failures raise MonitorApiError.
# ---

from typing import Any, Optional, Protocol
from urllib.parse import quote
import logging

import httpx
from pydantic import ValidationError

from monitor_editor.exceptions import MonitorApiError
from monitor_editor.monitors.models import (
    FetchMonitorResponse,
    UpdateMonitorPayload,
    UpdateMonitorResponse,
)

logger = logging.getLogger(__name__)

MONITORS_PATH = "/api/monitors"


def _monitor_path(monitor_id: Any) -> str:
    return f"{MONITORS_PATH}/{quote(str(monitor_id), safe='')}"


class MonitorsApi(Protocol):
    async def fetch_monitor(self, monitor_id: Any) -> FetchMonitorResponse: ...

    async def update_monitor(self, monitor_id: Any, payload: UpdateMonitorPayload) -> UpdateMonitorResponse: ...


class MonitorApiClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "MonitorApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---
    # GET /api/monitors/{id}
    # ---
    async def fetch_monitor(self, monitor_id: Any) -> FetchMonitorResponse:
        response = await self._request("GET", _monitor_path(monitor_id))
        return self._parse(FetchMonitorResponse, response)

    # ---
    # PUT /api/monitors/{id} with the encoded form payload.
    # ---
    async def update_monitor(self, monitor_id: Any, payload: UpdateMonitorPayload) -> UpdateMonitorResponse:
        response = await self._request("PUT", _monitor_path(monitor_id), json=payload.to_json())
        return self._parse(UpdateMonitorResponse, response)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("[API] %s %s failed: %s", method, path, str(exc)[:100])
            raise MonitorApiError(f"{method} {path} failed", cause=exc) from exc
        logger.debug("[API] %s %s -> %s", method, path, response.status_code)
        return response

    @classmethod
    def _parse(cls, model, response: httpx.Response):
        try:
            return model.model_validate(cls._envelope(response))
        except ValidationError as exc:
            raise MonitorApiError(
                "Monitors API returned a malformed envelope",
                context={"status": response.status_code},
                cause=exc,
            ) from exc

    # ---
    # Normalize any response into a {success, message, ...} dict.
    # Error statuses keep the server message: our own envelope if present,
    # else a FastAPI-style {"detail": ...}.
    # ---
    @staticmethod
    def _envelope(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as exc:
            raise MonitorApiError(
                "Monitors API returned a non-JSON body",
                context={"status": response.status_code},
                cause=exc,
            ) from exc

        if not isinstance(data, dict):
            raise MonitorApiError(
                "Monitors API returned an unexpected body",
                context={"status": response.status_code, "type": type(data).__name__},
            )

        if response.is_success:
            data.setdefault("success", True)
            return data

        message = data.get("message")
        detail = data.get("detail")
        if message is None and isinstance(detail, str):
            message = detail
        return {"success": False, "message": message}
