from __future__ import annotations

import asyncio
from typing import Any

import pytest

from conftest import make_monitor
from monitor_editor.exceptions import LoadError, MonitorApiError
from monitor_editor.monitors.form_state import ConfigFormState, FormStatus
from monitor_editor.monitors.headers import EMPTY_ROW, HeaderRow
from monitor_editor.monitors.load_controller import LOAD_FAILED_MESSAGE, LoadController, decode_record
from monitor_editor.monitors.models import FetchMonitorResponse, MonitorRecord


class GatedMonitorsApi:
    """Fake API whose fetches block until the test releases them."""

    def __init__(self) -> None:
        self.gates: dict[Any, asyncio.Event] = {}
        self.responses: dict[Any, Any] = {}

    def respond(self, monitor_id: Any, response: Any) -> None:
        self.responses[monitor_id] = response
        self.gates.setdefault(monitor_id, asyncio.Event()).set()

    async def fetch_monitor(self, monitor_id: Any) -> FetchMonitorResponse:
        await self.gates.setdefault(monitor_id, asyncio.Event()).wait()
        response = self.responses[monitor_id]
        if isinstance(response, Exception):
            raise response
        return response

    async def update_monitor(self, monitor_id, payload):  # pragma: no cover - unused
        raise NotImplementedError


def test_decode_record_matches_example() -> None:
    config = decode_record(MonitorRecord.model_validate(make_monitor()))
    assert config.interval == 2
    assert config.headers == (HeaderRow("A", "B"), EMPTY_ROW)
    assert config.body == ""
    assert config.method == "GET"


def test_record_accepts_camel_case_status_and_lowercase_method() -> None:
    raw = make_monitor(method="post", body="{}")
    raw["expectedStatus"] = raw.pop("expected_status")
    record = MonitorRecord.model_validate(raw)
    assert record.expected_status == 200
    assert decode_record(record).method == "POST"


@pytest.mark.asyncio
async def test_load_success() -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    api.respond(42, FetchMonitorResponse(success=True, monitor=make_monitor()))

    config = await LoadController(api, form).load(42)

    assert form.status is FormStatus.READY
    assert config == form.config
    assert config.interval == 2
    assert form.headers == (HeaderRow("A", "B"), EMPTY_ROW)


@pytest.mark.asyncio
async def test_not_found_message_is_surfaced() -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    api.respond(42, FetchMonitorResponse(success=False, message="not found"))

    with pytest.raises(LoadError) as excinfo:
        await LoadController(api, form).load(42)

    assert excinfo.value.message == "not found"
    assert form.status is FormStatus.LOAD_ERROR
    assert form.error == "not found"
    assert form.config is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        MonitorApiError("connection refused"),
        FetchMonitorResponse(success=False),
        FetchMonitorResponse(success=True, monitor=None),
        FetchMonitorResponse(success=True, monitor={"name": "broken"}),
    ],
)
async def test_other_failures_use_generic_message(response) -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    api.respond(42, response)

    with pytest.raises(LoadError):
        await LoadController(api, form).load(42)

    assert form.status is FormStatus.LOAD_ERROR
    assert form.error == LOAD_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_malformed_headers_do_not_block_load() -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    api.respond(42, FetchMonitorResponse(success=True, monitor=make_monitor(headers="{oops")))

    await LoadController(api, form).load(42)

    assert form.status is FormStatus.READY
    assert form.headers == (EMPTY_ROW,)


@pytest.mark.asyncio
async def test_stale_response_is_ignored_when_id_changes() -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    loader = LoadController(api, form)

    first = asyncio.create_task(loader.load(1))
    await asyncio.sleep(0)
    second = asyncio.create_task(loader.load(2))
    await asyncio.sleep(0)

    api.respond(2, FetchMonitorResponse(success=True, monitor=make_monitor(id=2, name="Second")))
    assert (await second).name == "Second"

    api.respond(1, FetchMonitorResponse(success=True, monitor=make_monitor(id=1, name="First")))
    assert await first is None

    assert form.monitor_id == 2
    assert form.config.name == "Second"
    assert form.status is FormStatus.READY


@pytest.mark.asyncio
async def test_stale_failure_does_not_clobber_newer_load() -> None:
    api = GatedMonitorsApi()
    form = ConfigFormState()
    loader = LoadController(api, form)

    first = asyncio.create_task(loader.load(1))
    await asyncio.sleep(0)
    second = asyncio.create_task(loader.load(2))
    await asyncio.sleep(0)

    api.respond(1, MonitorApiError("timeout"))
    assert await first is None
    assert form.status is FormStatus.LOADING

    api.respond(2, FetchMonitorResponse(success=True, monitor=make_monitor(id=2)))
    await second
    assert form.status is FormStatus.READY


@pytest.mark.parametrize(
    ("body", "expected"),
    [({"ping": True}, '{"ping": true}'), (["a"], '["a"]'), (7, "7"), (None, "")],
)
def test_non_string_body_is_stringified(body, expected: str) -> None:
    record = MonitorRecord.model_validate(make_monitor(method="POST", body=body))
    assert decode_record(record).body == expected
