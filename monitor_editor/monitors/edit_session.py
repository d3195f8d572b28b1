# ---
# File: monitor_editor/monitors/edit_session.py
# Purpose: One monitor edit page worth of state: the form, its load and
#          submit controllers, and the cancel / back-to-list exits.
# ---

from typing import Any, Optional
import logging

import httpx

from monitor_editor import config
from monitor_editor.exceptions import LoadError
from monitor_editor.monitors.api_client import MonitorApiClient, MonitorsApi
from monitor_editor.monitors.form_state import ConfigFormState, EditableConfig, FormStatus
from monitor_editor.monitors.load_controller import LoadController
from monitor_editor.monitors.submit_controller import SubmitController, SubmitOutcome
from monitor_editor.navigation import Navigator, detail_view, list_view

logger = logging.getLogger(__name__)


class MonitorEditSession:
    def __init__(self, api: MonitorsApi, navigator: Navigator, *, owns_api: bool = False):
        self.api = api
        self.owns_api = owns_api
        self.navigator = navigator
        self.form = ConfigFormState()
        self.loader = LoadController(api, self.form)
        self.submitter = SubmitController(api, self.form, navigator)

    async def __aenter__(self) -> "MonitorEditSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ---
    # Release the API client, but only one this session was handed to own.
    # ---
    async def aclose(self) -> None:
        if not self.owns_api:
            return
        close = getattr(self.api, "aclose", None)
        if close is not None:
            await close()

    @property
    def monitor_id(self) -> Any:
        return self.form.monitor_id

    @property
    def status(self) -> FormStatus:
        return self.form.status

    @property
    def title(self) -> str:
        name = self.form.config.name if self.form.config else ""
        return f"Edit monitor: {name}"

    # ---
    # Mount (or re-mount with a new id). A load error is kept on the form
    # for the blocking error view instead of propagating to the caller.
    # ---
    async def open(self, monitor_id: Any) -> Optional[EditableConfig]:
        try:
            return await self.loader.load(monitor_id)
        except LoadError as exc:
            logger.info("[SESSION] Showing load error for monitor %s: %s", monitor_id, exc.message)
            return None

    async def submit(self) -> SubmitOutcome:
        return await self.submitter.submit(self.form.monitor_id)

    def cancel(self) -> None:
        self.navigator.navigate(detail_view(self.form.monitor_id))

    def back_to_list(self) -> None:
        self.navigator.navigate(list_view())


def create_edit_session(navigator: Navigator, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> MonitorEditSession:
    config.configure_logging()
    api = MonitorApiClient(
        config.MONITOR_API_BASE_URL,
        timeout=config.MONITOR_API_TIMEOUT_SECONDS,
        transport=transport,
    )
    return MonitorEditSession(api, navigator, owns_api=True)
