# ---
# File: monitor_editor/monitors/load_controller.py
# Purpose: Fetch a monitor by id and decode it into the edit form.
#          Responses belonging to a superseded load are discarded.
# ---

from typing import Any, Optional
import logging

from pydantic import ValidationError

from monitor_editor.exceptions import LoadError, MonitorApiError
from monitor_editor.monitors import headers
from monitor_editor.monitors.api_client import MonitorsApi
from monitor_editor.monitors.form_state import ConfigFormState, EditableConfig
from monitor_editor.monitors.models import MonitorRecord
from monitor_editor.utils.units import to_display_interval

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load monitor details"


# ---
# MonitorRecord -> EditableConfig: interval to minutes, headers to rows,
# missing body to an empty string.
# ---
def decode_record(record: MonitorRecord) -> EditableConfig:
    return EditableConfig(
        name=record.name,
        url=record.url,
        method=record.method.value,
        interval=to_display_interval(record.interval),
        timeout=record.timeout,
        expected_status=record.expected_status,
        headers=headers.decode(record.headers),
        body=record.body or "",
    )


class LoadController:
    def __init__(self, api: MonitorsApi, form: ConfigFormState):
        self.api = api
        self.form = form
        self._generation = 0

    # ---
    # Load one monitor into the form.
    # Returns the decoded config, or None when a newer load superseded this
    # one while it was in flight. Raises LoadError after moving the form to
    # LOAD_ERROR when the record is missing, unreachable or malformed.
    # ---
    async def load(self, monitor_id: Any) -> Optional[EditableConfig]:
        self._generation += 1
        generation = self._generation
        self.form.begin_loading(monitor_id)
        logger.info("[LOAD] Fetching monitor %s", monitor_id)

        try:
            response = await self.api.fetch_monitor(monitor_id)
        except MonitorApiError as exc:
            if self._is_stale(generation, monitor_id):
                return None
            return self._fail(monitor_id, LOAD_FAILED_MESSAGE, cause=exc)

        if self._is_stale(generation, monitor_id):
            return None

        if not response.success or not response.monitor:
            return self._fail(monitor_id, response.message or LOAD_FAILED_MESSAGE)

        try:
            record = MonitorRecord.model_validate(response.monitor)
        except ValidationError as exc:
            return self._fail(monitor_id, LOAD_FAILED_MESSAGE, cause=exc)

        config = decode_record(record)
        self.form.load_succeeded(config)
        logger.info("[LOAD] Monitor %s ready for editing", monitor_id)
        return self.form.config

    def _is_stale(self, generation: int, monitor_id: Any) -> bool:
        if generation != self._generation or self.form.monitor_id != monitor_id:
            logger.debug("[LOAD] Dropping stale response for monitor %s", monitor_id)
            return True
        return False

    def _fail(self, monitor_id: Any, message: str, *, cause: Optional[Exception] = None):
        logger.error("[LOAD] Monitor %s could not be loaded: %s", monitor_id, cause or message)
        self.form.load_failed(message)
        raise LoadError(monitor_id, message, cause=cause)
