# ---
# File: monitor_editor/monitors/submit_controller.py
# Purpose: Encode the edit form into an update payload, send it, and either
#          navigate to the monitor detail view or surface the failure while
#          keeping every in-progress edit.
# ---

from dataclasses import dataclass
from typing import Any, Optional
import asyncio
import logging

from monitor_editor.exceptions import MonitorApiError, SubmitError
from monitor_editor.monitors.api_client import MonitorsApi
from monitor_editor.monitors.form_state import ConfigFormState, FormStatus
from monitor_editor.navigation import Navigator, detail_view

logger = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE = "Failed to update monitor, please try again later"


@dataclass(frozen=True)
class SubmitOutcome:
    success: bool
    error: Optional[SubmitError] = None

    @property
    def rejected(self) -> bool:
        """True when the guard refused to send anything."""
        return not self.success and self.error is None


class SubmitController:
    def __init__(self, api: MonitorsApi, form: ConfigFormState, navigator: Navigator):
        self.api = api
        self.form = form
        self.navigator = navigator

    # ---
    # Submit the form for monitor_id.
    # The form leaves READY before the first await, so a second submit
    # issued while this one is in flight is refused by begin_submit().
    # ---
    async def submit(self, monitor_id: Any) -> SubmitOutcome:
        if self.form.monitor_id != monitor_id or not self.form.begin_submit():
            return SubmitOutcome(success=False)

        payload = self.form.to_payload()
        logger.info("[SUBMIT] Updating monitor %s", monitor_id)

        try:
            response = await self.api.update_monitor(monitor_id, payload)
        except MonitorApiError as exc:
            return self._fail(monitor_id, SUBMIT_FAILED_MESSAGE, cause=exc)
        except asyncio.CancelledError:
            logger.warning("[SUBMIT] Update of monitor %s cancelled", monitor_id)
            if self._still_current(monitor_id):
                self.form.submit_failed(SUBMIT_FAILED_MESSAGE)
            raise
        except Exception as exc:
            return self._fail(monitor_id, SUBMIT_FAILED_MESSAGE, cause=exc)

        if not response.success:
            return self._fail(monitor_id, response.message or SUBMIT_FAILED_MESSAGE)

        if not self._still_current(monitor_id):
            return SubmitOutcome(success=True)

        self.form.submit_succeeded()
        logger.info("[SUBMIT] Monitor %s updated", monitor_id)
        self.navigator.navigate(detail_view(monitor_id))
        return SubmitOutcome(success=True)

    def _still_current(self, monitor_id: Any) -> bool:
        # the session may have moved on to another monitor while awaiting
        if self.form.monitor_id != monitor_id or self.form.status is not FormStatus.SUBMITTING:
            logger.warning("[SUBMIT] Form moved on before monitor %s update settled", monitor_id)
            return False
        return True

    def _fail(self, monitor_id: Any, message: str, *, cause: Optional[Exception] = None) -> SubmitOutcome:
        error = SubmitError(monitor_id, message, cause=cause)
        logger.error("[SUBMIT] %s", error)
        if self._still_current(monitor_id):
            self.form.submit_failed(message)
        return SubmitOutcome(success=False, error=error)
