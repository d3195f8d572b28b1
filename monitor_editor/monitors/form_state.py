# ---
# File: monitor_editor/monitors/form_state.py
# Purpose: Editable form state for one monitor edit session: the decoded
#          fields, the header row editor, validation, dirty tracking and the
#          Loading -> Ready -> Submitting -> Done / Ready-with-error machine.
# ---

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional
import logging

from monitor_editor.exceptions import InvalidTransitionError
from monitor_editor.monitors.headers import EMPTY_ROW, HeaderListEditor, HeaderRows, encode
from monitor_editor.monitors.models import BODY_METHODS, HttpMethod, UpdateMonitorPayload
from monitor_editor.utils.status_codes import DEFAULT_EXPECTED_STATUS
from monitor_editor.utils.units import MIN_INTERVAL_MINUTES, parse_int, to_storage_interval

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = ("interval", "timeout", "expected_status")
TEXT_FIELDS = ("name", "url", "body")
MIN_TIMEOUT_SECONDS = 1
METHOD_VALUES = frozenset(m.value for m in HttpMethod)
BODY_METHOD_VALUES = frozenset(m.value for m in BODY_METHODS)


class FormStatus(str, Enum):
    LOADING = "LOADING"
    READY = "READY"
    SUBMITTING = "SUBMITTING"
    DONE = "DONE"
    READY_WITH_ERROR = "READY_WITH_ERROR"
    LOAD_ERROR = "LOAD_ERROR"


EDITABLE_STATES = frozenset({FormStatus.READY, FormStatus.READY_WITH_ERROR, FormStatus.SUBMITTING})
SUBMITTABLE_STATES = frozenset({FormStatus.READY, FormStatus.READY_WITH_ERROR})


@dataclass(frozen=True)
class EditableConfig:
    """A monitor record in display form: interval in minutes, headers as rows."""

    name: str = ""
    url: str = ""
    method: str = HttpMethod.GET.value
    interval: int = MIN_INTERVAL_MINUTES
    timeout: int = 30
    expected_status: int = DEFAULT_EXPECTED_STATUS
    headers: HeaderRows = field(default=(EMPTY_ROW,))
    body: str = ""

    @property
    def carries_body(self) -> bool:
        return self.method in BODY_METHOD_VALUES


class ConfigFormState:
    """Aggregates the editable record and owns its status transitions.

    Edits are only accepted while the form is Ready, Ready-with-error or
    Submitting; the submit trigger is only armed in Ready / Ready-with-error.
    """

    def __init__(self):
        self.status = FormStatus.LOADING
        self.monitor_id: Any = None
        self.config: Optional[EditableConfig] = None
        self.header_editor = HeaderListEditor()
        self.error: Optional[str] = None
        self.validation_errors: Dict[str, str] = {}
        self._pristine: Optional[EditableConfig] = None

    # ---
    # Flags
    # ---
    @property
    def is_loading(self) -> bool:
        return self.status is FormStatus.LOADING

    @property
    def is_submitting(self) -> bool:
        return self.status is FormStatus.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return self.status in SUBMITTABLE_STATES

    @property
    def is_dirty(self) -> bool:
        return self.config is not None and self.config != self._pristine

    @property
    def show_body_field(self) -> bool:
        return self.config is not None and self.config.carries_body

    @property
    def headers(self) -> HeaderRows:
        return self.header_editor.rows

    # ---
    # Lifecycle transitions
    # ---
    def begin_loading(self, monitor_id: Any) -> None:
        self.status = FormStatus.LOADING
        self.monitor_id = monitor_id
        self.config = None
        self._pristine = None
        self.header_editor.load(None)
        self.error = None
        self.validation_errors = {}

    def load_succeeded(self, config: EditableConfig) -> None:
        self._require(FormStatus.LOADING, action="load_succeeded")
        self.header_editor = HeaderListEditor(config.headers)
        self.config = replace(config, headers=self.header_editor.rows)
        self._pristine = self.config
        self.status = FormStatus.READY

    def load_failed(self, message: str) -> None:
        self._require(FormStatus.LOADING, action="load_failed")
        self.error = message
        self.status = FormStatus.LOAD_ERROR

    def begin_submit(self) -> bool:
        """Arm a submission. Returns False when the guard rejects it."""
        if not self.can_submit:
            logger.info("[SUBMIT] Ignored submit while %s", self.status.value)
            return False
        self.validation_errors = self.validate()
        if self.validation_errors:
            logger.info("[SUBMIT] Missing required fields: %s", ", ".join(sorted(self.validation_errors)))
            return False
        self.error = None
        self.status = FormStatus.SUBMITTING
        return True

    def submit_succeeded(self) -> None:
        self._require(FormStatus.SUBMITTING, action="submit_succeeded")
        self.status = FormStatus.DONE

    def submit_failed(self, message: str) -> None:
        self._require(FormStatus.SUBMITTING, action="submit_failed")
        self.error = message
        self.status = FormStatus.READY_WITH_ERROR

    def dismiss_error(self) -> None:
        if self.status is FormStatus.READY_WITH_ERROR:
            self.error = None
            self.status = FormStatus.READY

    # ---
    # Field edits
    # ---
    def set_field(self, name: str, value: Any) -> EditableConfig:
        """Apply one input change; numeric fields read the text leniently."""
        if name == "method":
            return self.set_method(value)
        if name in NUMERIC_FIELDS:
            parsed = parse_int(value)
        elif name in TEXT_FIELDS:
            parsed = "" if value is None else str(value)
        else:
            raise ValueError(f"unknown form field: {name!r}")
        return self._update(**{name: parsed})

    def set_method(self, method: Any) -> EditableConfig:
        value = method.value if isinstance(method, HttpMethod) else str(method).upper()
        # the body is kept in memory when switching to a method without one
        return self._update(method=value)

    def set_expected_status(self, code: int) -> EditableConfig:
        return self._update(expected_status=parse_int(code))

    def clear_body(self) -> EditableConfig:
        return self._update(body="")

    def edit_header(self, index: int, field_name: str, value: str) -> HeaderRows:
        self._require_editable("edit_header")
        self.header_editor.edit(index, field_name, value)
        self.config = replace(self.config, headers=self.header_editor.rows)
        return self.headers

    def remove_header(self, index: int) -> HeaderRows:
        self._require_editable("remove_header")
        self.header_editor.remove(index)
        self.config = replace(self.config, headers=self.header_editor.rows)
        return self.headers

    def add_header(self) -> HeaderRows:
        self._require_editable("add_header")
        self.header_editor.append()
        self.config = replace(self.config, headers=self.header_editor.rows)
        return self.headers

    # ---
    # Validation and encoding
    # ---
    def validate(self) -> Dict[str, str]:
        """Presence checks only; value ranges are left to the backing store."""
        config = self.config
        if config is None:
            return {"form": "Monitor is not loaded"}

        errors = {}
        if not config.name.strip():
            errors["name"] = "Name is required"
        if not config.url.strip():
            errors["url"] = "URL is required"
        if config.method not in METHOD_VALUES:
            errors["method"] = f"Unsupported method {config.method}"
        if config.interval < MIN_INTERVAL_MINUTES:
            errors["interval"] = f"Interval must be at least {MIN_INTERVAL_MINUTES} minute"
        if config.timeout < MIN_TIMEOUT_SECONDS:
            errors["timeout"] = f"Timeout must be at least {MIN_TIMEOUT_SECONDS} second"
        if config.expected_status is None:
            errors["expected_status"] = "Expected status is required"
        return errors

    def to_payload(self) -> UpdateMonitorPayload:
        config = self.config
        if config is None:
            raise InvalidTransitionError("Cannot encode a form that has not loaded")
        return UpdateMonitorPayload(
            name=config.name,
            url=config.url,
            method=HttpMethod(config.method),
            interval=to_storage_interval(config.interval),
            timeout=config.timeout,
            expected_status=config.expected_status,
            headers=encode(config.headers),
            body=config.body if config.carries_body else None,
        )

    # ---
    # Internals
    # ---
    def _update(self, **changes) -> EditableConfig:
        self._require_editable(f"set {', '.join(changes)}")
        self.config = replace(self.config, **changes)
        return self.config

    def _require(self, expected: FormStatus, *, action: str) -> None:
        if self.status is not expected:
            raise InvalidTransitionError(
                f"{action} is not allowed while {self.status.value}",
                context={"monitor_id": self.monitor_id, "expected": expected.value},
            )

    def _require_editable(self, action: str) -> None:
        if self.status not in EDITABLE_STATES or self.config is None:
            raise InvalidTransitionError(
                f"{action} is not allowed while {self.status.value}",
                context={"monitor_id": self.monitor_id},
            )
