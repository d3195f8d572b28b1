# ---
# File: monitor_editor/exceptions.py
# Purpose: Error taxonomy for the monitor edit session: fatal load errors,
#          recoverable header decode and submit errors, transport failures.
# ---

from typing import Any, Dict, Optional


class MonitorEditorError(Exception):
    """Base exception for everything raised by the edit session core."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.cause = cause
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.context:
            parts.append("[" + ", ".join(f"{k}={v}" for k, v in self.context.items()) + "]")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " ".join(parts)


# ---
# Raised when the persisted record cannot be fetched or decoded.
# Fatal to the edit session: no partial form is shown.
# ---
class LoadError(MonitorEditorError):
    def __init__(self, monitor_id: Any, message: str, *, cause: Optional[Exception] = None) -> None:
        super().__init__(message, context={"monitor_id": monitor_id}, cause=cause)
        self.monitor_id = monitor_id


# ---
# Raised while decoding a malformed header payload.
# decode() catches it and degrades to an empty header list.
# ---
class HeaderDecodeError(MonitorEditorError):
    pass


# ---
# Raised or carried when an update is rejected or cannot be delivered.
# Recoverable: the form keeps its edits and may be resubmitted.
# ---
class SubmitError(MonitorEditorError):
    def __init__(self, monitor_id: Any, message: str, *, cause: Optional[Exception] = None) -> None:
        super().__init__(message, context={"monitor_id": monitor_id}, cause=cause)
        self.monitor_id = monitor_id


# ---
# Transport-level failure talking to the monitors API
# (connection refused, timeout, undecodable body).
# ---
class MonitorApiError(MonitorEditorError):
    pass


# ---
# An action was issued in a form state that does not accept it.
# ---
class InvalidTransitionError(MonitorEditorError):
    pass
