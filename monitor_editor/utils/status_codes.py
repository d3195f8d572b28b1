# ---
# File: monitor_editor/utils/status_codes.py
# Purpose: Expected-status option set and the adapter between the status-code
#          selector widget (string option values) and the integer form field.
# ---

from http import HTTPStatus
from typing import List, Tuple

from monitor_editor.utils.units import parse_int

DEFAULT_EXPECTED_STATUS = 200

# Codes offered by the selector; any other integer is still accepted.
COMMON_STATUS_CODES = (
    200, 201, 202, 204,
    301, 302, 304, 307, 308,
    400, 401, 403, 404, 405, 409, 429,
    500, 502, 503, 504,
)


def status_label(code: int) -> str:
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


class StatusCodeSelector:
    """Maps selector option values to the opaque integer expected_status field."""

    def __init__(self, codes: Tuple[int, ...] = COMMON_STATUS_CODES):
        self.codes = codes

    def options(self) -> List[Tuple[str, str]]:
        return [(str(code), status_label(code)) for code in self.codes]

    def to_option_value(self, code: int) -> str:
        return str(code)

    def from_option_value(self, value) -> int:
        return parse_int(value)
