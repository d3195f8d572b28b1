# ---
# File: monitor_editor/utils/units.py
# Purpose: Conversions between storage units (seconds) and display units
#          (minutes) for the interval field, plus lenient integer parsing
#          of user-typed numeric input.
# ---

import math
import re
from typing import Any

SECONDS_PER_MINUTE = 60
MIN_INTERVAL_MINUTES = 1

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


# ---
# Parse user input into an integer the way a number field is read:
# leading digits win ("12abc" -> 12, "3.7" -> 3), anything unparsable -> 0.
# Never raises.
# ---
def parse_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return math.trunc(value)
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


# ---
# Seconds -> whole minutes, floor division.
# The round trip back to seconds is lossy for values that are not
# multiples of 60 and must stay that way.
# ---
def to_display_interval(storage_seconds: Any) -> int:
    if isinstance(storage_seconds, float) and math.isfinite(storage_seconds):
        return math.floor(storage_seconds / SECONDS_PER_MINUTE)
    return parse_int(storage_seconds) // SECONDS_PER_MINUTE


# ---
# Whole minutes -> seconds.
# ---
def to_storage_interval(display_minutes: Any) -> int:
    return parse_int(display_minutes) * SECONDS_PER_MINUTE


def interval_granularity_hint() -> str:
    return f"Minimum interval {MIN_INTERVAL_MINUTES} minute; values are stored in whole minutes"
