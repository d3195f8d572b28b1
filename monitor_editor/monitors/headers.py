# ---
# File: monitor_editor/monitors/headers.py
# Purpose: Ordered, self-extending list of header key/value rows for editing,
#          and conversion to/from the map stored on the monitor record.
# ---

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
import json
import logging

from monitor_editor.exceptions import HeaderDecodeError

logger = logging.getLogger(__name__)

HEADER_FIELDS = ("key", "value")


@dataclass(frozen=True)
class HeaderRow:
    key: str = ""
    value: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.key and not self.value


EMPTY_ROW = HeaderRow()
HeaderRows = Tuple[HeaderRow, ...]


class HeaderPayloadKind(str, Enum):
    MAP = "MAP"
    ENCODED_STRING = "ENCODED_STRING"
    ABSENT = "ABSENT"


# ---
# Tagged form of the raw headers value found on a monitor record.
# The store may hand back a map, a JSON-encoded string, or nothing at all;
# a list of {"key", "value"} objects is read as a map in list order.
# ---
@dataclass(frozen=True)
class HeaderPayload:
    kind: HeaderPayloadKind
    entries: Tuple[Tuple[str, str], ...] = ()
    encoded: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "HeaderPayload":
        if raw is None:
            return cls(HeaderPayloadKind.ABSENT)
        if isinstance(raw, str):
            if not raw.strip():
                return cls(HeaderPayloadKind.ABSENT)
            return cls(HeaderPayloadKind.ENCODED_STRING, encoded=raw)
        return cls(HeaderPayloadKind.MAP, entries=_entries_from_structure(raw))

    def resolve(self) -> Tuple[Tuple[str, str], ...]:
        """Return the header entries, parsing the encoded string if needed."""
        if self.kind is HeaderPayloadKind.ABSENT:
            return ()
        if self.kind is HeaderPayloadKind.MAP:
            return self.entries
        try:
            parsed = json.loads(self.encoded)
        except ValueError as exc:
            raise HeaderDecodeError("Headers payload is not valid JSON", cause=exc) from exc
        return _entries_from_structure(parsed)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value) if isinstance(value, (dict, list, bool)) else str(value)


def _entries_from_structure(raw: Any) -> Tuple[Tuple[str, str], ...]:
    if isinstance(raw, Mapping):
        return tuple((str(key), _as_text(value)) for key, value in raw.items())
    if isinstance(raw, list) and all(isinstance(item, Mapping) and "key" in item for item in raw):
        return tuple((str(item["key"]), _as_text(item.get("value"))) for item in raw)
    raise HeaderDecodeError(
        "Headers payload is not a map",
        context={"type": type(raw).__name__},
    )


# ---
# Decode the record's headers into editable rows, always followed by one
# empty row. A malformed payload is logged and yields a single empty row
# so editing can start from scratch instead of blocking the page.
# ---
def decode(raw: Any) -> HeaderRows:
    try:
        entries = HeaderPayload.from_raw(raw).resolve()
    except HeaderDecodeError as exc:
        logger.warning("[HEADERS] Could not decode headers, starting empty: %s", exc)
        return (EMPTY_ROW,)
    return tuple(HeaderRow(key, value) for key, value in entries) + (EMPTY_ROW,)


def _check_index(rows: HeaderRows, index: int) -> None:
    if not 0 <= index < len(rows):
        raise IndexError(f"header row {index} out of range (0..{len(rows) - 1})")


# ---
# Replace one field of one row. When the last row turns from empty to
# non-empty a fresh empty row is appended; this is the only growth trigger.
# ---
def on_row_edited(rows: HeaderRows, index: int, field: str, new_value: str) -> HeaderRows:
    if field not in HEADER_FIELDS:
        raise ValueError(f"unknown header field: {field!r}")
    _check_index(rows, index)

    before = rows[index]
    after = replace(before, **{field: new_value})
    updated = rows[:index] + (after,) + rows[index + 1:]

    if index == len(rows) - 1 and before.is_empty and not after.is_empty:
        updated += (EMPTY_ROW,)
    return updated


# ---
# Remove one row. A single remaining row is never removed, and if the new
# last row holds data an empty ready slot is appended after it.
# ---
def on_row_removed(rows: HeaderRows, index: int) -> HeaderRows:
    if len(rows) <= 1:
        return rows
    _check_index(rows, index)

    updated = rows[:index] + rows[index + 1:]
    if not updated[-1].is_empty:
        updated += (EMPTY_ROW,)
    return updated


def on_row_appended(rows: HeaderRows) -> HeaderRows:
    return rows + (EMPTY_ROW,)


# ---
# Rows -> header map. Keys are trimmed, values are kept as typed,
# rows with a blank key are dropped and later duplicates win.
# ---
def encode(rows: HeaderRows) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for row in rows:
        key = row.key.strip()
        if key:
            result[key] = row.value
    return result


class HeaderListEditor:
    """Holds the current header rows and applies the reducers above."""

    def __init__(self, rows: Optional[HeaderRows] = None):
        self.rows: HeaderRows = tuple(rows) if rows else (EMPTY_ROW,)

    @classmethod
    def from_raw(cls, raw: Any) -> "HeaderListEditor":
        return cls(decode(raw))

    def load(self, raw: Any) -> HeaderRows:
        """Replace the rows with the decoded form of a raw headers value."""
        self.rows = decode(raw)
        return self.rows

    def edit(self, index: int, field: str, value: str) -> HeaderRows:
        self.rows = on_row_edited(self.rows, index, field, value)
        return self.rows

    def remove(self, index: int) -> HeaderRows:
        self.rows = on_row_removed(self.rows, index)
        return self.rows

    def append(self) -> HeaderRows:
        self.rows = on_row_appended(self.rows)
        return self.rows

    def to_map(self) -> Dict[str, str]:
        return encode(self.rows)

    def __len__(self) -> int:
        return len(self.rows)
