"""Conversion between cell values and their editable text.

Parsing never raises: input that does not fit the column type is kept as text
and left for the server to reject.
"""

import json
import math
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, NamedTuple
from uuid import UUID

from tusker.codec.arrays import decode_array, encode_array
from tusker.codec.kinds import ValueKind, classify
from tusker.config import SETTINGS
from tusker.types import CellValue

LARGE_VALUE_THRESHOLD = SETTINGS["display"]["large_value_threshold"]
TRUNCATE_LENGTH = SETTINGS["display"]["truncate_length"]
ELLIPSIS = SETTINGS["display"]["ellipsis"]

# Leading numbers, read the way JavaScript parseInt and parseFloat read them
INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+)", re.ASCII)
FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)", re.ASCII)


class CellPreview(NamedTuple):
    """Inline display text of a cell."""

    text: str
    large: bool


def to_json(value: Any, *, sort_keys: bool = False) -> str:  # noqa: ANN401
    """Serialize a value as compact JSON, falling back to text for other types."""
    return json.dumps(
        value,
        default=str,
        separators=(",", ":"),
        ensure_ascii=False,
        sort_keys=sort_keys,
    )


def truncate_text(text: str, length: int = TRUNCATE_LENGTH) -> str:
    """Cut text to the display length, marking the cut."""
    if len(text) <= length:
        return text
    return text[:length] + ELLIPSIS


def format_value(
    value: CellValue,
    *,
    truncate: bool = False,
    data_type: str | None = None,
) -> str:
    """Format a cell value as editable text."""
    match value:
        case None:
            return ""
        case bool():
            return "true" if value else "false"
        case list() if data_type and classify(data_type) is ValueKind.ARRAY:
            text = encode_array(value)
        case dict() | list():
            text = to_json(value)
        case _:
            text = str(value)
    return truncate_text(text) if truncate else text


def _parse_integer(text: str) -> CellValue:
    if match := INTEGER_PREFIX.match(text):
        return int(match[1])
    return text


def _parse_float(text: str) -> CellValue:
    if not (match := FLOAT_PREFIX.match(text)):
        return text
    number = float(match[1])
    return number if math.isfinite(number) else text


def _parse_json(text: str) -> CellValue:
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_value(text: str, data_type: str) -> CellValue:
    """Parse editor text into a value for a column of the given data type."""
    if text == "" or text.lower() == "null":
        return None

    match classify(data_type):
        case ValueKind.INTEGER:
            return _parse_integer(text)
        case ValueKind.FLOAT:
            return _parse_float(text)
        case ValueKind.BOOLEAN:
            return text.lower() == "true"
        case ValueKind.JSON:
            return _parse_json(text)
        case ValueKind.ARRAY:
            return decode_array(text)
        case _:
            return text


def is_large_value(value: CellValue, data_type: str | None = None) -> bool:
    """Check if a value is too large to be edited inline."""
    if value is None:
        return False
    return len(format_value(value, data_type=data_type)) > LARGE_VALUE_THRESHOLD


def cell_preview(value: CellValue, data_type: str | None = None) -> CellPreview:
    """Return the inline preview of a cell and whether it needs the full editor."""
    return CellPreview(
        text=format_value(value, truncate=True, data_type=data_type),
        large=is_large_value(value, data_type),
    )


def values_equal(a: CellValue, b: CellValue) -> bool:
    """Compare two cell values for change detection.

    JSON documents compare by canonical serialization, and a JSON document equals
    a string holding its compact serialization, so a jsonb value redisplayed as
    text does not count as an edit.
    """
    if a is None or b is None:
        return a is None and b is None

    a_json = isinstance(a, dict | list)
    b_json = isinstance(b, dict | list)
    if a_json and b_json:
        return to_json(a, sort_keys=True) == to_json(b, sort_keys=True)
    if a_json and isinstance(b, str):
        return to_json(a) == b
    if b_json and isinstance(a, str):
        return a == to_json(b)

    # bool is an int subclass, only treat it as equal through its text form
    if isinstance(a, bool) is isinstance(b, bool) and a == b:
        return True
    return format_value(a) == format_value(b)


def _decode_decimal(value: Decimal) -> CellValue:
    if not value.is_finite():
        return str(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def decode_cell(value: Any) -> CellValue:  # noqa: ANN401, PLR0911
    """Convert a value returned by the database driver into a cell value.

    Binary data becomes Postgres hex text and temporal values ISO text. Lists
    and JSON documents are decoded item by item.
    """
    match value:
        case None | bool() | int() | float() | str():
            return value
        case bytes() | bytearray() | memoryview():
            return "\\x" + bytes(value).hex()
        case datetime() | date() | time():
            return value.isoformat()
        case Decimal():
            return _decode_decimal(value)
        case UUID():
            return str(value)
        case list() | tuple():
            return [decode_cell(item) for item in value]
        case dict():
            return {str(key): decode_cell(item) for key, item in value.items()}
        case _:
            # Intervals, ranges, network addresses and the like
            return str(value)
