"""Value codec: cell values to editable text and back."""

from tusker.codec.arrays import decode_array, encode_array
from tusker.codec.kinds import KindRegistry, ValueKind, classify
from tusker.codec.temporal import (
    format_date,
    format_time,
    format_timestamp,
    normalize_temporal,
    parse_date,
    parse_time,
    parse_timestamp,
)
from tusker.codec.values import (
    CellPreview,
    cell_preview,
    decode_cell,
    format_value,
    is_large_value,
    parse_value,
    values_equal,
)

__all__ = [
    "CellPreview",
    "KindRegistry",
    "ValueKind",
    "cell_preview",
    "classify",
    "decode_array",
    "decode_cell",
    "encode_array",
    "format_date",
    "format_time",
    "format_timestamp",
    "format_value",
    "is_large_value",
    "normalize_temporal",
    "parse_date",
    "parse_time",
    "parse_timestamp",
    "parse_value",
    "values_equal",
]
