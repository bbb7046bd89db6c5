"""Identifier quoting and literal rendering.

Every value reaches the generated SQL through format_literal, so this is the
primary injection defense: single quotes inside literals and double quotes
inside identifiers are always doubled.
"""

import math

from tusker.codec.arrays import encode_array
from tusker.codec.kinds import ValueKind, classify
from tusker.codec.values import to_json
from tusker.types import CellValue, Column


def quote_identifier(name: str) -> str:
    """Quote an identifier, doubling embedded double quotes."""
    return '"' + name.replace('"', '""') + '"'


def qualified_table(schema: str, table: str) -> str:
    """Generate a schema-qualified table name with proper escaping."""
    return f"{quote_identifier(schema)}.{quote_identifier(table)}"


def quote_string(text: str) -> str:
    """Quote a string literal, doubling embedded single quotes."""
    return "'" + text.replace("'", "''") + "'"


def _format_number(value: float) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "'NaN'"
        return "'Infinity'" if value > 0 else "'-Infinity'"
    return repr(value)


def format_literal(value: CellValue, column: Column | None = None) -> str:
    """Render a value as a SQL literal."""
    match value:
        case None:
            return "NULL"
        case bool():
            return "TRUE" if value else "FALSE"
        case int() | float():
            return _format_number(value)
        case list() if column and classify(column["data_type"]) is ValueKind.ARRAY:
            return quote_string(encode_array(value))
        case dict() | list():
            return f"{quote_string(to_json(value))}::jsonb"
        case str():
            return quote_string(value)
        case _:
            msg = f"Cannot render {type(value).__name__} as a SQL literal"
            raise TypeError(msg)
