"""Postgres array literal encoding and decoding.

Handles the one-dimensional text form used by Postgres for array values:
    {a,b,"c,d","with \\"quote\\""}
"""

import json
from collections.abc import Iterable
from typing import Any

NULL_TOKEN = "NULL"
# Characters that force an element to be double quoted
SPECIAL_CHARACTERS = frozenset(',"\\{}')


def _element_text(item: Any) -> str:  # noqa: ANN401
    """Convert an already decoded element to its text form."""
    if item is None:
        return ""
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, dict | list):
        return json.dumps(item, separators=(",", ":"), ensure_ascii=False)
    return str(item)


def _token(chars: list[str], *, quoted: bool) -> str:
    """Finish one element; unquoted elements are trimmed and NULL maps to empty."""
    text = "".join(chars)
    if quoted:
        return text
    text = text.strip()
    return "" if text.upper() == NULL_TOKEN else text


def _split_elements(body: str) -> list[str]:
    """Split the inside of an array literal on commas outside quotes."""
    items: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False
    quoted = False

    for char in body:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
            quoted = True
        elif char == "," and not in_quotes:
            items.append(_token(current, quoted=quoted))
            current = []
            quoted = False
        else:
            current.append(char)

    items.append(_token(current, quoted=quoted))
    return items


def decode_array(value: str | Iterable[Any] | None) -> list[str]:
    """Decode a Postgres array literal, a JSON array or a decoded list into strings."""
    if value is None:
        return []
    if not isinstance(value, str):
        return [_element_text(item) for item in value]

    text = value.strip()
    if text.startswith("["):
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = None
        if isinstance(decoded, list):
            return [_element_text(item) for item in decoded]

    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1]
    if not text.strip():
        return []
    return _split_elements(text)


def _needs_quotes(item: str) -> bool:
    """Check whether an element must be double quoted in an array literal."""
    return (
        not item
        or item.upper() == NULL_TOKEN
        or any(char in SPECIAL_CHARACTERS or char.isspace() for char in item)
    )


def encode_array(items: Iterable[object]) -> str:
    """Encode items as a Postgres array literal, numbers and booleans as their text."""
    elements: list[str] = []
    for value in items:
        if value is None:
            elements.append(NULL_TOKEN)
            continue
        item = _element_text(value)
        if _needs_quotes(item):
            escaped = item.replace("\\", "\\\\").replace('"', '\\"')
            elements.append(f'"{escaped}"')
        else:
            elements.append(item)
    return "{" + ",".join(elements) + "}"
