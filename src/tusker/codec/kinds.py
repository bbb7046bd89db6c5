"""Kind registry for Postgres data types.

This module maps a column's declared data type to the logical kind of value the
codec produces for it. All rules are defined once in a priority-based registry
and applied consistently by parsing, formatting and literal rendering.
"""

import re
from collections.abc import Callable
from enum import StrEnum, auto
from functools import cache
from typing import TypeAlias

Matcher: TypeAlias = Callable[[str], bool]


class ValueKind(StrEnum):
    """Logical kinds of cell values."""

    INTEGER = auto()
    FLOAT = auto()
    BOOLEAN = auto()
    DATE = auto()
    TIME = auto()
    TIMESTAMP = auto()
    JSON = auto()
    ARRAY = auto()
    TEXT = auto()


def base_type(data_type: str) -> str:
    """Normalize a type name: lowercase, collapse spaces, drop modifiers like (10,2)."""
    normalized = re.sub(r"\s+", " ", data_type.strip().lower())
    return re.sub(r"\s*\([^)]*\)", "", normalized)


class KindRegistry:
    """Priority-based registry of data type to value kind rules."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        # Kept sorted by priority, highest first
        self._rules: list[tuple[int, Matcher, ValueKind]] = []

    def exact(self, *names: str, kind: ValueKind, priority: int = 100) -> None:
        """Register rule for exact type names."""
        choices = frozenset(names)
        self.register(lambda type_name: type_name in choices, kind, priority)

    def prefix(self, prefix: str, kind: ValueKind, priority: int = 50) -> None:
        """Register rule for type names starting with prefix."""
        self.register(lambda type_name: type_name.startswith(prefix), kind, priority)

    def suffix(self, suffix: str, kind: ValueKind, priority: int = 50) -> None:
        """Register rule for type names ending with suffix."""
        self.register(lambda type_name: type_name.endswith(suffix), kind, priority)

    def register(self, matcher: Matcher, kind: ValueKind, priority: int = 25) -> None:
        """Register rule with custom matcher function."""
        self._rules.append((priority, matcher, kind))
        self._rules.sort(key=lambda rule: rule[0], reverse=True)

    def kind(self, data_type: str) -> ValueKind:
        """Get value kind for a data type - first match by priority wins."""
        type_name = base_type(data_type)
        for _priority, matcher, kind in self._rules:
            if matcher(type_name):
                return kind
        return ValueKind.TEXT


def create_default_registry() -> KindRegistry:
    """Create a kind registry covering the built-in Postgres types."""
    registry = KindRegistry()

    # Arrays win over their element type: integer[], _int4, ARRAY
    registry.suffix("[]", ValueKind.ARRAY, priority=200)
    registry.prefix("_", ValueKind.ARRAY, priority=200)
    registry.exact("array", kind=ValueKind.ARRAY, priority=200)

    registry.exact("boolean", "bool", kind=ValueKind.BOOLEAN)
    registry.exact(
        "smallint",
        "integer",
        "bigint",
        "int",
        "int2",
        "int4",
        "int8",
        "smallserial",
        "serial",
        "bigserial",
        "serial2",
        "serial4",
        "serial8",
        kind=ValueKind.INTEGER,
    )
    registry.exact(
        "real",
        "float4",
        "float8",
        "double precision",
        "float",
        "numeric",
        "decimal",
        kind=ValueKind.FLOAT,
    )
    registry.exact("date", kind=ValueKind.DATE)
    registry.exact(
        "time",
        "timetz",
        "time without time zone",
        "time with time zone",
        kind=ValueKind.TIME,
    )
    registry.prefix("timestamp", ValueKind.TIMESTAMP)
    registry.exact("json", "jsonb", kind=ValueKind.JSON)

    return registry


DEFAULT_REGISTRY = create_default_registry()


@cache
def classify(data_type: str) -> ValueKind:
    """Classify a data type using the default registry."""
    return DEFAULT_REGISTRY.kind(data_type)
