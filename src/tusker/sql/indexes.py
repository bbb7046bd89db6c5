"""CREATE INDEX and DROP INDEX generation."""

import re
from collections.abc import Iterable

from tusker.sql.literals import qualified_table, quote_identifier
from tusker.types import IndexColumnDef, IndexDef

EXPRESSION_NAME_LENGTH = 20


def _is_expression(column: IndexColumnDef) -> bool:
    return column.get("mode") == "expression" and bool(column.get("expression", "").strip())


def parenthesize(expression: str) -> str:
    """Wrap an expression in parentheses unless one pair already encloses it all."""
    expression = expression.strip()
    if expression.startswith("(") and expression.endswith(")"):
        depth = 0
        for position, char in enumerate(expression):
            depth += {"(": 1, ")": -1}.get(char, 0)
            if depth == 0:
                # The opening parenthesis closes at the very end
                if position == len(expression) - 1:
                    return expression
                break
    return f"({expression})"


def _index_key(column: IndexColumnDef, *, ordered: bool) -> str:
    parts: list[str] = []
    if _is_expression(column):
        parts.append(parenthesize(column["expression"]))
    elif column.get("column"):
        parts.append(quote_identifier(column["column"]))

    # Sort direction and nulls order only apply to btree indexes
    if parts and ordered:
        if column.get("sort_direction") == "DESC":
            parts.append("DESC")
        if (nulls_order := column.get("nulls_order", "DEFAULT")) != "DEFAULT":
            parts.append(nulls_order)
    return " ".join(parts)


def generate_create_index_sql(schema: str, table_name: str, index: IndexDef) -> str:
    """Generate CREATE INDEX statement from an index definition."""
    parts = ["CREATE"]
    if index["unique"]:
        parts.append("UNIQUE")
    parts.append("INDEX")
    if index["concurrently"]:
        parts.append("CONCURRENTLY")
    parts.extend(
        (quote_identifier(index["name"]), "ON", qualified_table(schema, table_name)),
    )

    ordered = index["method"] == "btree"
    if not ordered:
        parts.append(f"USING {index['method']}")

    keys = [
        key
        for column in index["columns"]
        if (key := _index_key(column, ordered=ordered))
    ]
    if not keys:
        msg = f'Index "{index["name"]}" has no columns'
        raise ValueError(msg)
    parts.append(f"({', '.join(keys)})")

    if where := index.get("where", "").strip():
        parts.append(f"WHERE {where}")

    return " ".join(parts)


def generate_drop_index_sql(
    schema: str,
    index_name: str,
    *,
    concurrently: bool = False,
) -> str:
    """Generate DROP INDEX statement."""
    parts = ["DROP INDEX"]
    if concurrently:
        parts.append("CONCURRENTLY")
    parts.append(qualified_table(schema, index_name))
    return " ".join(parts)


def generate_index_name(table_name: str, columns: Iterable[IndexColumnDef]) -> str:
    """Derive an index name following the idx_<table>_<columns> convention."""
    table = table_name.strip() or "table"
    names: list[str] = []
    for column in columns:
        if _is_expression(column):
            name = re.sub(r"[^a-zA-Z0-9_]", "", column["expression"].strip())
            name = name[:EXPRESSION_NAME_LENGTH].lower()
        else:
            name = column.get("column", "").lower()
        if name:
            names.append(name)

    if not names:
        return f"idx_{table}"
    return f"idx_{table}_{'_'.join(names)}"
