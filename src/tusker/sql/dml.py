"""INSERT, UPDATE and DELETE statement generation."""

from collections.abc import Iterable

from tusker.codec.values import values_equal
from tusker.sql.literals import format_literal, qualified_table, quote_identifier
from tusker.types import CellValue, Column, Row


def column_lookup(columns: Iterable[Column]) -> dict[str, Column]:
    """Index columns by name."""
    return {column["name"]: column for column in columns}


def primary_keys(columns: Iterable[Column]) -> list[Column]:
    """Return primary key columns in table order."""
    return [column for column in columns if column["primary_key"]]


def _predicate(name: str, value: CellValue, column: Column | None) -> str:
    if value is None:
        return f"{quote_identifier(name)} IS NULL"
    return f"{quote_identifier(name)} = {format_literal(value, column)}"


def build_where_clause(row: Row, columns: Iterable[Column]) -> str:
    """Build WHERE predicates identifying a row, preferring primary keys."""
    columns = list(columns)
    if pk_columns := primary_keys(columns):
        if missing := [column["name"] for column in pk_columns if column["name"] not in row]:
            msg = f"Row is missing primary key columns: {', '.join(missing)}"
            raise ValueError(msg)
        return " AND ".join(
            _predicate(column["name"], row[column["name"]], column) for column in pk_columns
        )

    if not row:
        msg = "Cannot identify a row without primary keys or values"
        raise ValueError(msg)

    # Fall back to every known column of the row
    lookup = column_lookup(columns)
    return " AND ".join(
        _predicate(name, value, lookup.get(name)) for name, value in row.items()
    )


def generate_insert_sql(
    schema: str,
    table: str,
    data: Row,
    columns: Iterable[Column],
) -> str:
    """Generate INSERT statement for all given column values."""
    target = qualified_table(schema, table)
    if not data:
        return f"INSERT INTO {target} DEFAULT VALUES"

    lookup = column_lookup(columns)
    names = ", ".join(quote_identifier(name) for name in data)
    values = ", ".join(
        format_literal(value, lookup.get(name)) for name, value in data.items()
    )
    return f"INSERT INTO {target} ({names}) VALUES ({values})"


def generate_update_sql(
    schema: str,
    table: str,
    data: Row,
    original_data: Row,
    columns: Iterable[Column],
) -> str:
    """Generate UPDATE statement setting only the columns that changed."""
    columns = list(columns)
    lookup = column_lookup(columns)
    assignments = [
        f"{quote_identifier(name)} = {format_literal(value, lookup.get(name))}"
        for name, value in data.items()
        if name not in original_data or not values_equal(value, original_data[name])
    ]
    if not assignments:
        msg = f"No changed columns to update in {schema}.{table}"
        raise ValueError(msg)

    where = build_where_clause(original_data, columns)
    return (
        f"UPDATE {qualified_table(schema, table)} "  # noqa: S608
        f"SET {', '.join(assignments)} WHERE {where}"
    )


def generate_delete_sql(
    schema: str,
    table: str,
    data: Row,
    columns: Iterable[Column],
) -> str:
    """Generate DELETE statement scoped to the given row."""
    where = build_where_clause(data, columns)
    return f"DELETE FROM {qualified_table(schema, table)} WHERE {where}"  # noqa: S608
