"""Column metadata read from the PostgreSQL catalog."""

from collections.abc import Iterable, Mapping
from typing import Any

from tusker.codec.arrays import decode_array
from tusker.migration.types import StatementExecutor
from tusker.sql.literals import quote_string
from tusker.types import Column, ForeignKeyInfo


def columns_query(schema: str, table: str) -> str:
    """Catalog query returning one row per column of a table, in table order."""
    return f"""
        SELECT
            a.attname AS name,
            format_type(a.atttypid, a.atttypmod) AS data_type,
            NOT a.attnotnull AS nullable,
            COALESCE(ix.is_primary_key, false) AS is_primary_key,
            COALESCE(ix.is_unique, false) AS is_unique,
            pg_get_expr(d.adbin, d.adrelid) AS default_value,
            fk.constraint_name,
            fk.referenced_schema,
            fk.referenced_table,
            fk.referenced_column,
            (
                SELECT array_agg(e.enumlabel::text ORDER BY e.enumsortorder)
                FROM pg_enum e
                WHERE e.enumtypid = a.atttypid
            ) AS enum_values
        FROM pg_attribute a
        JOIN pg_class c ON c.oid = a.attrelid
        JOIN pg_namespace n ON n.oid = c.relnamespace
        LEFT JOIN pg_attrdef d ON d.adrelid = a.attrelid AND d.adnum = a.attnum
        LEFT JOIN LATERAL (
            SELECT
                bool_or(i.indisprimary) AS is_primary_key,
                bool_or(i.indisunique AND NOT i.indisprimary) AS is_unique
            FROM pg_index i
            WHERE i.indrelid = a.attrelid AND a.attnum = ANY(i.indkey)
        ) ix ON true
        LEFT JOIN LATERAL (
            SELECT
                con.conname::text AS constraint_name,
                rn.nspname::text AS referenced_schema,
                rc.relname::text AS referenced_table,
                ra.attname::text AS referenced_column
            FROM pg_constraint con
            JOIN pg_class rc ON rc.oid = con.confrelid
            JOIN pg_namespace rn ON rn.oid = rc.relnamespace
            JOIN pg_attribute ra
                ON ra.attrelid = con.confrelid
                AND ra.attnum = con.confkey[array_position(con.conkey, a.attnum)]
            WHERE con.conrelid = a.attrelid
              AND con.contype = 'f'
              AND a.attnum = ANY(con.conkey)
            ORDER BY con.conname
            LIMIT 1
        ) fk ON true
        WHERE n.nspname = {quote_string(schema)}
          AND c.relname = {quote_string(table)}
          AND a.attnum > 0
          AND NOT a.attisdropped
        ORDER BY a.attnum
    """  # noqa: S608


def _foreign_key(row: Mapping[str, Any]) -> ForeignKeyInfo | None:
    if not row.get("constraint_name"):
        return None
    return ForeignKeyInfo(
        constraint_name=row["constraint_name"],
        referenced_schema=row["referenced_schema"],
        referenced_table=row["referenced_table"],
        referenced_column=row["referenced_column"],
    )


def columns_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[Column]:
    """Convert catalog rows into column metadata."""
    columns: list[Column] = []
    for row in rows:
        enum_values = row.get("enum_values")
        columns.append(
            Column(
                name=row["name"],
                data_type=row["data_type"],
                nullable=bool(row["nullable"]),
                primary_key=bool(row["is_primary_key"]),
                unique=bool(row.get("is_unique")),
                foreign_key=_foreign_key(row),
                # Some drivers return arrays in their text form
                enum_values=None if enum_values is None else decode_array(enum_values),
                default=row.get("default_value"),
            ),
        )
    return columns


def fetch_columns(executor: StatementExecutor, schema: str, table: str) -> list[Column]:
    """Fetch column metadata of a table through an executor."""
    return columns_from_rows(executor.execute(columns_query(schema, table))["rows"])
