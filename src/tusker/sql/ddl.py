"""CREATE TABLE generation and ALTER TABLE diffing.

The diff matches columns by their stable id, so a renamed column is detected as
the same column with a new name instead of a drop followed by an add.
Statements are emitted in an order that is valid when replayed one by one:

1. table rename, so later statements address the table by its final name
2. dropped columns
3. per kept column: rename, type, nullability, default, primary key,
   unique, foreign key
4. added columns
"""

from collections.abc import Sequence

from tusker.sql.literals import qualified_table, quote_identifier
from tusker.types import AlterColumnDef, ColumnDefinition, References


def references_clause(references: References) -> str:
    """Render a REFERENCES clause with non-default referential actions."""
    clause = (
        f"REFERENCES {qualified_table(references['schema'], references['table'])}"
        f"({quote_identifier(references['column'])})"
    )
    on_delete = references.get("on_delete", "NO ACTION")
    on_update = references.get("on_update", "NO ACTION")
    if on_delete != "NO ACTION":
        clause += f" ON DELETE {on_delete}"
    if on_update != "NO ACTION":
        clause += f" ON UPDATE {on_update}"
    return clause


def active_references(column: ColumnDefinition) -> References | None:
    """Return the column's foreign key target when it is fully specified."""
    references = column.get("references")
    if references and references["schema"] and references["table"] and references["column"]:
        return references
    return None


def generate_create_table_sql(
    schema: str,
    table_name: str,
    columns: Sequence[ColumnDefinition],
) -> str:
    """Generate CREATE TABLE statement from column definitions."""
    if not table_name.strip():
        msg = "Table name is required"
        raise ValueError(msg)
    if not columns:
        msg = "At least one column is required"
        raise ValueError(msg)

    primary_key_columns = [column for column in columns if column["primary_key"]]
    composite_key = len(primary_key_columns) > 1

    definitions: list[str] = []
    for column in columns:
        if not column["name"].strip():
            msg = "Column name is required"
            raise ValueError(msg)
        if not column["data_type"].strip():
            msg = f'Data type is required for column "{column["name"]}"'
            raise ValueError(msg)

        parts = [quote_identifier(column["name"]), column["data_type"]]
        if column["primary_key"] and not composite_key:
            parts.append("PRIMARY KEY")
        # Primary keys are implicitly NOT NULL and unique
        if not column["nullable"] and not column["primary_key"]:
            parts.append("NOT NULL")
        if column["unique"] and not column["primary_key"]:
            parts.append("UNIQUE")
        if column["default"].strip():
            parts.append(f"DEFAULT {column['default']}")
        if references := active_references(column):
            parts.append(references_clause(references))

        definitions.append(" ".join(parts))

    if composite_key:
        key_columns = ", ".join(quote_identifier(c["name"]) for c in primary_key_columns)
        definitions.append(f"PRIMARY KEY ({key_columns})")

    body = ",\n  ".join(definitions)
    return f"CREATE TABLE {qualified_table(schema, table_name)} (\n  {body}\n)"


def _foreign_key_changed(original: References, edited: References) -> bool:
    return any(
        original.get(key, "NO ACTION") != edited.get(key, "NO ACTION")
        for key in ("schema", "table", "column", "on_delete", "on_update")
    )


def _alter_column(
    table: str,
    table_name: str,
    original: AlterColumnDef,
    edited: AlterColumnDef,
) -> list[str]:
    """Statements turning one existing column into its edited state."""
    statements: list[str] = []

    if edited["name"] != original["name"]:
        statements.append(
            f"ALTER TABLE {table} RENAME COLUMN "
            f"{quote_identifier(original['name'])} TO {quote_identifier(edited['name'])}",
        )

    # Every later statement addresses the column by its new name
    column = quote_identifier(edited["name"])
    alter = f"ALTER TABLE {table} ALTER COLUMN {column}"

    if edited["data_type"] != original["data_type"]:
        data_type = edited["data_type"]
        statements.append(f"{alter} TYPE {data_type} USING {column}::{data_type}")

    if edited["nullable"] != original["nullable"]:
        statements.append(f"{alter} {'DROP' if edited['nullable'] else 'SET'} NOT NULL")

    if edited["default"] != original["default"]:
        if edited["default"].strip():
            statements.append(f"{alter} SET DEFAULT {edited['default']}")
        else:
            statements.append(f"{alter} DROP DEFAULT")

    # Constraint names are derived from the names at creation time
    if edited["primary_key"] != original["primary_key"]:
        if edited["primary_key"]:
            statements.append(f"ALTER TABLE {table} ADD PRIMARY KEY ({column})")
        else:
            constraint = quote_identifier(f"{table_name}_pkey")
            statements.append(f"ALTER TABLE {table} DROP CONSTRAINT {constraint}")

    if edited["unique"] != original["unique"]:
        if edited["unique"]:
            statements.append(f"ALTER TABLE {table} ADD UNIQUE ({column})")
        else:
            constraint = quote_identifier(f"{table_name}_{original['name']}_key")
            statements.append(f"ALTER TABLE {table} DROP CONSTRAINT {constraint}")

    original_fk = active_references(original)
    edited_fk = active_references(edited)
    drop_fk = original_fk is not None and (
        edited_fk is None or _foreign_key_changed(original_fk, edited_fk)
    )
    add_fk = edited_fk is not None and (
        original_fk is None or _foreign_key_changed(original_fk, edited_fk)
    )
    if drop_fk:
        name = original.get("constraint_name") or f"{table_name}_{original['name']}_fkey"
        statements.append(f"ALTER TABLE {table} DROP CONSTRAINT {quote_identifier(name)}")
    if add_fk and edited_fk is not None:
        statements.append(
            f"ALTER TABLE {table} ADD FOREIGN KEY ({column}) "
            f"{references_clause(edited_fk)}",
        )

    return statements


def _add_column(table: str, column: AlterColumnDef) -> str:
    parts = [f"ADD COLUMN {quote_identifier(column['name'])} {column['data_type']}"]
    if column["primary_key"]:
        parts.append("PRIMARY KEY")
    else:
        if not column["nullable"]:
            parts.append("NOT NULL")
        if column["unique"]:
            parts.append("UNIQUE")
    if column["default"].strip():
        parts.append(f"DEFAULT {column['default']}")
    if references := active_references(column):
        parts.append(references_clause(references))
    return f"ALTER TABLE {table} {' '.join(parts)}"


def generate_alter_table_sql(
    schema: str,
    table_name: str,
    original_columns: Sequence[AlterColumnDef],
    edited_columns: Sequence[AlterColumnDef],
    new_table_name: str | None = None,
) -> list[str]:
    """Generate ALTER TABLE statements by diffing original and edited columns."""
    statements: list[str] = []

    if new_table_name and new_table_name != table_name:
        statements.append(
            f"ALTER TABLE {qualified_table(schema, table_name)} "
            f"RENAME TO {quote_identifier(new_table_name)}",
        )
    table = qualified_table(schema, new_table_name or table_name)

    original_by_id = {column["id"]: column for column in original_columns}
    edited_ids = {column["id"] for column in edited_columns}

    statements.extend(
        f"ALTER TABLE {table} DROP COLUMN {quote_identifier(column['name'])}"
        for column in original_columns
        if column["id"] not in edited_ids
    )

    for edited in edited_columns:
        if original := original_by_id.get(edited["id"]):
            statements.extend(_alter_column(table, table_name, original, edited))

    statements.extend(
        _add_column(table, column)
        for column in edited_columns
        if column["id"] not in original_by_id and column["name"].strip()
    )

    return statements
