"""SQL synthesis from table metadata and staged edits."""

from tusker.sql.ddl import (
    generate_alter_table_sql,
    generate_create_table_sql,
    references_clause,
)
from tusker.sql.dml import (
    build_where_clause,
    generate_delete_sql,
    generate_insert_sql,
    generate_update_sql,
)
from tusker.sql.guard import SqlValidation, validate_sql
from tusker.sql.indexes import (
    generate_create_index_sql,
    generate_drop_index_sql,
    generate_index_name,
)
from tusker.sql.literals import (
    format_literal,
    qualified_table,
    quote_identifier,
    quote_string,
)

__all__ = [
    "SqlValidation",
    "build_where_clause",
    "format_literal",
    "generate_alter_table_sql",
    "generate_create_index_sql",
    "generate_create_table_sql",
    "generate_delete_sql",
    "generate_drop_index_sql",
    "generate_index_name",
    "generate_insert_sql",
    "generate_update_sql",
    "qualified_table",
    "quote_identifier",
    "quote_string",
    "references_clause",
    "validate_sql",
]
