"""Change staging and SQL synthesis for editing PostgreSQL tables."""

from tusker.changes import (
    Change,
    ChangeSet,
    CommitRecord,
    MergedView,
    build_commit_record,
    reconcile,
    summarize,
)
from tusker.codec import format_value, parse_value, values_equal
from tusker.config import SETTINGS, load_settings
from tusker.metadata import fetch_columns
from tusker.migration import (
    CommitError,
    SqlAlchemyExecutor,
    StatementExecutor,
    commit_statements,
    run_migration,
)
from tusker.session import TableSession
from tusker.sql import (
    generate_alter_table_sql,
    generate_create_index_sql,
    generate_create_table_sql,
    validate_sql,
)
from tusker.types import (
    AlterColumnDef,
    CellValue,
    Column,
    ColumnDefinition,
    IndexDef,
    Row,
)

__all__ = [
    "SETTINGS",
    "AlterColumnDef",
    "CellValue",
    "Change",
    "ChangeSet",
    "Column",
    "ColumnDefinition",
    "CommitError",
    "CommitRecord",
    "IndexDef",
    "MergedView",
    "Row",
    "SqlAlchemyExecutor",
    "StatementExecutor",
    "TableSession",
    "build_commit_record",
    "commit_statements",
    "fetch_columns",
    "format_value",
    "generate_alter_table_sql",
    "generate_create_index_sql",
    "generate_create_table_sql",
    "load_settings",
    "parse_value",
    "reconcile",
    "run_migration",
    "summarize",
    "validate_sql",
]
