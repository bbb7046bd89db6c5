"""Boundary to the external statement executor."""

from tusker.migration.commit import (
    CommitError,
    ExecutionError,
    commit_statements,
    first_failure,
    run_migration,
)
from tusker.migration.executor import SqlAlchemyExecutor, statement_error
from tusker.migration.types import (
    MigrationRequest,
    MigrationResult,
    QueryResult,
    StatementError,
    StatementExecutor,
    StatementResult,
)

__all__ = [
    "CommitError",
    "ExecutionError",
    "MigrationRequest",
    "MigrationResult",
    "QueryResult",
    "SqlAlchemyExecutor",
    "StatementError",
    "StatementExecutor",
    "StatementResult",
    "commit_statements",
    "first_failure",
    "run_migration",
    "statement_error",
]
