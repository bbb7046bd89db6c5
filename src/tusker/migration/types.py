"""Wire shapes exchanged with a statement executor."""

from typing import NotRequired, Protocol, TypedDict

from tusker.types import Row


class QueryResult(TypedDict):
    """Rows returned by an ad-hoc statement."""

    rows: list[Row]


class StatementError(TypedDict):
    """Error relayed verbatim from the database server."""

    message: str
    code: NotRequired[str]
    detail: NotRequired[str]
    hint: NotRequired[str]


class StatementResult(TypedDict):
    """Outcome of one statement of a migration."""

    sql: str
    ok: bool
    duration_ms: float
    rows_affected: NotRequired[int]
    error: NotRequired[StatementError]


class MigrationRequest(TypedDict):
    """Ordered statements to run as one migration."""

    statements: list[str]
    dry_run: bool
    lock_timeout_ms: NotRequired[int]
    statement_timeout_ms: NotRequired[int]


class MigrationResult(TypedDict):
    """Outcome of a whole migration."""

    ok: bool
    dry_run: bool
    committed: bool
    duration_ms: float
    statements: list[StatementResult]
    lock_timeout_ms: int
    statement_timeout_ms: int


class StatementExecutor(Protocol):
    """Anything able to run SQL against a database."""

    def execute(self, sql: str) -> QueryResult:
        """Run a single statement."""
        ...

    def execute_migration(self, request: MigrationRequest) -> MigrationResult:
        """Run a batch of statements as one transaction."""
        ...
