"""Sequential commit of staged statements and migration requests."""

from collections.abc import Sequence
from logging import getLogger

from tusker.config import SETTINGS
from tusker.migration.types import (
    MigrationRequest,
    MigrationResult,
    QueryResult,
    StatementError,
    StatementExecutor,
    StatementResult,
)

logger = getLogger(__name__)


class ExecutionError(Exception):
    """Raised by executors when the server rejects a statement."""

    def __init__(self, error: StatementError) -> None:
        """Wrap the error reported by the server."""
        super().__init__(error["message"])
        self.error = error


class CommitError(Exception):
    """A statement of a commit failed; later statements were not run."""

    def __init__(self, index: int, sql: str, error: StatementError) -> None:
        """Record the position and SQL of the failing statement."""
        super().__init__(f"Statement {index + 1} failed: {error['message']}")
        self.index = index
        self.sql = sql
        self.error = error


def commit_statements(
    executor: StatementExecutor,
    statements: Sequence[str],
) -> list[QueryResult]:
    """Execute statements one by one, stopping at the first failure.

    Statements that ran before the failure are not rolled back here. Atomicity
    is up to the executor.
    """
    results: list[QueryResult] = []
    for index, sql in enumerate(statements):
        try:
            results.append(executor.execute(sql))
        except ExecutionError as e:
            logger.error(  # noqa: TRY400
                "Statement %s of %s failed: %s",
                index + 1,
                len(statements),
                sql,
            )
            raise CommitError(index, sql, e.error) from e
    logger.info("Committed %s statements", len(statements))
    return results


def run_migration(
    executor: StatementExecutor,
    statements: Sequence[str],
    *,
    dry_run: bool,
    lock_timeout_ms: int | None = None,
    statement_timeout_ms: int | None = None,
) -> MigrationResult:
    """Hand a batch of statements to the executor as one migration."""
    if not statements:
        msg = "A migration needs at least one statement"
        raise ValueError(msg)

    defaults = SETTINGS["migration"]
    request = MigrationRequest(
        statements=list(statements),
        dry_run=dry_run,
        lock_timeout_ms=(
            defaults["lock_timeout_ms"] if lock_timeout_ms is None else lock_timeout_ms
        ),
        statement_timeout_ms=(
            defaults["statement_timeout_ms"]
            if statement_timeout_ms is None
            else statement_timeout_ms
        ),
    )
    result = executor.execute_migration(request)

    if failure := first_failure(result):
        logger.error("Migration failed at %s: %s", failure["sql"], failure.get("error"))
    logger.info(
        "Migration of %s statements finished in %.1f ms (dry run: %s, committed: %s)",
        len(statements),
        result["duration_ms"],
        result["dry_run"],
        result["committed"],
    )
    return result


def first_failure(result: MigrationResult) -> StatementResult | None:
    """Return the first failed statement of a migration, if any."""
    return next(
        (statement for statement in result["statements"] if not statement["ok"]),
        None,
    )
