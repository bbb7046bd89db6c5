"""Statement executor backed by a SQLAlchemy engine."""

from collections.abc import Mapping
from logging import getLogger
from time import perf_counter
from typing import Any, Self

from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.exc import DBAPIError

from tusker.codec.values import decode_cell
from tusker.config import SETTINGS
from tusker.migration.commit import ExecutionError
from tusker.migration.types import (
    MigrationRequest,
    MigrationResult,
    QueryResult,
    StatementError,
    StatementResult,
)
from tusker.types import Row

logger = getLogger(__name__)

# SQL is sent verbatim, so the driver must not look for bind parameters
RAW_SQL = {"no_parameters": True}


def _elapsed_ms(start: float) -> float:
    return (perf_counter() - start) * 1000


def _decode_row(mapping: Mapping[str, Any]) -> Row:
    return {key: decode_cell(value) for key, value in mapping.items()}


def statement_error(error: DBAPIError) -> StatementError:
    """Extract the server's code, message, detail and hint from a driver error."""
    original = error.orig
    result = StatementError(message=str(original or error).strip())

    code = (
        getattr(original, "sqlstate", None)
        or getattr(original, "pgcode", None)
        or getattr(original, "sqlite_errorname", None)
    )
    if code:
        result["code"] = str(code)

    # psycopg exposes the structured server diagnostics
    if diagnostics := getattr(original, "diag", None):
        if message := getattr(diagnostics, "message_primary", None):
            result["message"] = message
        if detail := getattr(diagnostics, "message_detail", None):
            result["detail"] = detail
        if hint := getattr(diagnostics, "message_hint", None):
            result["hint"] = hint

    return result


class SqlAlchemyExecutor:
    """Run statements through a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        """Initialize executor with the engine to run statements on."""
        self.engine = engine

    @classmethod
    def from_url(cls, url: str) -> Self:
        """Create executor for a database URL, verifying pooled connections before use."""
        return cls(create_engine(url, pool_pre_ping=True))

    def execute(self, sql: str) -> QueryResult:
        """Run a single statement in its own transaction."""
        try:
            with self.engine.begin() as connection:
                result = connection.exec_driver_sql(sql, execution_options=RAW_SQL)
                rows = (
                    [_decode_row(row._mapping) for row in result]  # noqa: SLF001
                    if result.returns_rows
                    else []
                )
        except DBAPIError as e:
            raise ExecutionError(statement_error(e)) from e
        return QueryResult(rows=rows)

    def _run_statement(self, connection: Connection, sql: str) -> StatementResult:
        start = perf_counter()
        try:
            result = connection.exec_driver_sql(sql, execution_options=RAW_SQL)
        except DBAPIError as e:
            logger.error("Statement failed: %s", sql)  # noqa: TRY400
            return StatementResult(
                sql=sql,
                ok=False,
                duration_ms=_elapsed_ms(start),
                error=statement_error(e),
            )

        outcome = StatementResult(sql=sql, ok=True, duration_ms=_elapsed_ms(start))
        if not result.returns_rows and result.rowcount >= 0:
            outcome["rows_affected"] = result.rowcount
        return outcome

    def _set_timeouts(
        self,
        connection: Connection,
        lock_timeout_ms: int,
        statement_timeout_ms: int,
    ) -> None:
        # Only PostgreSQL knows transaction scoped timeouts
        if connection.dialect.name != "postgresql":
            return
        connection.exec_driver_sql(
            f"SET LOCAL lock_timeout = '{int(lock_timeout_ms)}ms'",
            execution_options=RAW_SQL,
        )
        connection.exec_driver_sql(
            f"SET LOCAL statement_timeout = '{int(statement_timeout_ms)}ms'",
            execution_options=RAW_SQL,
        )

    def execute_migration(self, request: MigrationRequest) -> MigrationResult:
        """Run all statements in one transaction, stopping at the first failure.

        The transaction is rolled back when a statement fails or the request is
        a dry run, and committed otherwise.
        """
        defaults = SETTINGS["migration"]
        lock_timeout_ms = request.get("lock_timeout_ms", defaults["lock_timeout_ms"])
        statement_timeout_ms = request.get(
            "statement_timeout_ms",
            defaults["statement_timeout_ms"],
        )
        dry_run = request["dry_run"]

        start = perf_counter()
        results: list[StatementResult] = []
        with self.engine.connect() as connection, connection.begin() as transaction:
            self._set_timeouts(connection, lock_timeout_ms, statement_timeout_ms)
            for sql in request["statements"]:
                results.append(self._run_statement(connection, sql))
                if not results[-1]["ok"]:
                    break

            ok = all(result["ok"] for result in results)
            committed = ok and not dry_run
            if committed:
                transaction.commit()
            else:
                transaction.rollback()

        return MigrationResult(
            ok=ok,
            dry_run=dry_run,
            committed=committed,
            duration_ms=_elapsed_ms(start),
            statements=results,
            lock_timeout_ms=lock_timeout_ms,
            statement_timeout_ms=statement_timeout_ms,
        )
