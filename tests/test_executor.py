"""Tests for the SQLAlchemy backed executor against in-memory SQLite."""

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine

from tusker.migration.commit import ExecutionError
from tusker.migration.executor import SqlAlchemyExecutor
from tusker.migration.types import MigrationRequest
from tusker.session import TableSession
from tusker.types import Column


@pytest.fixture(name="executor")
def create_executor() -> Iterator[SqlAlchemyExecutor]:
    """Executor on an in-memory database with a small users table."""
    engine = create_engine("sqlite://")
    executor = SqlAlchemyExecutor(engine)
    executor.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)")
    executor.execute("INSERT INTO users (id, name) VALUES (1, 'Ann')")
    yield executor
    engine.dispose()


def names(executor: SqlAlchemyExecutor) -> list[str]:
    """Return user names ordered by id."""
    rows = executor.execute("SELECT name FROM users ORDER BY id")["rows"]
    return [row["name"] for row in rows]


def test_execute_returns_rows(executor: SqlAlchemyExecutor) -> None:
    """Test that query rows come back as dictionaries."""
    result = executor.execute("SELECT id, name FROM users")

    assert result == {"rows": [{"id": 1, "name": "Ann"}]}


def test_execute_passes_sql_verbatim(executor: SqlAlchemyExecutor) -> None:
    """Test that percent signs and colons are not treated as parameters."""
    executor.execute("INSERT INTO users (id, name) VALUES (2, '100% :done')")

    assert names(executor) == ["Ann", "100% :done"]


def test_execute_error(executor: SqlAlchemyExecutor) -> None:
    """Test that driver errors are relayed as execution errors."""
    with pytest.raises(ExecutionError) as excinfo:
        executor.execute("SELECT * FROM missing")

    assert "no such table" in excinfo.value.error["message"]
    assert excinfo.value.error.get("code") == "SQLITE_ERROR"


def test_migration_commits(executor: SqlAlchemyExecutor) -> None:
    """Test a successful migration reports per statement results and commits."""
    result = executor.execute_migration(
        MigrationRequest(
            statements=[
                "INSERT INTO users (id, name) VALUES (2, 'Bob')",
                "UPDATE users SET name = 'Annie' WHERE id = 1",
            ],
            dry_run=False,
        ),
    )

    assert result["ok"]
    assert result["committed"]
    assert [statement["rows_affected"] for statement in result["statements"]] == [1, 1]
    assert result["lock_timeout_ms"] == 5000
    assert result["statement_timeout_ms"] == 30000
    assert names(executor) == ["Annie", "Bob"]


def test_migration_dry_run_rolls_back(executor: SqlAlchemyExecutor) -> None:
    """Test that a dry run executes everything but keeps no changes."""
    result = executor.execute_migration(
        MigrationRequest(
            statements=["UPDATE users SET name = 'Changed'"],
            dry_run=True,
            lock_timeout_ms=100,
        ),
    )

    assert result["ok"]
    assert result["dry_run"]
    assert not result["committed"]
    assert result["lock_timeout_ms"] == 100
    assert names(executor) == ["Ann"]


def test_migration_stops_at_failure(executor: SqlAlchemyExecutor) -> None:
    """Test that a failing statement stops the batch and rolls back."""
    result = executor.execute_migration(
        MigrationRequest(
            statements=[
                "INSERT INTO users (id, name) VALUES (2, 'Bob')",
                "INSERT INTO users (id, name) VALUES (1, 'Duplicate')",
                "INSERT INTO users (id, name) VALUES (3, 'Never')",
            ],
            dry_run=False,
        ),
    )

    assert not result["ok"]
    assert not result["committed"]
    assert [statement["ok"] for statement in result["statements"]] == [True, False]
    error = result["statements"][1].get("error")
    assert error is not None
    assert "UNIQUE" in error["message"]
    assert names(executor) == ["Ann"]


def test_binary_rows_are_decoded(executor: SqlAlchemyExecutor) -> None:
    """Test that binary values come back as hex text that can identify their row."""
    executor.execute("CREATE TABLE blobs (payload BLOB, name TEXT)")
    executor.execute("INSERT INTO blobs (payload, name) VALUES (x'00ff', 'a')")

    rows = executor.execute("SELECT payload, name FROM blobs")["rows"]

    assert rows == [{"payload": "\\x00ff", "name": "a"}]
    columns = [
        Column(name="payload", data_type="bytea", nullable=True, primary_key=False),
        Column(name="name", data_type="text", nullable=True, primary_key=False),
    ]
    change = TableSession("public", "blobs", columns, rows).delete_row(0)
    assert change.sql == (
        'DELETE FROM "public"."blobs" WHERE "payload" = \'\\x00ff\' AND "name" = \'a\''
    )
