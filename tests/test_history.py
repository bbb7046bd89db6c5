"""Tests for commit summaries and records."""

import hashlib
import json
from datetime import UTC, datetime

import pytest

from tusker.changes.changeset import ChangeSet
from tusker.changes.history import build_commit_record, commit_id, summarize
from tusker.types import Column


@pytest.fixture(name="changes")
def create_changes() -> ChangeSet:
    """One insert and two updates on public.users."""
    columns = [
        Column(name="id", data_type="integer", nullable=False, primary_key=True),
        Column(name="name", data_type="text", nullable=True, primary_key=False),
    ]
    changes = ChangeSet()
    changes.add_change("insert", "public", "users", {"name": "Ann"}, None, columns)
    for row_id, old, new in ((1, "A", "B"), (2, "C", "D")):
        original = {"id": row_id, "name": old}
        changes.add_change("update", "public", "users", {"name": new}, original, columns)
    return changes


def test_summarize(changes: ChangeSet) -> None:
    """Test the human readable summary of a batch."""
    assert summarize(changes) == "1 insert, 2 updates on public.users"


def test_summarize_several_tables() -> None:
    """Test that every touched table is listed once."""
    columns = [Column(name="id", data_type="integer", nullable=False, primary_key=True)]
    changes = ChangeSet()
    changes.add_change("delete", "a", "x", {"id": 1}, {"id": 1}, columns)
    changes.add_change("delete", "b", "y", {"id": 1}, {"id": 1}, columns)
    changes.add_change("delete", "a", "x", {"id": 2}, {"id": 2}, columns)

    assert summarize(changes) == "3 deletes on a.x, b.y"


def test_commit_id_hashes_parent_time_and_sql() -> None:
    """Test that the id covers the parent, timestamp and statements."""
    timestamp = "2026-01-01T00:00:00+00:00"
    expected = hashlib.sha256(b"root" + timestamp.encode() + b"SELECT 1")

    assert commit_id(None, timestamp, ["SELECT 1"]) == expected.hexdigest()
    assert commit_id("abc", "t", ["x"]) != commit_id(None, "t", ["x"])


def test_build_commit_record(changes: ChangeSet) -> None:
    """Test the record built for a successful commit."""
    created_at = datetime(2026, 1, 1, tzinfo=UTC)

    record = build_commit_record(list(changes), parent_id="p1", created_at=created_at)

    assert record.parent_id == "p1"
    assert record.message == record.summary == "1 insert, 2 updates on public.users"
    assert record.created_at == "2026-01-01T00:00:00+00:00"
    assert record.change_count == 3
    assert record.id == commit_id("p1", record.created_at, changes.statements())
    assert [change["sort_order"] for change in record.changes] == [0, 1, 2]
    assert record.changes[0]["original_data"] is None
    assert json.loads(record.changes[1]["original_data"] or "") == {"id": 1, "name": "A"}


def test_explicit_message(changes: ChangeSet) -> None:
    """Test that a non-blank message overrides the summary."""
    assert build_commit_record(list(changes), "  Fix names ").message == "Fix names"
    assert build_commit_record(list(changes), "   ").message.startswith("1 insert")


def test_summarize_nothing() -> None:
    """Test that an empty batch has an empty summary."""
    assert summarize([]) == ""
