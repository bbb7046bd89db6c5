"""Tests for merging staged changes into fetched rows."""

import pytest

from tusker.changes.changeset import ChangeSet
from tusker.changes.reconcile import find_row, reconcile, row_matches
from tusker.types import Column, Row


@pytest.fixture(name="columns")
def create_columns() -> list[Column]:
    """Columns of a table keyed by id."""
    return [
        Column(name="id", data_type="integer", nullable=False, primary_key=True),
        Column(name="name", data_type="text", nullable=True, primary_key=False),
        Column(name="active", data_type="boolean", nullable=True, primary_key=False),
    ]


@pytest.fixture(name="rows")
def create_rows() -> list[Row]:
    """Freshly fetched rows."""
    return [
        {"id": 1, "name": "Ann", "active": True},
        {"id": 2, "name": "Bob", "active": False},
        {"id": 3, "name": "Cy", "active": None},
    ]


def test_row_matching_is_strict_on_booleans() -> None:
    """Test that True does not match 1 when comparing pre-images."""
    assert row_matches({"a": True, "b": 1}, {"a": True})
    assert not row_matches({"a": 1}, {"a": True})
    assert not row_matches({"a": 1}, {"missing": 1})


def test_find_row_returns_first_match() -> None:
    """Test that duplicates resolve to the first matching row."""
    rows = [{"v": "x"}, {"v": "x"}]

    assert find_row(rows, {"v": "x"}) == 0
    assert find_row(rows, {"v": "x"}, skip=[0]) == 1
    assert find_row(rows, {"v": "y"}) is None


def test_delete_keeps_row_visible(rows: list[Row], columns: list[Column]) -> None:
    """Test that a staged delete marks the row without removing it."""
    changes = ChangeSet()
    change = changes.add_change("delete", "s", "t", rows[1], rows[1], columns)

    view = reconcile(rows, changes)

    assert change.sql == 'DELETE FROM "s"."t" WHERE "id" = 2'
    assert view.deleted_rows == frozenset({1})
    assert view.rows == rows


def test_updates_then_edits(rows: list[Row], columns: list[Column]) -> None:
    """Test that staged updates apply first and transient edits on top."""
    changes = ChangeSet()
    changes.add_change("update", "s", "t", {"name": "Annie"}, rows[0], columns)

    view = reconcile(rows, changes, {(0, "active"): False, (2, "name"): "Cyrus"})

    assert view.rows[0] == {"id": 1, "name": "Annie", "active": False}
    assert view.rows[2]["name"] == "Cyrus"
    assert view.edited_cells == frozenset({(0, "name"), (0, "active"), (2, "name")})
    assert rows[0]["name"] == "Ann"


def test_latest_change_wins(rows: list[Row], columns: list[Column]) -> None:
    """Test that a change staged on top of an earlier one overrides it."""
    changes = ChangeSet()
    first = changes.add_change("update", "s", "t", {"name": "B1"}, rows[1], columns)
    changes.add_change(
        "update",
        "s",
        "t",
        {"name": "B2"},
        rows[1] | first.data,
        columns,
    )

    view = reconcile(rows, changes)

    assert view.rows[1]["name"] == "B2"


def test_unmatched_changes_and_inserts_are_ignored(
    rows: list[Row],
    columns: list[Column],
) -> None:
    """Test that inserts and changes for vanished rows leave the view alone."""
    changes = ChangeSet()
    changes.add_change("insert", "s", "t", {"id": 9}, None, columns)
    changes.add_change(
        "update",
        "s",
        "t",
        {"name": "Ghost"},
        {"id": 99, "name": "Old"},
        columns,
    )

    view = reconcile(rows, changes, {(10, "name"): "out of range"})

    assert view.rows == rows
    assert not view.edited_cells
    assert not view.deleted_rows
