"""Merge staged changes and transient edits on top of fetched rows."""

from collections.abc import Iterable, Mapping, Sequence
from typing import NamedTuple, TypeAlias

from tusker.changes.changeset import Change
from tusker.types import CellValue, Row

# Uncommitted cell edits keyed by (row index, column name)
CellEdits: TypeAlias = Mapping[tuple[int, str], CellValue]


class MergedView(NamedTuple):
    """Rows as they should be displayed before commit."""

    rows: list[Row]
    edited_cells: frozenset[tuple[int, str]]
    deleted_rows: frozenset[int]


def same_value(a: CellValue, b: CellValue) -> bool:
    """Strict equality that does not conflate booleans with 0 and 1."""
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    return a == b


def row_matches(row: Row, original_data: Row) -> bool:
    """Check that every column of a pre-image holds the same value in the row."""
    return all(
        name in row and same_value(row[name], value)
        for name, value in original_data.items()
    )


def find_row(
    rows: Sequence[Row],
    original_data: Row,
    skip: Iterable[int] = (),
) -> int | None:
    """Return the index of the first row matching a pre-image."""
    skipped = frozenset(skip)
    for index, row in enumerate(rows):
        if index not in skipped and row_matches(row, original_data):
            return index
    return None


def reconcile(
    rows: Iterable[Row],
    changes: Iterable[Change],
    edits: CellEdits | None = None,
) -> MergedView:
    """Overlay staged updates, then transient edits, and flag staged deletes.

    Changes are applied in log order. Each change is matched against the rows
    as already overlaid by earlier changes, so a change staged on top of an
    earlier one finds its row. Inserts are not part of the fetched rows and
    are left out of the view.
    """
    merged = [dict(row) for row in rows]
    edited: set[tuple[int, str]] = set()
    deleted: set[int] = set()

    for change in changes:
        if change.kind == "insert" or change.original_data is None:
            continue
        index = find_row(merged, change.original_data, skip=deleted)
        if index is None:
            continue
        match change.kind:
            case "update":
                merged[index].update(change.data)
                edited.update((index, name) for name in change.data)
            case "delete":
                deleted.add(index)

    for (index, name), value in (edits or {}).items():
        if 0 <= index < len(merged):
            merged[index][name] = value
            edited.add((index, name))

    return MergedView(merged, frozenset(edited), frozenset(deleted))
