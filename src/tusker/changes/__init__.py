"""Staged change log, reconciliation and commit history."""

from tusker.changes.changeset import Change, ChangeKind, ChangeSet, render_sql
from tusker.changes.history import (
    CommitChange,
    CommitRecord,
    build_commit_record,
    commit_id,
    summarize,
)
from tusker.changes.reconcile import (
    CellEdits,
    MergedView,
    find_row,
    reconcile,
    row_matches,
)

__all__ = [
    "CellEdits",
    "Change",
    "ChangeKind",
    "ChangeSet",
    "CommitChange",
    "CommitRecord",
    "MergedView",
    "build_commit_record",
    "commit_id",
    "find_row",
    "reconcile",
    "render_sql",
    "row_matches",
    "summarize",
]
