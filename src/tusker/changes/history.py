"""Commit summaries and in-memory commit records."""

import hashlib
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import NamedTuple, TypedDict

from tusker.changes.changeset import Change
from tusker.codec.values import to_json

ROOT_PARENT = "root"


class CommitChange(TypedDict):
    """Serialisable form of a committed change."""

    kind: str
    schema: str
    table: str
    data: str
    original_data: str | None
    sql: str
    sort_order: int


class CommitRecord(NamedTuple):
    """A successfully applied batch of changes."""

    id: str
    parent_id: str | None
    message: str
    summary: str
    created_at: str
    changes: list[CommitChange]

    @property
    def change_count(self) -> int:
        """Number of changes in the commit."""
        return len(self.changes)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def summarize(changes: Iterable[Change]) -> str:
    """Describe a batch of changes, e.g. "1 insert, 2 updates on public.users"."""
    counts: Counter[str] = Counter()
    tables: dict[str, None] = {}
    for change in changes:
        counts[change.kind] += 1
        tables[f"{change.schema}.{change.table}"] = None

    parts = [
        _plural(counts[kind], kind)
        for kind in ("insert", "update", "delete")
        if counts[kind]
    ]
    if not parts:
        return ""
    return f"{', '.join(parts)} on {', '.join(tables)}"


def commit_id(parent_id: str | None, timestamp: str, statements: Iterable[str]) -> str:
    """Hash the parent, the commit time and the applied SQL into a commit id."""
    digest = hashlib.sha256()
    digest.update((parent_id or ROOT_PARENT).encode())
    digest.update(timestamp.encode())
    for sql in statements:
        digest.update(sql.encode())
    return digest.hexdigest()


def serialize_change(change: Change, sort_order: int) -> CommitChange:
    """Convert a change to its stored form with JSON-encoded rows."""
    return CommitChange(
        kind=change.kind,
        schema=change.schema,
        table=change.table,
        data=to_json(change.data),
        original_data=(
            None if change.original_data is None else to_json(change.original_data)
        ),
        sql=change.sql,
        sort_order=sort_order,
    )


def build_commit_record(
    changes: Sequence[Change],
    message: str | None = None,
    parent_id: str | None = None,
    created_at: datetime | None = None,
) -> CommitRecord:
    """Build the record of a commit; a blank message falls back to the summary."""
    summary = summarize(changes)
    timestamp = (created_at or datetime.now(UTC)).isoformat()
    return CommitRecord(
        id=commit_id(parent_id, timestamp, (change.sql for change in changes)),
        parent_id=parent_id,
        message=(message or "").strip() or summary,
        summary=summary,
        created_at=timestamp,
        changes=[
            serialize_change(change, sort_order)
            for sort_order, change in enumerate(changes)
        ],
    )
