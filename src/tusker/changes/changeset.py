"""Ordered log of staged row mutations."""

from collections.abc import Iterable, Iterator
from logging import getLogger
from typing import Literal, NamedTuple, TypeAlias
from uuid import uuid4

from tusker.sql.dml import (
    generate_delete_sql,
    generate_insert_sql,
    generate_update_sql,
)
from tusker.types import Column, Row

logger = getLogger(__name__)

ChangeKind: TypeAlias = Literal["update", "delete", "insert"]


class Change(NamedTuple):
    """A staged mutation with the SQL rendered for it."""

    id: str
    kind: ChangeKind
    schema: str
    table: str
    data: Row
    original_data: Row | None
    sql: str


def render_sql(
    kind: ChangeKind,
    schema: str,
    table: str,
    data: Row,
    original_data: Row | None,
    columns: Iterable[Column],
) -> str:
    """Render the statement for a change against the given pre-image."""
    match kind:
        case "insert":
            return generate_insert_sql(schema, table, data, columns)
        case "update":
            if original_data is None:
                msg = "An update needs the original row"
                raise ValueError(msg)
            return generate_update_sql(schema, table, data, original_data, columns)
        case "delete":
            pre_image = data if original_data is None else original_data
            return generate_delete_sql(schema, table, pre_image, columns)


class ChangeSet:
    """Insertion-ordered log of staged changes.

    The log is a multiset: staging the same cell twice keeps both changes, and
    since they are applied in log order the latest one wins.
    """

    def __init__(self) -> None:
        """Initialize an empty change log."""
        self._changes: list[Change] = []

    def add_change(  # noqa: PLR0913
        self,
        kind: ChangeKind,
        schema: str,
        table: str,
        data: Row,
        original_data: Row | None,
        columns: Iterable[Column],
    ) -> Change:
        """Render SQL for a change and append it to the log."""
        sql = render_sql(kind, schema, table, data, original_data, columns)
        change = Change(
            id=uuid4().hex,
            kind=kind,
            schema=schema,
            table=table,
            data=dict(data),
            original_data=None if original_data is None else dict(original_data),
            sql=sql,
        )
        self._changes.append(change)
        logger.debug("Staged %s on %s.%s: %s", kind, schema, table, sql)
        return change

    def remove_change(self, change_id: str) -> Change:
        """Remove a single change from the log."""
        for position, change in enumerate(self._changes):
            if change.id == change_id:
                logger.debug("Unstaged %s on %s.%s", change.kind, change.schema, change.table)
                return self._changes.pop(position)
        msg = f"No staged change with id {change_id}"
        raise KeyError(msg)

    def clear(self) -> None:
        """Drop every staged change."""
        self._changes.clear()

    def for_table(self, schema: str, table: str) -> list[Change]:
        """Return the changes staged against one table, in log order."""
        return [
            change
            for change in self._changes
            if change.schema == schema and change.table == table
        ]

    def statements(self) -> list[str]:
        """Return the SQL of every change in commit order."""
        return [change.sql for change in self._changes]

    def __len__(self) -> int:
        return len(self._changes)

    def __iter__(self) -> Iterator[Change]:
        return iter(tuple(self._changes))

    def __bool__(self) -> bool:
        return bool(self._changes)
