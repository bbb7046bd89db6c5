"""Editing session over a single table."""

from collections.abc import Callable, Sequence
from logging import getLogger
from typing import Literal, TypeAlias

from tusker.changes.changeset import Change, ChangeSet
from tusker.changes.history import CommitRecord, build_commit_record
from tusker.changes.reconcile import MergedView, reconcile
from tusker.codec.kinds import ValueKind, classify
from tusker.codec.temporal import normalize_temporal
from tusker.codec.values import format_value, parse_value, values_equal
from tusker.migration.commit import commit_statements, run_migration
from tusker.migration.types import MigrationResult, StatementExecutor
from tusker.sql.dml import column_lookup, primary_keys
from tusker.types import CellValue, Column, Row, TableData

logger = getLogger(__name__)

RowIdentity: TypeAlias = Literal["primary_key", "full_row"]

TEMPORAL_KINDS = frozenset((ValueKind.DATE, ValueKind.TIME, ValueKind.TIMESTAMP))


class TableSession:
    """Staged changes and uncommitted cell edits for one table view.

    Cell edits are kept per (row index, column) until the row is staged, which
    turns them into an update change. The merged view shows fetched rows with
    staged updates and pending edits applied, and marks rows staged for delete.
    """

    def __init__(  # noqa: PLR0913
        self,
        schema: str,
        table: str,
        columns: Sequence[Column],
        rows: Sequence[Row],
        loader: Callable[[], TableData] | None = None,
        changes: ChangeSet | None = None,
    ) -> None:
        """Initialize session with the fetched table state."""
        self.schema = schema
        self.table = table
        self.loader = loader
        self.changes = ChangeSet() if changes is None else changes
        self.edits: dict[tuple[int, str], CellValue] = {}
        self._load(TableData(columns=list(columns), rows=list(rows)))

    def _load(self, data: TableData) -> None:
        if self.edits and (data["rows"] != self.rows or data["columns"] != self.columns):
            # Edits are keyed by row index and would land on other rows
            logger.warning(
                "Dropping %s uncommitted edits, %s.%s changed on refresh",
                len(self.edits),
                self.schema,
                self.table,
            )
            self.edits.clear()
        self.columns = data["columns"]
        self.rows = data["rows"]
        self._lookup = column_lookup(self.columns)
        if self.row_identity == "full_row":
            logger.warning(
                "%s.%s has no primary key, rows are matched on all their values",
                self.schema,
                self.table,
            )

    @property
    def row_identity(self) -> RowIdentity:
        """How staged changes identify their row."""
        return "primary_key" if primary_keys(self.columns) else "full_row"

    def _staged(self) -> MergedView:
        return reconcile(self.rows, self.changes.for_table(self.schema, self.table))

    def view(self) -> MergedView:
        """Return the rows as they would look after commit."""
        return reconcile(
            self.rows,
            self.changes.for_table(self.schema, self.table),
            self.edits,
        )

    def _check_row(self, row_index: int, staged: MergedView) -> None:
        if not 0 <= row_index < len(self.rows):
            msg = f"Row {row_index} is out of range"
            raise IndexError(msg)
        if row_index in staged.deleted_rows:
            msg = f"Row {row_index} is pending delete"
            raise ValueError(msg)

    def _column(self, name: str) -> Column:
        if (column := self._lookup.get(name)) is None:
            msg = f"Unknown column {name} in {self.schema}.{self.table}"
            raise ValueError(msg)
        return column

    def _unchanged(self, column: Column, value: CellValue, current: CellValue) -> bool:
        data_type = column["data_type"]
        if classify(data_type) in TEMPORAL_KINDS and value is not None and current is not None:
            # "2024-01-01 10:00:00" and "2024-01-01T10:00:00" are the same timestamp
            value = normalize_temporal(format_value(value), data_type) or value
            current = normalize_temporal(format_value(current), data_type) or current
        return values_equal(value, current)

    def edit_cell(self, row_index: int, column: str, value: CellValue) -> None:
        """Record an uncommitted edit; editing back to the staged value drops it."""
        staged = self._staged()
        self._check_row(row_index, staged)
        definition = self._column(column)

        if self._unchanged(definition, value, staged.rows[row_index].get(column)):
            self.edits.pop((row_index, column), None)
        else:
            self.edits[row_index, column] = value

    def edit_text(self, row_index: int, column: str, text: str) -> None:
        """Parse editor text for the column's type and record it as an edit."""
        data_type = self._column(column)["data_type"]
        value = parse_value(text, data_type)
        if isinstance(value, str) and classify(data_type) in TEMPORAL_KINDS:
            # Unrecognised input is left to the server to reject
            value = normalize_temporal(value, data_type) or value
        self.edit_cell(row_index, column, value)

    def _row_edits(self, row_index: int) -> Row:
        edited = [
            (column, value)
            for (index, column), value in self.edits.items()
            if index == row_index
        ]
        return dict(sorted(edited, key=lambda item: self._position(item[0])))

    def _drop_edits(self, row_index: int) -> None:
        for key in [key for key in self.edits if key[0] == row_index]:
            del self.edits[key]

    def _position(self, column: str) -> int:
        return next(
            (i for i, c in enumerate(self.columns) if c["name"] == column),
            len(self.columns),
        )

    def stage_row(self, row_index: int) -> Change | None:
        """Turn the pending edits of a row into an update change."""
        staged = self._staged()
        self._check_row(row_index, staged)
        if not (data := self._row_edits(row_index)):
            return None

        original = staged.rows[row_index]
        change = self.changes.add_change(
            "update",
            self.schema,
            self.table,
            data,
            original,
            self.columns,
        )
        self._drop_edits(row_index)
        return change

    def delete_row(self, row_index: int) -> Change:
        """Stage a delete of a row, dropping its uncommitted edits."""
        staged = self._staged()
        self._check_row(row_index, staged)
        original = staged.rows[row_index]
        change = self.changes.add_change(
            "delete",
            self.schema,
            self.table,
            original,
            original,
            self.columns,
        )
        self._drop_edits(row_index)
        return change

    def insert_row(self, data: Row) -> Change:
        """Stage an insert of a new row."""
        for column in data:
            self._column(column)
        return self.changes.add_change(
            "insert",
            self.schema,
            self.table,
            data,
            None,
            self.columns,
        )

    def refresh(self, data: TableData | None = None) -> None:
        """Replace the fetched columns and rows, from the loader by default."""
        if data is None:
            if self.loader is None:
                msg = "No loader to refresh the table from"
                raise ValueError(msg)
            data = self.loader()
        self._load(data)

    def discard(self) -> None:
        """Drop all staged changes and uncommitted edits."""
        self.changes.clear()
        self.edits.clear()

    def commit(
        self,
        executor: StatementExecutor,
        message: str | None = None,
        parent_id: str | None = None,
    ) -> CommitRecord:
        """Execute staged changes in order, then clear them and refetch.

        On failure the raised CommitError names the failing statement and the
        staged changes are kept for a retry.
        """
        changes = list(self.changes)
        if not changes:
            msg = "There are no staged changes to commit"
            raise ValueError(msg)

        commit_statements(executor, [change.sql for change in changes])
        record = build_commit_record(changes, message, parent_id)
        logger.info("Commit %s: %s", record.id[:12], record.message)

        self.discard()
        if self.loader is not None:
            self.refresh()
        return record

    def migrate(
        self,
        executor: StatementExecutor,
        statements: Sequence[str],
        *,
        dry_run: bool,
        lock_timeout_ms: int | None = None,
        statement_timeout_ms: int | None = None,
    ) -> MigrationResult:
        """Run schema statements as one migration, refetching if it committed."""
        result = run_migration(
            executor,
            statements,
            dry_run=dry_run,
            lock_timeout_ms=lock_timeout_ms,
            statement_timeout_ms=statement_timeout_ms,
        )
        if result["committed"] and self.loader is not None:
            self.refresh()
        return result
