"""TypedDict schemas for table metadata, column definitions and indexes."""

from __future__ import annotations

from typing import Any, Literal, NotRequired, TypeAlias, TypedDict

# JSON documents stored in json/jsonb columns
JsonValue: TypeAlias = dict[str, Any] | list[Any]

# Fully decoded logical value of a single cell
CellValue: TypeAlias = None | bool | int | float | str | list[str] | JsonValue

Row: TypeAlias = dict[str, CellValue]

ForeignKeyAction: TypeAlias = Literal[
    "NO ACTION",
    "RESTRICT",
    "CASCADE",
    "SET NULL",
    "SET DEFAULT",
]


class ForeignKeyInfo(TypedDict):
    """Foreign key constraint attached to an existing column."""

    constraint_name: str
    referenced_schema: str
    referenced_table: str
    referenced_column: str


class Column(TypedDict):
    """Metadata of a column as it currently exists in the database."""

    name: str
    data_type: str
    nullable: bool
    primary_key: bool
    unique: NotRequired[bool]
    foreign_key: NotRequired[ForeignKeyInfo | None]
    enum_values: NotRequired[list[str] | None]
    default: NotRequired[str | None]


class References(TypedDict):
    """Target of a foreign key in a column definition."""

    schema: str
    table: str
    column: str
    on_delete: NotRequired[ForeignKeyAction]
    on_update: NotRequired[ForeignKeyAction]


class ColumnDefinition(TypedDict):
    """Desired state of a column for CREATE TABLE."""

    name: str
    data_type: str
    nullable: bool
    primary_key: bool
    unique: bool
    default: str
    references: NotRequired[References | None]


class AlterColumnDef(ColumnDefinition):
    """Column definition with a stable id for diffing in ALTER TABLE generation."""

    id: str
    # Name of the existing foreign key constraint, used when dropping it
    constraint_name: NotRequired[str]


IndexMethod: TypeAlias = Literal["btree", "hash", "gin", "gist", "spgist", "brin"]


class IndexColumnDef(TypedDict):
    """One key of an index, either a column or an expression."""

    mode: NotRequired[Literal["column", "expression"]]
    column: NotRequired[str]
    expression: NotRequired[str]
    sort_direction: NotRequired[Literal["ASC", "DESC"]]
    nulls_order: NotRequired[Literal["DEFAULT", "NULLS FIRST", "NULLS LAST"]]


class IndexDef(TypedDict):
    """Index to be created on a table."""

    name: str
    method: IndexMethod
    unique: bool
    concurrently: bool
    columns: list[IndexColumnDef]
    where: NotRequired[str]


class TableData(TypedDict):
    """Columns and rows of a table as returned by a loader."""

    columns: list[Column]
    rows: list[Row]
