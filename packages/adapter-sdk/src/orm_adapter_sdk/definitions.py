from __future__ import annotations

import dataclasses
from typing import Any, Dict, List, Optional

from .models import ForeignKeyDefinition
from .naming import foreign_key_column_for, pluralize


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()


@dataclasses.dataclass
class ColumnDefinition:
    """
    A column requested by a migration, before it is rendered to SQL.

    Attributes:
        name: Column name.
        type: Semantic type (e.g. "string") or a raw SQL type.
        limit: Length limit for string/binary types.
        precision: Decimal precision.
        scale: Decimal scale.
        null: Whether the column accepts NULL.
        default: Default value, or NO_DEFAULT when none was given.
        comment: Column description.
        primary_key: Whether the column is part of the primary key.
    """
    name: str
    type: str
    limit: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    null: bool = True
    default: Any = NO_DEFAULT
    comment: Optional[str] = None
    primary_key: bool = False

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclasses.dataclass
class AddColumnDefinition:
    column: ColumnDefinition
    if_not_exists: bool = False


@dataclasses.dataclass
class AlterTable:
    """A batch of changes against one table."""
    name: str
    adds: List[AddColumnDefinition] = dataclasses.field(default_factory=list)
    foreign_key_adds: List[ForeignKeyDefinition] = dataclasses.field(default_factory=list)
    foreign_key_drops: List[str] = dataclasses.field(default_factory=list)


def _column_shortcut(type_name: str):
    def shortcut(self, *names: str, **options: Any) -> None:
        for name in names:
            self.column(name, type_name, **options)

    shortcut.__name__ = type_name
    shortcut.__doc__ = f"Adds one or more ``{type_name}`` columns."
    return shortcut


class TableDefinition:
    """Builder yielded by ``create_table``; collects columns and foreign keys."""

    def __init__(
        self,
        name: str,
        *,
        id: bool = False,
        if_not_exists: bool = False,
        comment: Optional[str] = None,
    ):
        self.name = name
        self.if_not_exists = if_not_exists
        self.comment = comment
        self.columns: Dict[str, ColumnDefinition] = {}
        self.foreign_keys: List[ForeignKeyDefinition] = []
        if id:
            self.column("id", "bigint", null=False, primary_key=True)

    def new_column_definition(self, name: str, type: str, **options: Any) -> ColumnDefinition:
        return ColumnDefinition(name=str(name), type=str(type), **options)

    def column(self, name: str, type: str, **options: Any) -> ColumnDefinition:
        name = str(name)
        if name in self.columns:
            raise ValueError(f"you can't define an already defined column '{name}'.")
        definition = self.new_column_definition(name, type, **options)
        self.columns[name] = definition
        return definition

    def remove_column(self, name: str) -> None:
        self.columns.pop(str(name), None)

    string = _column_shortcut("string")
    text = _column_shortcut("text")
    integer = _column_shortcut("integer")
    bigint = _column_shortcut("bigint")
    float = _column_shortcut("float")
    decimal = _column_shortcut("decimal")
    datetime = _column_shortcut("datetime")
    timestamp = _column_shortcut("timestamp")
    time = _column_shortcut("time")
    date = _column_shortcut("date")
    binary = _column_shortcut("binary")
    boolean = _column_shortcut("boolean")
    json = _column_shortcut("json")

    def references(
        self,
        name: str,
        *,
        type: str = "bigint",
        foreign_key: bool = False,
        to_table: Optional[str] = None,
        **options: Any,
    ) -> None:
        """Adds a ``<name>_id`` column, optionally with a foreign key to ``to_table``."""
        column = f"{name}_id"
        self.column(column, type, **options)
        if foreign_key:
            self.foreign_key(to_table or pluralize(name), column=column)

    def foreign_key(self, to_table: str, **options: Any) -> ForeignKeyDefinition:
        options.setdefault("column", foreign_key_column_for(to_table))
        definition = ForeignKeyDefinition(from_table=self.name, to_table=to_table, **options)
        self.foreign_keys.append(definition)
        return definition

    def primary_keys(self) -> Optional[List[str]]:
        keys = [c.name for c in self.columns.values() if c.primary_key]
        return keys or None
