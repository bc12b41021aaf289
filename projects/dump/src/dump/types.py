"""Type definitions for schema dump processing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple


class ColumnDefinition(NamedTuple):
    """A column of a parsed table definition."""

    name: str
    type: str
    charset: str | None = None
    collation: str | None = None


@dataclass
class TableDefinition:
    """Structure of one ``CREATE TABLE`` statement after rewriting."""

    name: str
    columns: list[ColumnDefinition] = field(default_factory=list)
    foreign_keys: tuple[str, ...] = ()


class Statement(NamedTuple):
    """An output statement, tagged with the table it defines if any."""

    text: str
    table: str | None = None


class OrderedStatements(NamedTuple):
    """Result of dependency ordering."""

    statements: list[Statement]
    # (table, dependency) edges emitted in the wrong order inside a cycle
    unresolved: list[tuple[str, str]]


@dataclass
class SchemaContext:
    """Table definitions and dependency edges collected during one run.

    A context is created per run and discarded afterwards, so runs over
    different files never see each other's tables.
    """

    tables: dict[str, TableDefinition] = field(default_factory=dict)
    dependencies: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def register(self, definition: TableDefinition) -> bool:
        """Register a table definition, replacing any earlier one.

        Returns:
            True if a definition with the same name was already registered

        """
        replaced = definition.name in self.tables
        self.tables[definition.name] = definition
        self.dependencies[definition.name] = definition.foreign_keys
        return replaced
