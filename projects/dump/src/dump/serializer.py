"""Render structural table definitions as output-dialect text."""

from __future__ import annotations

from sqlparse import tokens as T

from .dialects import Dialect
from .structure import (
    ColumnSpec,
    CreateTable,
    Element,
    Part,
    TableConstraint,
    Token,
    render_parts,
)

INDENT = "  "

# MySQL column types without a same-named PostgreSQL type
POSTGRES_TYPES = {
    "TINYINT": "SMALLINT",
    "MEDIUMINT": "INTEGER",
    "INT": "INTEGER",
    "YEAR": "SMALLINT",
    "FLOAT": "REAL",
    "DOUBLE": "DOUBLE PRECISION",
    "DATETIME": "TIMESTAMP",
    "NVARCHAR": "VARCHAR",
    "TINYTEXT": "TEXT",
    "MEDIUMTEXT": "TEXT",
    "LONGTEXT": "TEXT",
    "ENUM": "TEXT",
    "SET": "TEXT",
    "BINARY": "BYTEA",
    "VARBINARY": "BYTEA",
    "TINYBLOB": "BYTEA",
    "BLOB": "BYTEA",
    "MEDIUMBLOB": "BYTEA",
    "LONGBLOB": "BYTEA",
}

# PostgreSQL types that take no length or display width
POSTGRES_BARE_TYPES = frozenset(
    {"SMALLINT", "INTEGER", "BIGINT", "REAL", "DOUBLE PRECISION", "TEXT", "BYTEA"},
)

# Column attributes with no PostgreSQL counterpart
POSTGRES_DROPPED_ATTRIBUTES = frozenset({"UNSIGNED", "SIGNED", "ZEROFILL"})

# Values MySQL accepts after ON UPDATE in a column definition
ON_UPDATE_CLOCKS = frozenset({"CURRENT_TIMESTAMP", "NOW", "LOCALTIMESTAMP"})

# Table elements PostgreSQL declares with CREATE INDEX instead
POSTGRES_DROPPED_ELEMENTS = frozenset({"KEY", "INDEX", "FULLTEXT", "SPATIAL"})

IDENTITY = "GENERATED BY DEFAULT AS IDENTITY"


def skip_group(parts: list[Part], index: int) -> int:
    """Return the index past a parenthesized group starting at ``index``."""
    if index >= len(parts) or not (isinstance(parts[index], Token) and parts[index].value == "("):
        return index
    depth = 0
    while index < len(parts):
        part = parts[index]
        if isinstance(part, Token) and part.value == "(":
            depth += 1
        elif isinstance(part, Token) and part.value == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return index


def postgres_column_options(options: list[Part]) -> list[Part]:
    """Translate MySQL column attributes to PostgreSQL."""
    translated: list[Part] = []
    index = 0

    while index < len(options):
        part = options[index]
        word = part.word
        following = options[index + 1].word if index + 1 < len(options) else ""

        if word in POSTGRES_DROPPED_ATTRIBUTES:
            index += 1
        elif word == "AUTO_INCREMENT":
            translated.append(Token(T.Keyword, IDENTITY, part.spaced))
            index += 1
        elif word == "COMMENT":
            index += 2
        elif (
            word == "ON"
            and following == "UPDATE"
            and index + 2 < len(options)
            and options[index + 2].word in ON_UPDATE_CLOCKS
        ):
            index = skip_group(options, index + 3)
        else:
            translated.append(part)
            index += 1

    return translated


def postgres_constraint(constraint: TableConstraint) -> TableConstraint | None:
    """Translate a table-level element to PostgreSQL, or drop it."""
    if constraint.kind in POSTGRES_DROPPED_ELEMENTS:
        return None

    parts: list[Part] = []
    index = 0
    while index < len(constraint.parts):
        part = constraint.parts[index]
        following = constraint.parts[index + 1] if index + 1 < len(constraint.parts) else None

        if part.word == "USING" and following is not None and following.word in {"BTREE", "HASH"}:
            index += 2
            continue

        parts.append(part)
        index += 1

        # UNIQUE KEY name (...) becomes UNIQUE (...)
        if part.word == "UNIQUE" and following is not None and following.word in {"KEY", "INDEX"}:
            index += 1
        if part.word == "UNIQUE" and index < len(constraint.parts):
            candidate = constraint.parts[index]
            if not (isinstance(candidate, Token) and candidate.value == "("):
                index += 1

    return TableConstraint(parts)


def render_type(column: ColumnSpec, dialect: Dialect) -> str:
    """Render a column's data type with its arguments."""
    data_type = column.data_type
    type_args = column.type_args
    if not dialect.column_charsets:
        data_type = POSTGRES_TYPES.get(data_type, data_type)
        if data_type in POSTGRES_BARE_TYPES:
            type_args = []

    if type_args:
        return f"{data_type}({render_parts(type_args, dialect)})"
    return data_type


def render_column(column: ColumnSpec, dialect: Dialect) -> str:
    """Render a column definition on one line."""
    pieces = [column.name.render(dialect), render_type(column, dialect)]
    options = column.options

    if dialect.column_charsets:
        if column.charset:
            pieces.append(f"CHARACTER SET {column.charset}")
        if column.collation:
            pieces.append(f"COLLATE {column.collation}")
    else:
        options = postgres_column_options(options)

    if options:
        pieces.append(render_parts(options, dialect))
    return " ".join(pieces)


def render_element(element: Element, dialect: Dialect) -> str | None:
    """Render a body element, or None if the dialect has no place for it."""
    if isinstance(element, ColumnSpec):
        return render_column(element, dialect)
    if not dialect.column_charsets:
        translated = postgres_constraint(element)
        return render_parts(translated.parts, dialect) if translated else None
    return render_parts(element.parts, dialect)


def serialize(table: CreateTable, dialect: Dialect) -> str:
    """Render a table definition, one body element per line.

    The result carries no statement terminator.
    """
    head = render_parts([*table.head, table.name], dialect)

    if table.elements is None:
        if not table.options:
            return head
        return f"{head} {render_parts(table.options, dialect)}"

    lines = [
        f"{INDENT}{rendered}"
        for element in table.elements
        if (rendered := render_element(element, dialect)) is not None
    ]
    text = f"{head} (\n" + ",\n".join(lines) + "\n)"

    # Table options are MySQL storage settings
    if table.options and dialect.column_charsets:
        text = f"{text} {render_parts(table.options, dialect)}"
    return text
