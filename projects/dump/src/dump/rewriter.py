"""Rewrite table definitions: prefix stripping, type migration, encodings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlparse import tokens as T

from .dependencies import extract_dependencies
from .dialects import MYSQL, Dialect, collation_for
from .errors import StatementParseError
from .parser import parse_statement
from .serializer import serialize
from .splitter import excerpt
from .structure import CreateTable, Part, Token, render_parts
from .types import ColumnDefinition, Statement, TableDefinition

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .types import SchemaContext

logger = logging.getLogger(__name__)

# Statements worth handing to the parser
DEFINITION_PATTERN = re.compile(r"^\s*CREATE\s+(?:TEMPORARY\s+)?TABLE\b", re.IGNORECASE)

# Deprecated types and their bounded replacements
DEPRECATED_TYPES = {"TINYTEXT": ("VARCHAR", "255")}

# Column types annotated with the target character set
TEXT_TYPES = frozenset({"VARCHAR", "NVARCHAR", "TEXT", "MEDIUMTEXT", "LONGTEXT"})


@dataclass(frozen=True)
class RewriteOptions:
    """Settings applied to every table definition of a run."""

    charset: str = "utf8mb4"
    strip_prefix: str | None = None
    dialect: Dialect = MYSQL


def strip_prefix(name: str, prefix: str | None) -> str:
    """Remove one leading occurrence of ``prefix`` from a table name.

    A name that is nothing but the prefix is left alone.
    """
    if prefix and name.startswith(prefix) and len(name) > len(prefix):
        return name[len(prefix) :]
    return name


def rewrite_table_charset(options: list[Part], charset: str, collation: str) -> list[Part]:
    """Point table-level default charset and collation options at the target."""
    rewritten: list[Part] = []
    seen_charset = seen_collation = False
    expecting: str | None = None

    for index, part in enumerate(options):
        previous = options[index - 1].word if index else ""

        if expecting and isinstance(part, Token) and part.value != "=":
            rewritten.append(Token(T.Name, expecting, part.spaced))
            expecting = None
            continue

        rewritten.append(part)
        if part.word == "CHARSET" or (part.word == "SET" and previous == "CHARACTER"):
            expecting, seen_charset = charset, True
        elif part.word == "COLLATE":
            expecting, seen_collation = collation, True

    if seen_charset and not seen_collation:
        rewritten.extend(
            [
                Token(T.Keyword, "COLLATE"),
                Token(T.Operator.Comparison, "=", spaced=False),
                Token(T.Name, collation, spaced=False),
            ],
        )
    return rewritten


def rewrite_table(table: CreateTable, options: RewriteOptions) -> CreateTable:
    """Apply prefix stripping, type migration and encoding annotation.

    The input definition is left untouched.

    Args:
        table: Parsed table definition
        options: Rewrite settings

    Returns:
        The rewritten definition

    """
    rewritten = table.copy()

    if options.strip_prefix:
        rewritten.name.rename(strip_prefix(rewritten.name.name, options.strip_prefix))
        # Keep foreign keys pointing at the renamed tables
        for reference in rewritten.references():
            reference.rename(strip_prefix(reference.name, options.strip_prefix))

    collation = collation_for(options.charset)
    for column in rewritten.columns:
        if replacement := DEPRECATED_TYPES.get(column.data_type):
            column.data_type, length = replacement
            column.type_args = [Token(T.Number.Integer, length, spaced=False)]

        if not options.dialect.column_charsets:
            column.charset = column.collation = None
        elif column.data_type in TEXT_TYPES:
            column.charset = options.charset
            column.collation = collation

    if options.dialect.column_charsets:
        rewritten.options = rewrite_table_charset(rewritten.options, options.charset, collation)

    return rewritten


def describe_table(table: CreateTable, dialect: Dialect) -> TableDefinition:
    """Summarize a parsed definition for the schema context."""
    columns = [
        ColumnDefinition(
            name=column.name.name,
            type=(
                f"{column.data_type}({render_parts(column.type_args, dialect)})"
                if column.type_args
                else column.data_type
            ),
            charset=column.charset,
            collation=column.collation,
        )
        for column in table.columns
    ]
    return TableDefinition(
        name=table.name.name,
        columns=columns,
        foreign_keys=extract_dependencies(table),
    )


def transform_statements(
    statements: Iterable[str],
    options: RewriteOptions,
    context: SchemaContext,
) -> list[Statement]:
    """Rewrite table definitions and register them in the context.

    Statements that are not table definitions pass through verbatim, as do
    table definitions that fail to parse.

    Args:
        statements: Statements from the splitter
        options: Rewrite settings
        context: Per-run registry of table definitions

    Returns:
        Output statements in input order, definitions tagged with their table

    """
    transformed: list[Statement] = []

    for sql in statements:
        if not DEFINITION_PATTERN.match(sql):
            transformed.append(Statement(sql))
            continue

        try:
            table = parse_statement(sql)
        except StatementParseError as e:
            logger.warning("Keeping original statement (%s): %s", e.reason, excerpt(sql))
            transformed.append(Statement(sql))
            continue

        rewritten = rewrite_table(table, options)
        definition = describe_table(rewritten, options.dialect)
        if context.register(definition):
            logger.warning("Table %s is defined more than once, keeping the last", definition.name)
        logger.debug("Registered table %s -> %s", definition.name, definition.foreign_keys)

        transformed.append(Statement(serialize(rewritten, options.dialect), definition.name))

    return transformed
