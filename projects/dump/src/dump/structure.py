"""Structural form of a ``CREATE TABLE`` statement.

A parsed definition keeps the source tokens it could not interpret, so a
statement survives a parse and serialize round trip with its column options,
constraints and table options intact. Only the parts the rewriter needs are
lifted into fields: the table name, column names and types, column character
sets and collations, and the table names behind ``REFERENCES`` clauses.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any, NamedTuple, Union

from sqlparse import tokens as T

from .dialects import Dialect

IDENTIFIER_QUOTES = {"`": "`", '"': '"', "[": "]"}

# Leading keywords of table-level elements
CONSTRAINT_KEYWORDS = frozenset(
    {
        "PRIMARY KEY",
        "UNIQUE",
        "FOREIGN",
        "CHECK",
        "KEY",
        "INDEX",
        "FULLTEXT",
        "SPATIAL",
    },
)


class Token(NamedTuple):
    """A significant source token."""

    ttype: Any
    value: str
    # Whitespace or a comment preceded the token in the source
    spaced: bool = True

    @property
    def word(self) -> str:
        """Upper-cased keyword form, empty for literals and quoted names."""
        if self.ttype in T.String or self.value[:1] in IDENTIFIER_QUOTES:
            return ""
        return " ".join(self.value.upper().split())

    def render(self, dialect: Dialect) -> str:
        """Render the token, re-quoting quoted identifiers for the dialect."""
        if self.ttype in T.Name and self.value[:1] in IDENTIFIER_QUOTES:
            return Identifier.from_token(self).render(dialect)
        if self.ttype in T.Keyword:
            return " ".join(self.value.split())
        return self.value


@dataclass
class Identifier:
    """A possibly quoted identifier."""

    name: str
    quoted: bool = False

    @classmethod
    def from_token(cls, token: Token) -> Identifier:
        """Unquote an identifier token."""
        value = token.value
        if (close := IDENTIFIER_QUOTES.get(value[:1])) and value.endswith(close):
            inner = value[1:-1]
            if close != "]":
                inner = inner.replace(close * 2, close)
            return cls(inner, quoted=True)
        return cls(value)

    def render(self, dialect: Dialect) -> str:
        """Render with the dialect's quote character if originally quoted."""
        if not self.quoted:
            return self.name
        quote = dialect.identifier_quote
        return f"{quote}{self.name.replace(quote, quote * 2)}{quote}"


@dataclass
class QualifiedName:
    """A dotted table name such as ``shop.orders``."""

    parts: list[Identifier]
    spaced: bool = True

    # Names never read as keywords
    word = ""

    @property
    def name(self) -> str:
        """The unqualified table name."""
        return self.parts[-1].name

    def copy(self) -> QualifiedName:
        """Copy with independent identifiers."""
        return QualifiedName([replace(part) for part in self.parts], self.spaced)

    def rename(self, name: str) -> None:
        """Replace the unqualified name, keeping qualifier and quoting."""
        self.parts[-1].name = name

    def render(self, dialect: Dialect) -> str:
        """Render the dotted name."""
        return ".".join(part.render(dialect) for part in self.parts)


Part = Union[Token, QualifiedName]


def copy_parts(parts: list[Part]) -> list[Part]:
    """Copy a clause; tokens are immutable and shared."""
    return [part.copy() if isinstance(part, QualifiedName) else part for part in parts]


def render_parts(parts: list[Part], dialect: Dialect) -> str:
    """Join clause parts, keeping a single space wherever the source had one."""
    rendered: list[str] = []
    for index, part in enumerate(parts):
        if index and part.spaced:
            rendered.append(" ")
        rendered.append(part.render(dialect))
    return "".join(rendered)


@dataclass
class ColumnSpec:
    """A column definition inside the table body."""

    name: Identifier
    data_type: str
    type_args: list[Token] = field(default_factory=list)
    charset: str | None = None
    collation: str | None = None
    # Everything after the type: nullability, defaults, references...
    options: list[Part] = field(default_factory=list)

    def copy(self) -> ColumnSpec:
        """Copy with independent mutable parts."""
        return replace(
            self,
            name=replace(self.name),
            type_args=list(self.type_args),
            options=copy_parts(self.options),
        )

    def references(self) -> Iterator[QualifiedName]:
        """Yield tables named by a column-level ``REFERENCES`` clause."""
        yield from (part for part in self.options if isinstance(part, QualifiedName))


@dataclass
class TableConstraint:
    """A table-level element: keys, indexes, checks, foreign keys."""

    parts: list[Part]

    @property
    def kind(self) -> str:
        """Leading keyword of the element, after any ``CONSTRAINT name``."""
        words = [part.word for part in self.parts if isinstance(part, Token)]
        if words and words[0] == "CONSTRAINT":
            # The constraint symbol is optional
            words = words[1:] if words[1:2] and words[1] in CONSTRAINT_KEYWORDS else words[2:]
        return words[0] if words else ""

    def copy(self) -> TableConstraint:
        """Copy with independent names."""
        return TableConstraint(copy_parts(self.parts))

    def references(self) -> Iterator[QualifiedName]:
        """Yield tables named by a ``REFERENCES`` clause."""
        yield from (part for part in self.parts if isinstance(part, QualifiedName))


Element = Union[ColumnSpec, TableConstraint]


@dataclass
class CreateTable:
    """A parsed ``CREATE TABLE`` statement."""

    # CREATE [TEMPORARY] TABLE [IF NOT EXISTS]
    head: list[Token]
    name: QualifiedName
    # None when the table is created without a column list (LIKE, AS SELECT)
    elements: list[Element] | None = None
    # Table options after the body, or the LIKE / AS SELECT tail
    options: list[Part] = field(default_factory=list)

    @property
    def columns(self) -> list[ColumnSpec]:
        """Column definitions in declaration order."""
        return [e for e in self.elements or [] if isinstance(e, ColumnSpec)]

    @property
    def constraints(self) -> list[TableConstraint]:
        """Table-level constraints in declaration order."""
        return [e for e in self.elements or [] if isinstance(e, TableConstraint)]

    def copy(self) -> CreateTable:
        """Deep copy sharing only the immutable tokens."""
        return CreateTable(
            head=list(self.head),
            name=self.name.copy(),
            elements=None if self.elements is None else [e.copy() for e in self.elements],
            options=copy_parts(self.options),
        )

    def references(self) -> Iterator[QualifiedName]:
        """Yield every referenced table name, in source order."""
        for element in self.elements or []:
            yield from element.references()
