"""Parse ``CREATE TABLE`` statements into their structural form.

Lexing is delegated to :mod:`sqlparse`; this module only groups the token
stream into a head, a table name, body elements and trailing table options.
"""

from __future__ import annotations

from sqlparse import lexer
from sqlparse import tokens as T

from .errors import StatementParseError
from .structure import (
    CONSTRAINT_KEYWORDS,
    ColumnSpec,
    CreateTable,
    Element,
    Identifier,
    Part,
    QualifiedName,
    TableConstraint,
    Token,
)

# Words allowed between CREATE and the table name
HEAD_WORDS = frozenset(
    {"CREATE", "TEMPORARY", "TABLE", "IF", "NOT", "EXISTS", "IF NOT EXISTS"},
)

# Token types that can never start an identifier
NON_IDENTIFIER_TYPES = (T.Punctuation, T.Operator, T.Number, T.String.Single)


def tokenize_statement(sql: str) -> list[Token]:
    """Lex a statement into significant tokens.

    Whitespace and comments are dropped; each kept token records whether any
    were dropped in front of it.

    Raises:
        StatementParseError: If the lexer meets text it cannot tokenize

    """
    significant: list[Token] = []
    spaced = False

    for ttype, value in lexer.tokenize(sql):
        if ttype in T.Whitespace or ttype in T.Comment:
            spaced = True
            continue
        if ttype in T.Error:
            raise StatementParseError(sql, f"unexpected character {value!r}")
        significant.append(Token(ttype, value, spaced))
        spaced = False

    return significant


def is_identifier(token: Token) -> bool:
    """Whether a token can name a table or column."""
    return not any(token.ttype in ttype for ttype in NON_IDENTIFIER_TYPES)


def read_name(tokens: list[Token], start: int) -> tuple[QualifiedName, int] | None:
    """Read a dotted name at ``start``.

    Returns:
        The name and the index just past it, or None if no name starts there

    """
    if start >= len(tokens) or not is_identifier(tokens[start]):
        return None

    parts = [Identifier.from_token(tokens[start])]
    index = start + 1
    while (
        index + 1 < len(tokens)
        and tokens[index].value == "."
        and is_identifier(tokens[index + 1])
    ):
        parts.append(Identifier.from_token(tokens[index + 1]))
        index += 2

    return QualifiedName(parts, spaced=tokens[start].spaced), index


def closing_paren(tokens: list[Token], start: int) -> int | None:
    """Find the index of the parenthesis closing the one at ``start``."""
    depth = 0
    for index in range(start, len(tokens)):
        if tokens[index].value == "(":
            depth += 1
        elif tokens[index].value == ")":
            depth -= 1
            if depth == 0:
                return index
    return None


def split_elements(tokens: list[Token]) -> list[list[Token]]:
    """Split the table body at top-level commas."""
    elements: list[list[Token]] = [[]]
    depth = 0

    for token in tokens:
        if token.value == "(":
            depth += 1
        elif token.value == ")":
            depth -= 1
        elif token.value == "," and depth == 0:
            elements.append([])
            continue
        elements[-1].append(token)

    return [element for element in elements if element]


def lift_references(tokens: list[Token]) -> list[Part]:
    """Turn the table name after each ``REFERENCES`` into a QualifiedName."""
    parts: list[Part] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]
        parts.append(token)
        index += 1
        if token.word == "REFERENCES" and (found := read_name(tokens, index)):
            name, index = found
            parts.append(name)

    return parts


def extract_charset(options: list[Token]) -> tuple[list[Token], str | None, str | None]:
    """Remove column-level ``CHARACTER SET`` / ``CHARSET`` / ``COLLATE`` clauses.

    Returns:
        Remaining options, the character set and the collation

    """
    remaining: list[Token] = []
    charset = collation = None
    index = 0

    while index < len(options):
        word = options[index].word
        following = options[index + 1].word if index + 1 < len(options) else ""

        if word == "CHARACTER" and following == "SET" and index + 2 < len(options):
            charset = options[index + 2].value
            index += 3
        elif word in {"CHARSET", "COLLATE"} and index + 1 < len(options):
            if word == "CHARSET":
                charset = options[index + 1].value
            else:
                collation = options[index + 1].value
            index += 2
        else:
            remaining.append(options[index])
            index += 1

    return remaining, charset, collation


def parse_column(sql: str, tokens: list[Token]) -> ColumnSpec:
    """Parse a column definition element."""
    if len(tokens) < 2:
        raise StatementParseError(sql, f"column {tokens[0].value} has no type")

    name = Identifier.from_token(tokens[0])
    data_type = tokens[1].word
    rest = tokens[2:]
    type_args: list[Token] = []

    if rest and rest[0].value == "(":
        close = closing_paren(rest, 0)
        if close is None:
            raise StatementParseError(sql, f"unbalanced type arguments on {name.name}")
        type_args = rest[1:close]
        rest = rest[close + 1 :]

    options, charset, collation = extract_charset(rest)
    return ColumnSpec(
        name=name,
        data_type=data_type,
        type_args=type_args,
        charset=charset,
        collation=collation,
        options=lift_references(options),
    )


def parse_element(sql: str, tokens: list[Token]) -> Element:
    """Parse one body element as a table constraint or a column."""
    if tokens[0].word == "CONSTRAINT" or tokens[0].word in CONSTRAINT_KEYWORDS:
        return TableConstraint(lift_references(tokens))
    return parse_column(sql, tokens)


def parse_statement(sql: str) -> CreateTable:
    """Parse a ``CREATE TABLE`` statement.

    Args:
        sql: One statement, with or without its terminator

    Returns:
        The structural form of the statement

    Raises:
        StatementParseError: If the statement is not a well-formed table
            definition

    """
    tokens = tokenize_statement(sql)
    while tokens and tokens[-1].value == ";":
        tokens.pop()

    if not tokens or tokens[0].word != "CREATE":
        raise StatementParseError(sql, "not a CREATE statement")

    index = 0
    while index < len(tokens) and tokens[index].word in HEAD_WORDS:
        index += 1
    head = tokens[:index]
    if "TABLE" not in {token.word for token in head}:
        raise StatementParseError(sql, "not a CREATE TABLE statement")

    found = read_name(tokens, index)
    if found is None:
        raise StatementParseError(sql, "missing table name")
    name, index = found

    elements: list[Element] | None = None
    if index < len(tokens) and tokens[index].value == "(":
        close = closing_paren(tokens, index)
        if close is None:
            raise StatementParseError(sql, "unbalanced parentheses")
        chunks = split_elements(tokens[index + 1 : close])
        if not chunks:
            raise StatementParseError(sql, "empty column list")
        elements = [parse_element(sql, chunk) for chunk in chunks]
        index = close + 1

    tail = tokens[index:]
    depth = 0
    for token in tail:
        depth += (token.value == "(") - (token.value == ")")
        if depth < 0:
            raise StatementParseError(sql, "unbalanced parentheses")

    return CreateTable(head=head, name=name, elements=elements, options=list(tail))
