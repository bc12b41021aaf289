"""Schema dump pipeline: split, rewrite, order and assemble."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .assembler import assemble_document
from .dialects import MYSQL, Dialect
from .ordering import order_statements
from .rewriter import RewriteOptions, transform_statements
from .splitter import split_statements
from .types import SchemaContext, Statement

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DumpOptions:
    """Settings for one dump run."""

    charset: str = "utf8mb4"
    strip_prefix: str | None = None
    dialect: Dialect = MYSQL
    merge: bool = False
    # Raise instead of dropping an unterminated trailing statement
    strict_statements: bool = False
    # Raise instead of skipping references to undefined tables
    strict_references: bool = False
    # Fixed banner timestamp, mainly for reproducible output
    generated_at: datetime | None = None


@dataclass
class DumpResult:
    """Output of a dump run."""

    document: str
    statements: list[Statement]
    context: SchemaContext
    # Cycle edges the merge order could not honour
    unresolved: list[tuple[str, str]] = field(default_factory=list)


def _run(texts: Iterable[str], options: DumpOptions, *, merge: bool) -> DumpResult:
    context = SchemaContext()
    rewrite = RewriteOptions(
        charset=options.charset,
        strip_prefix=options.strip_prefix,
        dialect=options.dialect,
    )

    statements: list[Statement] = []
    for text in texts:
        split = split_statements(text, strict=options.strict_statements)
        statements.extend(transform_statements(split, rewrite, context))

    unresolved: list[tuple[str, str]] = []
    if merge:
        statements, unresolved = order_statements(
            statements,
            context,
            strict=options.strict_references,
        )

    logger.info(
        "Processed %d statements, %d table definitions",
        len(statements),
        len(context.tables),
    )
    document = assemble_document(
        [statement.text for statement in statements],
        options.dialect,
        options.charset,
        generated_at=options.generated_at,
    )
    return DumpResult(document, statements, context, unresolved)


def process_dump(text: str, options: DumpOptions) -> DumpResult:
    """Transform one schema dump with a fresh schema context.

    Definitions are dependency-ordered only when ``options.merge`` is set.
    """
    return _run([text], options, merge=options.merge)


def merge_dumps(texts: Iterable[str], options: DumpOptions) -> DumpResult:
    """Transform several dumps into one dependency-ordered document.

    All texts share a single schema context, so a table defined in one dump
    can satisfy references from another.
    """
    return _run(texts, options, merge=True)
