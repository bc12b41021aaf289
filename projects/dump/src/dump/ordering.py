"""Dependency ordering of table definitions for merged output."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import DanglingReferenceError
from .types import OrderedStatements, SchemaContext, Statement

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def order_statements(
    statements: Sequence[Statement],
    context: SchemaContext,
    *,
    strict: bool = False,
) -> OrderedStatements:
    """Order definitions so every referenced table precedes its dependents.

    Tables are visited depth-first in registration order, and each table's
    dependencies in the order they were first referenced. A dependency that is
    already on the current path closes a cycle; the edge is skipped and
    reported rather than followed, so the order inside a cycle may still
    violate it. Non-definition statements follow in their original order.

    Args:
        statements: Transformed statements, definitions tagged with a table
        context: Registry the definitions were recorded in
        strict: Raise on references to tables without a definition

    Returns:
        The ordered statements and the edges that could not be honoured

    Raises:
        DanglingReferenceError: If strict and a reference has no definition

    """
    # A later definition of the same table replaces the earlier one
    definitions = {s.table: s for s in statements if s.table is not None}

    ordered: list[Statement] = []
    unresolved: list[tuple[str, str]] = []
    visiting: set[str] = set()
    done: set[str] = set()

    def visit(table: str) -> None:
        visiting.add(table)

        for dependency in context.dependencies.get(table, ()):
            if dependency == table or dependency in done:
                continue
            if dependency in visiting:
                logger.warning("Cycle: %s -> %s cannot be ordered", table, dependency)
                unresolved.append((table, dependency))
                continue
            if dependency not in definitions:
                if strict:
                    msg = f"Table {table} references {dependency}, which is never defined"
                    raise DanglingReferenceError(msg)
                logger.warning("Table %s references undefined table %s", table, dependency)
                continue
            visit(dependency)

        visiting.discard(table)
        done.add(table)
        ordered.append(definitions[table])

    for table in context.tables:
        if table in definitions and table not in done:
            visit(table)

    ordered.extend(s for s in statements if s.table is None)
    return OrderedStatements(ordered, unresolved)
