"""Foreign key dependency extraction from parsed table definitions."""

from .structure import CreateTable


def extract_dependencies(table: CreateTable) -> tuple[str, ...]:
    """Collect the tables a definition references.

    Covers table-level ``FOREIGN KEY ... REFERENCES`` constraints as well as
    column-level ``REFERENCES`` shorthand. Column-level detail is discarded;
    only table-to-table edges are kept.

    Returns:
        Referenced table names in first-seen order without duplicates. A table
        without foreign keys yields an empty tuple.

    """
    return tuple(dict.fromkeys(name.name for name in table.references()))
