"""Type definitions for the inference module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple


class TypeKind(StrEnum):
    """Storage types that can be inferred from record data."""

    JSON = "JSON"
    DATETIME = "DATETIME"
    DECIMAL = "DECIMAL"
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INT = "INT"
    BIGINT = "BIGINT"
    VARCHAR = "VARCHAR"
    TEXT = "TEXT"


class ColumnType(NamedTuple):
    """A resolved column type, rendered the way it appears in DDL."""

    kind: TypeKind
    length: int | None = None
    precision: int | None = None
    scale: int | None = None

    def __str__(self) -> str:
        """Render as a DDL type, e.g. ``VARCHAR(12)`` or ``DECIMAL(10,2)``."""
        if self.kind is TypeKind.VARCHAR:
            return f"VARCHAR({self.length})"
        if self.kind is TypeKind.DECIMAL:
            return f"DECIMAL({self.precision},{self.scale})"
        return str(self.kind)


@dataclass
class ColumnProfile:
    """Evidence accumulated for a single column across all records."""

    max_length: int = 0
    contains_decimal: bool = False
    contains_non_numeric: bool = False
    is_date: bool = True
    is_structured: bool = False

    # Number of non-empty values that contributed to the profile
    observed: int = 0
