"""Type inference engine for untyped record data."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .types import ColumnProfile, ColumnType, TypeKind
from .values import (
    Value,
    as_number,
    is_date,
    is_decimal,
    is_empty,
    is_structured,
    render,
)

Record = Mapping[str, Value]


class TypeInferenceEngine:
    """Infers a best-fit storage type for every column of a record set."""

    # Integer width by maximum rendered length
    TINYINT_MAX_LENGTH = 3
    SMALLINT_MAX_LENGTH = 5
    INT_MAX_LENGTH = 10

    # Longest text stored as VARCHAR before falling back to TEXT
    VARCHAR_MAX_LENGTH = 255

    DECIMAL_PRECISION = 10
    DECIMAL_SCALE = 2

    def profile(self, records: Iterable[Record]) -> dict[str, ColumnProfile]:
        """Scan all records and accumulate one profile per column.

        Columns appear in the order their names are first seen.
        """
        profiles: dict[str, ColumnProfile] = {}
        for record in records:
            for column, value in record.items():
                profile = profiles.setdefault(column, ColumnProfile())
                self.observe(profile, value)
        return profiles

    def observe(self, profile: ColumnProfile, value: Value) -> None:
        """Update a column profile with a single value."""
        if is_empty(value):
            return

        profile.observed += 1
        profile.max_length = max(profile.max_length, len(render(value)))

        # Nested data settles the column, skip the scalar checks
        if is_structured(value):
            profile.is_structured = True
            profile.is_date = False
            profile.contains_non_numeric = True
            return

        if profile.is_date and not is_date(value):
            profile.is_date = False

        number = as_number(value)
        if number is None:
            profile.contains_non_numeric = True
        elif is_decimal(number):
            profile.contains_decimal = True

    def resolve(self, profile: ColumnProfile) -> ColumnType:  # noqa: PLR0911
        """Derive the column type from a finished profile."""
        if profile.is_structured:
            return ColumnType(TypeKind.JSON)

        if profile.is_date:
            return ColumnType(TypeKind.DATETIME)

        if not profile.contains_non_numeric:
            if profile.contains_decimal:
                return ColumnType(
                    TypeKind.DECIMAL,
                    precision=self.DECIMAL_PRECISION,
                    scale=self.DECIMAL_SCALE,
                )
            if profile.max_length <= self.TINYINT_MAX_LENGTH:
                return ColumnType(TypeKind.TINYINT)
            if profile.max_length <= self.SMALLINT_MAX_LENGTH:
                return ColumnType(TypeKind.SMALLINT)
            if profile.max_length <= self.INT_MAX_LENGTH:
                return ColumnType(TypeKind.INT)
            return ColumnType(TypeKind.BIGINT)

        if profile.max_length <= self.VARCHAR_MAX_LENGTH:
            return ColumnType(TypeKind.VARCHAR, length=profile.max_length)
        return ColumnType(TypeKind.TEXT)

    def infer(self, records: Iterable[Record]) -> dict[str, ColumnType]:
        """Infer column types for a record set."""
        return {
            column: self.resolve(profile)
            for column, profile in self.profile(records).items()
        }


def infer_column_types(records: Iterable[Record]) -> dict[str, ColumnType]:
    """Infer column types with the default engine.

    Args:
        records: Records mapping column names to raw values

    Returns:
        Column name to resolved type, in first-seen column order. An empty
        record set yields an empty mapping.

    """
    return TypeInferenceEngine().infer(records)
