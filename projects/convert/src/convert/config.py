"""Output formats and the frozen option bundle for a conversion run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, assert_never

from dump import MYSQL, POSTGRES, Dialect, DumpOptions

from .encoding import AUTO, charset_for, validate_encoding
from .errors import UnsupportedFormatError

if TYPE_CHECKING:
    from datetime import datetime


class OutputFormat(StrEnum):
    """Supported output formats."""

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    CSV = "csv"
    JSON = "json"

    @property
    def dialect(self) -> Dialect | None:
        """Definition-language dialect, None for record formats."""
        match self:
            case OutputFormat.MYSQL:
                return MYSQL
            case OutputFormat.POSTGRESQL:
                return POSTGRES
            case OutputFormat.CSV | OutputFormat.JSON:
                return None
            case _:
                assert_never(self)

    @property
    def extension(self) -> str:
        """File extension of documents in this format."""
        match self:
            case OutputFormat.MYSQL | OutputFormat.POSTGRESQL:
                return ".sql"
            case OutputFormat.CSV:
                return ".csv"
            case OutputFormat.JSON:
                return ".json"
            case _:
                assert_never(self)


def parse_output_format(name: str) -> OutputFormat:
    """Look up an output format by name.

    Raises:
        UnsupportedFormatError: If the name is not a supported format

    """
    try:
        return OutputFormat(name.strip().lower())
    except ValueError:
        supported = ", ".join(OutputFormat)
        msg = f"Unsupported output format: {name} (expected one of {supported})"
        raise UnsupportedFormatError(msg) from None


@dataclass(frozen=True)
class ConversionOptions:
    """Validated settings shared by every file of a run."""

    source_encoding: str = AUTO
    target_encoding: str = "utf8mb4"
    strip_prefix: str | None = None
    merge: bool = False
    output_format: OutputFormat = OutputFormat.MYSQL
    # Raise instead of dropping an unterminated trailing statement
    strict_statements: bool = False
    # Raise instead of skipping foreign keys to undefined tables
    strict_references: bool = False
    # Table name for record inputs, defaults to the file name
    table_name: str | None = None

    def __post_init__(self) -> None:
        """Validate encodings and normalize the output format."""
        validate_encoding(self.source_encoding, allow_auto=True)
        validate_encoding(self.target_encoding)
        if not isinstance(self.output_format, OutputFormat):
            object.__setattr__(self, "output_format", parse_output_format(self.output_format))

    @property
    def charset(self) -> str:
        """Target encoding as a MySQL charset name."""
        return charset_for(self.target_encoding)

    def dump_options(self, generated_at: datetime | None = None) -> DumpOptions:
        """Options for the schema dump pipeline."""
        dialect = self.output_format.dialect
        if dialect is None:
            msg = f"{self.output_format} is not a definition-language format"
            raise ValueError(msg)
        return DumpOptions(
            charset=self.charset,
            strip_prefix=self.strip_prefix,
            dialect=dialect,
            merge=self.merge,
            strict_statements=self.strict_statements,
            strict_references=self.strict_references,
            generated_at=generated_at,
        )
