"""Per-file conversion: read, dispatch by input type, encode, write."""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, assert_never

from dump import assemble_document, merge_dumps, process_dump
from dump.assembler import format_timestamp
from inference import infer_column_types

from .config import ConversionOptions, OutputFormat
from .encoding import decode_source, encode_target
from .errors import ConfigurationError, FileProcessingError, UnsupportedInputError
from .records import read_csv, read_json, record_columns, write_csv, write_json
from .tables import records_to_statements

if TYPE_CHECKING:
    from collections.abc import Iterable

    from inference import Record

logger = logging.getLogger(__name__)

SQL_EXTENSION = ".sql"
RECORD_EXTENSIONS = frozenset({".csv", ".json"})
SUPPORTED_EXTENSIONS = RECORD_EXTENSIONS | {SQL_EXTENSION}

DEFAULT_TABLE_NAME = "imported_data"
MERGED_SOURCE = Path("merged")


class ConvertedDocument(NamedTuple):
    """An encoded output document and the input it came from."""

    source: Path
    content: bytes
    extension: str


def check_input(path: Path, options: ConversionOptions) -> None:
    """Reject inputs that cannot be converted with the given options.

    Raises:
        UnsupportedInputError: If the extension has no handler
        ConfigurationError: If a schema dump is paired with a record format

    """
    extension = path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedInputError(path)
    if extension == SQL_EXTENSION and options.output_format.dialect is None:
        msg = f"Cannot convert schema dump {path.name} to {options.output_format}"
        raise ConfigurationError(msg)


def read_source(path: Path) -> bytes:
    """Read an input file, wrapping I/O failures with the path."""
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileProcessingError(path, e.strerror or str(e)) from e


def table_name_for(path: Path, options: ConversionOptions) -> str:
    """Table name for a record input: the configured one or the file stem."""
    if options.table_name:
        return options.table_name
    return re.sub(r"\W+", "_", path.stem).strip("_") or DEFAULT_TABLE_NAME


def convert_records(
    records: list[Record],
    table_name: str,
    options: ConversionOptions,
    generated_at: datetime | None = None,
) -> str:
    """Render record data in the configured output format."""
    column_types = infer_column_types(records)
    logger.debug("Inferred column types: %s", {k: str(v) for k, v in column_types.items()})

    match options.output_format:
        case OutputFormat.MYSQL | OutputFormat.POSTGRESQL:
            dialect = options.output_format.dialect
            statements = records_to_statements(
                records,
                column_types,
                table_name,
                dialect,
                options.charset,
            )
            return assemble_document(statements, dialect, options.charset, generated_at=generated_at)
        case OutputFormat.CSV:
            return write_csv(records, record_columns(records))
        case OutputFormat.JSON:
            return write_json(records)
        case _:
            assert_never(options.output_format)


def convert_file(
    path: Path,
    options: ConversionOptions,
    *,
    generated_at: datetime | None = None,
) -> ConvertedDocument:
    """Convert one input file in memory.

    Args:
        path: Input file (.sql, .csv or .json)
        options: Conversion settings
        generated_at: Banner timestamp for schema output, the current time if
            omitted

    Returns:
        The encoded output document

    Raises:
        UnsupportedInputError: If the extension has no handler
        ConfigurationError: If the input type and output format do not fit
        FileProcessingError: If the file cannot be read
        InvalidInputError: If the content does not have the expected shape

    """
    check_input(path, options)
    text = decode_source(read_source(path), options.source_encoding)
    extension = path.suffix.lower()

    if extension == SQL_EXTENSION:
        output = process_dump(text, options.dump_options(generated_at)).document
    else:
        records = read_csv(text) if extension == ".csv" else read_json(text)
        logger.info("Read %d records from %s", len(records), path.name)
        output = convert_records(records, table_name_for(path, options), options, generated_at)

    return ConvertedDocument(
        source=path,
        content=encode_target(output, options.target_encoding),
        extension=options.output_format.extension,
    )


def convert_files(
    paths: Iterable[Path],
    options: ConversionOptions,
    *,
    generated_at: datetime | None = None,
) -> list[ConvertedDocument]:
    """Convert several input files.

    Every input is checked before any is processed. With ``merge`` set and
    more than one schema dump, the dumps are combined into a single
    dependency-ordered document; record inputs are always converted one by
    one.
    """
    paths = list(paths)
    for path in paths:
        check_input(path, options)

    dumps = [path for path in paths if path.suffix.lower() == SQL_EXTENSION]
    if not (options.merge and len(dumps) > 1):
        return [convert_file(path, options, generated_at=generated_at) for path in paths]

    logger.info("Merging %d schema dumps", len(dumps))
    texts = [decode_source(read_source(path), options.source_encoding) for path in dumps]
    result = merge_dumps(texts, options.dump_options(generated_at))
    merged = ConvertedDocument(
        source=MERGED_SOURCE,
        content=encode_target(result.document, options.target_encoding),
        extension=options.output_format.extension,
    )

    return [merged] + [
        convert_file(path, options, generated_at=generated_at)
        for path in paths
        if path.suffix.lower() != SQL_EXTENSION
    ]


def output_path(
    source: Path,
    export_dir: Path,
    extension: str,
    moment: datetime | None = None,
) -> Path:
    """Name an output file ``<stem>_converted_<timestamp><extension>``."""
    stamp = format_timestamp(moment or datetime.now(UTC))
    stamp = stamp.replace(":", "-").replace(".", "-")
    return export_dir / f"{source.stem}_converted_{stamp}{extension}"


def write_document(
    document: ConvertedDocument,
    export_dir: Path,
    moment: datetime | None = None,
) -> Path:
    """Write a converted document into the export directory.

    Raises:
        FileProcessingError: If the directory or file cannot be written

    """
    target = output_path(document.source, export_dir, document.extension, moment)
    try:
        export_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(document.content)
    except OSError as e:
        raise FileProcessingError(target, e.strerror or str(e)) from e
    logger.info("Wrote %s", target)
    return target
