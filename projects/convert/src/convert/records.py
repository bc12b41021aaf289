"""Readers and writers for record-oriented files (CSV and JSON)."""

from __future__ import annotations

import csv
import io
import json
from typing import TYPE_CHECKING, Any

from inference.values import is_empty, render

from .errors import InvalidInputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from inference import Record
    from inference.values import Value

NESTED_SEPARATOR = "_"


def read_csv(text: str) -> list[dict[str, str]]:
    """Parse delimited text with a header row.

    Cells are trimmed and blank rows are skipped. Short rows are padded with
    empty strings and cells beyond the header are ignored.
    """
    rows = (row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row))
    header = next(rows, None)
    if header is None:
        return []

    columns = [name.strip() or f"column_{index}" for index, name in enumerate(header, 1)]
    return [
        {column: (row[index].strip() if index < len(row) else "") for index, column in enumerate(columns)}
        for row in rows
    ]


def flatten(document: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested objects into one level.

    Nested keys are joined with ``_``; arrays are kept as JSON text.
    """
    flat: dict[str, Any] = {}
    for key, value in document.items():
        name = f"{prefix}{NESTED_SEPARATOR}{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten(value, name))
        elif isinstance(value, list):
            flat[name] = json.dumps(value, ensure_ascii=False)
        else:
            flat[name] = value
    return flat


def read_json(text: str) -> list[dict[str, Any]]:
    """Parse a JSON object or array of objects into flat records.

    Raises:
        InvalidInputError: If the text is not JSON, or not an object or an
            array of objects

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
        raise InvalidInputError(msg) from e

    if isinstance(data, dict):
        return [flatten(data)]
    if isinstance(data, list) and all(isinstance(item, dict) for item in data):
        return [flatten(item) for item in data]

    msg = "Invalid JSON format: must be an object or array of objects"
    raise InvalidInputError(msg)


def record_columns(records: Iterable[Record]) -> list[str]:
    """Union of record keys in first-seen order."""
    return list(dict.fromkeys(column for record in records for column in record))


def cell(value: Value) -> str:
    """Render a value as a CSV cell, nulls as empty cells."""
    return "" if is_empty(value) else render(value)


def write_csv(records: Sequence[Record], columns: Sequence[str] | None = None) -> str:
    """Serialize records as CSV with a header and every field quoted."""
    columns = list(columns) if columns is not None else record_columns(records)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    for record in records:
        writer.writerow([cell(record.get(column)) for column in columns])
    return buffer.getvalue()


def write_json(records: Sequence[Record]) -> str:
    """Serialize records as a JSON array indented by two spaces."""
    return json.dumps(list(records), indent=2, ensure_ascii=False) + "\n"
