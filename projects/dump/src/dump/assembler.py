"""Wrap ordered statements into the final definition-language document."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .dialects import Dialect

TOOL_NAME = "DB Blender"
TEMPLATE_DIR = Path(__file__).parent / "templates"

# Jinja2 environment for document rendering; .sql templates are not escaped
_JINJA_ENV = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def strip_terminator(statement: str) -> str:
    """Remove trailing terminators so exactly one can be added back."""
    text = statement.rstrip()
    while text.endswith(";"):
        text = text[:-1].rstrip()
    return text


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def assemble_document(
    statements: Iterable[str],
    dialect: Dialect,
    charset: str,
    *,
    generated_at: datetime | None = None,
) -> str:
    """Render the output document.

    The document is a banner, the encoding and integrity-disable pragmas, every
    statement followed by one terminator and a blank line, and the
    integrity-enable pragma.

    Args:
        statements: Statements in output order
        dialect: Output dialect supplying the pragmas
        charset: Target character set named in the banner and pragma
        generated_at: Banner timestamp, the current time if omitted

    Returns:
        Document text

    """
    template = _JINJA_ENV.get_template("document.sql")
    return template.render(
        tool=TOOL_NAME,
        generated_at=format_timestamp(generated_at or datetime.now(UTC)),
        charset=charset,
        header=dialect.header_pragmas(charset),
        statements=[text for s in statements if (text := strip_terminator(s))],
        footer=dialect.footer_pragmas(),
    )
