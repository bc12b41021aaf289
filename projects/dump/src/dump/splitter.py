"""Split schema dump text into top-level statements."""

import logging

from .errors import UnterminatedStatementError

logger = logging.getLogger(__name__)

COMMENT_MARKERS = ("--", "#")
TERMINATOR = ";"

# Length of statement excerpts in log messages
EXCERPT_LENGTH = 80


def excerpt(statement: str) -> str:
    """Shorten a statement to a single-line excerpt for logging."""
    flat = " ".join(statement.split())
    if len(flat) <= EXCERPT_LENGTH:
        return flat
    return f"{flat[: EXCERPT_LENGTH - 3]}..."


def split_statements(text: str, *, strict: bool = False) -> list[str]:
    """Split dump text into statements, dropping comment and blank lines.

    A statement ends on the first line whose trimmed form ends with ``;``.

    Args:
        text: Raw dump text
        strict: Raise instead of dropping an unterminated trailing statement

    Returns:
        Trimmed statements in input order, each keeping its terminator

    Raises:
        UnterminatedStatementError: If strict and the input ends mid-statement

    """
    statements: list[str] = []
    buffer: list[str] = []

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(COMMENT_MARKERS):
            continue

        buffer.append(line)

        if stripped.endswith(TERMINATOR):
            statements.append("\n".join(buffer).strip())
            buffer.clear()

    if buffer:
        remainder = "\n".join(buffer).strip()
        if strict:
            msg = f"Input ends inside a statement: {excerpt(remainder)}"
            raise UnterminatedStatementError(msg)
        logger.warning("Dropping unterminated trailing statement: %s", excerpt(remainder))

    return statements
