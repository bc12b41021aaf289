"""Exceptions raised while processing schema dumps."""


class StatementParseError(ValueError):
    """A statement could not be parsed into a structural form."""

    def __init__(self, statement: str, reason: str) -> None:
        """Keep the offending statement for diagnostics."""
        self.statement = statement
        self.reason = reason
        super().__init__(f"Cannot parse statement: {reason}")


class UnterminatedStatementError(ValueError):
    """Input ended while a statement was still open (strict splitting)."""


class DanglingReferenceError(ValueError):
    """A foreign key points at a table with no definition (strict ordering)."""
