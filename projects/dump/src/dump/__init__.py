"""Schema dump processing: parse, rewrite and reorder MySQL table definitions."""

from .assembler import assemble_document
from .dependencies import extract_dependencies
from .dialects import MYSQL, POSTGRES, Dialect, collation_for
from .errors import DanglingReferenceError, StatementParseError, UnterminatedStatementError
from .main import DumpOptions, DumpResult, merge_dumps, process_dump
from .ordering import order_statements
from .parser import parse_statement
from .rewriter import RewriteOptions, describe_table, rewrite_table, transform_statements
from .serializer import serialize
from .splitter import split_statements
from .types import (
    ColumnDefinition,
    OrderedStatements,
    SchemaContext,
    Statement,
    TableDefinition,
)

__all__ = [
    "MYSQL",
    "POSTGRES",
    "ColumnDefinition",
    "DanglingReferenceError",
    "Dialect",
    "DumpOptions",
    "DumpResult",
    "OrderedStatements",
    "RewriteOptions",
    "SchemaContext",
    "Statement",
    "StatementParseError",
    "TableDefinition",
    "UnterminatedStatementError",
    "assemble_document",
    "collation_for",
    "describe_table",
    "extract_dependencies",
    "merge_dumps",
    "order_statements",
    "parse_statement",
    "process_dump",
    "rewrite_table",
    "serialize",
    "split_statements",
    "transform_statements",
]
