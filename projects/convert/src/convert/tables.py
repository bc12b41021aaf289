"""Schema-definition output for record inputs, compiled with SQLAlchemy."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, assert_never

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    SmallInteger,
    String,
    Table,
    Text,
    column,
    insert,
    table,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.dialects.mysql.base import MySQLDialect
from sqlalchemy.dialects.postgresql.base import PGDialect
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.elements import quoted_name
from sqlalchemy.types import JSON

from dump import collation_for
from inference import TypeKind
from inference.values import is_empty, render

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.engine import Dialect as SQLDialect
    from sqlalchemy.types import TypeEngine

    from dump import Dialect
    from inference import ColumnType, Record

INDENT = "  "

# Type arguments rendered without a space, as in DECIMAL(10,2)
TYPE_ARGUMENTS = re.compile(r"\b([A-Z]+)\((\d+), (\d+)\)")


def postgres_compiler() -> PGDialect:
    """PostgreSQL dialect for standard_conforming_strings servers.

    Backslashes in string literals are taken literally there, so they must
    not be escaped.
    """
    dialect = PGDialect(paramstyle="named")
    dialect._backslash_escapes = False  # noqa: SLF001
    return dialect


# Named parameters keep literal percent signs from being doubled
_COMPILERS: dict[str, SQLDialect] = {
    "mysql": MySQLDialect(paramstyle="named"),
    "postgres": postgres_compiler(),
}


def sql_type(column_type: ColumnType, charset: str) -> TypeEngine[Any]:
    """Map an inferred column type to a SQLAlchemy type.

    Text types carry the character set and collation on MySQL only.
    """
    collation = collation_for(charset)
    match column_type.kind:
        case TypeKind.JSON:
            return JSON()
        case TypeKind.DATETIME:
            return DateTime()
        case TypeKind.DECIMAL:
            precision, scale = column_type.precision or 10, column_type.scale or 2
            return Numeric(precision, scale).with_variant(mysql.DECIMAL(precision, scale), "mysql")
        case TypeKind.TINYINT:
            return SmallInteger().with_variant(mysql.TINYINT(), "mysql")
        case TypeKind.SMALLINT:
            return SmallInteger()
        case TypeKind.INT:
            return Integer()
        case TypeKind.BIGINT:
            return BigInteger()
        case TypeKind.VARCHAR:
            length = column_type.length or 255
            return String(length).with_variant(
                mysql.VARCHAR(length, charset=charset, collation=collation),
                "mysql",
            )
        case TypeKind.TEXT:
            return Text().with_variant(mysql.TEXT(charset=charset, collation=collation), "mysql")
        case _:
            assert_never(column_type.kind)


def compiler_for(dialect: Dialect) -> SQLDialect:
    """SQLAlchemy dialect used to compile statements for an output dialect."""
    return _COMPILERS[dialect.name]


def tidy(compiled: str) -> str:
    """Indent compiled DDL like the dump serializer and drop stray whitespace."""
    lines = compiled.strip().splitlines()
    return "\n".join(
        TYPE_ARGUMENTS.sub(r"\1(\2,\3)", line.replace("\t", INDENT).rstrip()) for line in lines
    )


def record_table(
    table_name: str,
    column_types: Mapping[str, ColumnType],
    charset: str,
) -> Table:
    """Build the table definition for a set of inferred columns."""
    return Table(
        quoted_name(table_name, quote=True),
        MetaData(),
        *(
            Column(quoted_name(name, quote=True), sql_type(column_type, charset))
            for name, column_type in column_types.items()
        ),
    )


def insert_rows(
    table_name: str,
    columns: Sequence[str],
    records: Sequence[Record],
    dialect: Dialect,
) -> str:
    """Compile one multi-row INSERT with literal values.

    Values are inserted as text literals and empty values as NULL.
    """
    target = table(
        quoted_name(table_name, quote=True),
        *(column(quoted_name(name, quote=True), String) for name in columns),
    )
    rows = [
        {
            name: None if is_empty(value := record.get(name)) else render(value)
            for name in columns
        }
        for record in records
    ]
    statement = insert(target).values(rows)
    compiled = statement.compile(
        dialect=compiler_for(dialect),
        compile_kwargs={"literal_binds": True},
    )
    return str(compiled).strip()


def records_to_statements(
    records: Sequence[Record],
    column_types: Mapping[str, ColumnType],
    table_name: str,
    dialect: Dialect,
    charset: str,
) -> list[str]:
    """Generate the CREATE TABLE and INSERT statements for record data.

    Args:
        records: Records in input order
        column_types: Inferred type per column, in column order
        table_name: Name of the generated table
        dialect: Output dialect
        charset: Target character set for text columns

    Returns:
        Statements without terminators; empty if there are no records

    """
    if not records or not column_types:
        return []

    definition = record_table(table_name, column_types, charset)
    create = str(CreateTable(definition).compile(dialect=compiler_for(dialect)))
    return [tidy(create), insert_rows(table_name, list(column_types), records, dialect)]
