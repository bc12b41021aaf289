"""Tests for record-to-SQL generation."""

from sqlalchemy import BigInteger, DateTime, Integer, Numeric, SmallInteger, String, Text
from sqlalchemy.types import JSON

from convert import records_to_statements, sql_type
from dump import MYSQL, POSTGRES
from inference import ColumnType, TypeKind, infer_column_types

RECORDS = [
    {"age": "7", "name": "O'Brien", "joined": "2024-01-05"},
    {"age": "12", "name": "", "joined": "2024-02-10"},
]


def test_sql_type_mapping() -> None:
    """Test inferred kinds map to generic SQLAlchemy types."""
    assert isinstance(sql_type(ColumnType(TypeKind.JSON), "utf8mb4"), JSON)
    assert isinstance(sql_type(ColumnType(TypeKind.DATETIME), "utf8mb4"), DateTime)
    assert isinstance(sql_type(ColumnType(TypeKind.TINYINT), "utf8mb4"), SmallInteger)
    assert isinstance(sql_type(ColumnType(TypeKind.INT), "utf8mb4"), Integer)
    assert isinstance(sql_type(ColumnType(TypeKind.BIGINT), "utf8mb4"), BigInteger)
    assert isinstance(sql_type(ColumnType(TypeKind.TEXT), "utf8mb4"), Text)

    varchar = sql_type(ColumnType(TypeKind.VARCHAR, length=12), "utf8mb4")
    assert isinstance(varchar, String)
    assert varchar.length == 12

    decimal = sql_type(ColumnType(TypeKind.DECIMAL, precision=10, scale=2), "utf8mb4")
    assert isinstance(decimal, Numeric)
    assert (decimal.precision, decimal.scale) == (10, 2)


def test_mysql_statements() -> None:
    """Test MySQL output annotates text columns and quotes literals."""
    column_types = infer_column_types(RECORDS)

    create, insert = records_to_statements(RECORDS, column_types, "people", MYSQL, "utf8mb4")

    assert create.startswith("CREATE TABLE `people` (\n  `age` TINYINT,\n")
    assert "  `name` VARCHAR(7) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci,\n" in create
    assert "  `joined` DATETIME\n)" in create
    assert "\t" not in create

    assert insert.startswith("INSERT INTO `people` (`age`, `name`, `joined`) VALUES")
    assert "'O''Brien'" in insert
    assert "NULL" in insert


def test_postgres_statements() -> None:
    """Test PostgreSQL output uses its own quoting and no charsets."""
    column_types = infer_column_types(RECORDS)

    create, insert = records_to_statements(RECORDS, column_types, "people", POSTGRES, "utf8mb4")

    assert create.startswith('CREATE TABLE "people" (\n  "age" SMALLINT,\n')
    assert '"name" VARCHAR(7)' in create
    assert "CHARACTER SET" not in create
    assert insert.startswith('INSERT INTO "people" ("age", "name", "joined") VALUES')


def test_percent_signs_are_not_doubled() -> None:
    """Test literal percent signs survive compilation."""
    records = [{"rate": "5%"}]

    _, insert = records_to_statements(records, infer_column_types(records), "t", MYSQL, "utf8mb4")

    assert "'5%'" in insert


def test_no_records_no_statements() -> None:
    """Test an empty record set generates nothing."""
    assert records_to_statements([], {}, "t", MYSQL, "utf8mb4") == []


def test_decimal_arguments_match_dump_rendering() -> None:
    """Test DECIMAL renders its arguments without a space on both dialects."""
    records = [{"price": "3.50"}]
    column_types = infer_column_types(records)

    mysql_create, _ = records_to_statements(records, column_types, "t", MYSQL, "utf8mb4")
    postgres_create, _ = records_to_statements(records, column_types, "t", POSTGRES, "utf8mb4")

    assert "`price` DECIMAL(10,2)" in mysql_create
    assert '"price" NUMERIC(10,2)' in postgres_create


def test_postgres_keeps_backslashes() -> None:
    """Test backslashes reach PostgreSQL unescaped."""
    records = [{"path": "C:\\tmp"}]

    _, insert = records_to_statements(records, infer_column_types(records), "t", POSTGRES, "utf8mb4")

    assert "'C:\\tmp'" in insert
    assert "\\\\" not in insert


def test_mysql_escapes_backslashes() -> None:
    """Test MySQL literals double backslashes, which MySQL reads as escapes."""
    records = [{"path": "C:\\tmp"}]

    _, insert = records_to_statements(records, infer_column_types(records), "t", MYSQL, "utf8mb4")

    assert "'C:\\\\tmp'" in insert
