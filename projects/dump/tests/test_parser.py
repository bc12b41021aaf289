"""Tests for parsing and serializing table definitions."""

import pytest

from dump import MYSQL, POSTGRES, StatementParseError, extract_dependencies, parse_statement, serialize
from dump.parser import tokenize_statement
from dump.structure import ColumnSpec, TableConstraint

ORDERS = """CREATE TABLE `orders` (
  `id` INT(11) NOT NULL AUTO_INCREMENT,
  `customer_id` INT NOT NULL,
  `status` ENUM('new', 'paid') DEFAULT 'new' COMMENT 'lifecycle',
  PRIMARY KEY (`id`),
  KEY `idx_customer` (`customer_id`),
  UNIQUE KEY `uq_status` (`status`) USING BTREE,
  CONSTRAINT `fk_customer` FOREIGN KEY (`customer_id`) REFERENCES `customers` (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=latin1;"""


def test_parse_splits_columns_and_constraints() -> None:
    """Test the body is split into columns and table-level elements."""
    table = parse_statement(ORDERS)

    assert table.name.name == "orders"
    assert [column.name.name for column in table.columns] == ["id", "customer_id", "status"]
    assert [constraint.kind for constraint in table.constraints] == [
        "PRIMARY KEY",
        "KEY",
        "UNIQUE",
        "FOREIGN",
    ]


def test_parse_column_type_and_arguments() -> None:
    """Test column types are upper-cased with their arguments kept."""
    table = parse_statement("create table t (price decimal(10,2) unsigned not null);")
    column = table.columns[0]

    assert isinstance(column, ColumnSpec)
    assert column.data_type == "DECIMAL"
    assert [token.value for token in column.type_args] == ["10", ",", "2"]
    assert [part.word for part in column.options] == ["UNSIGNED", "NOT NULL"]


def test_parse_extracts_column_charset() -> None:
    """Test column character sets and collations are lifted out of the options."""
    table = parse_statement(
        "CREATE TABLE t (`name` VARCHAR(100) CHARACTER SET latin1 COLLATE latin1_swedish_ci NOT NULL);",
    )
    column = table.columns[0]

    assert column.charset == "latin1"
    assert column.collation == "latin1_swedish_ci"
    assert [part.word for part in column.options] == ["NOT NULL"]


def test_parse_head_variants() -> None:
    """Test temporary tables and IF NOT EXISTS are accepted."""
    table = parse_statement("CREATE TEMPORARY TABLE IF NOT EXISTS shop.`t` (id INT)")

    assert " ".join(token.word for token in table.head) == "CREATE TEMPORARY TABLE IF NOT EXISTS"
    assert table.name.name == "t"
    assert len(table.name.parts) == 2


def test_parse_table_without_body() -> None:
    """Test CREATE TABLE ... LIKE keeps its tail as options."""
    table = parse_statement("CREATE TABLE t2 LIKE t1;")

    assert table.elements is None
    assert serialize(table, MYSQL) == "CREATE TABLE t2 LIKE t1"


@pytest.mark.parametrize(
    ("sql", "reason"),
    [
        ("CREATE TABLE `unterminated (id INT);", "unexpected character"),
        ("CREATE TABLE t (id INT;", "unbalanced"),
        ("CREATE TABLE t ();", "empty column list"),
        ("CREATE TABLE (id INT);", "missing table name"),
        ("CREATE INDEX i ON t (id);", "not a CREATE TABLE"),
        ("DROP TABLE t;", "not a CREATE statement"),
        ("CREATE TABLE t (id);", "has no type"),
    ],
)
def test_parse_rejects_malformed_statements(sql: str, reason: str) -> None:
    """Test malformed definitions raise with a reason."""
    with pytest.raises(StatementParseError) as excinfo:
        parse_statement(sql)

    assert reason in excinfo.value.reason
    assert excinfo.value.statement == sql


def test_tokenize_records_spacing() -> None:
    """Test tokens remember whether whitespace preceded them."""
    tokens = tokenize_statement("a  (b,c) /* note */ d")

    assert [(token.value, token.spaced) for token in tokens] == [
        ("a", False),
        ("(", True),
        ("b", False),
        (",", False),
        ("c", False),
        (")", False),
        ("d", True),
    ]


def test_references_collect_table_and_column_level_keys() -> None:
    """Test both reference forms produce de-duplicated edges in source order."""
    table = parse_statement(
        "CREATE TABLE a ("
        " b_id INT REFERENCES b(id),"
        " c_id INT,"
        " FOREIGN KEY (c_id) REFERENCES shop.c (id),"
        " FOREIGN KEY (b_id) REFERENCES b (id)"
        ");",
    )

    assert extract_dependencies(table) == ("b", "c")


def test_table_without_foreign_keys_has_no_dependencies() -> None:
    """Test an empty tuple rather than a missing entry."""
    assert extract_dependencies(parse_statement("CREATE TABLE t (id INT);")) == ()


def test_constraint_kind_without_symbol() -> None:
    """Test CONSTRAINT may be followed directly by the constraint keyword."""
    table = parse_statement("CREATE TABLE t (id INT, CONSTRAINT PRIMARY KEY (id));")
    constraint = table.constraints[0]

    assert isinstance(constraint, TableConstraint)
    assert constraint.kind == "PRIMARY KEY"


def test_serialize_mysql_round_trip() -> None:
    """Test MySQL output keeps every element, one per line."""
    result = serialize(parse_statement(ORDERS), MYSQL)

    assert result == (
        "CREATE TABLE `orders` (\n"
        "  `id` INT(11) NOT NULL AUTO_INCREMENT,\n"
        "  `customer_id` INT NOT NULL,\n"
        "  `status` ENUM('new', 'paid') DEFAULT 'new' COMMENT 'lifecycle',\n"
        "  PRIMARY KEY (`id`),\n"
        "  KEY `idx_customer` (`customer_id`),\n"
        "  UNIQUE KEY `uq_status` (`status`) USING BTREE,\n"
        "  CONSTRAINT `fk_customer` FOREIGN KEY (`customer_id`) REFERENCES `customers` (`id`)\n"
        ") ENGINE=InnoDB DEFAULT CHARSET=latin1"
    )


def test_serialize_postgres_translation() -> None:
    """Test MySQL-only constructs are translated or dropped for PostgreSQL."""
    result = serialize(parse_statement(ORDERS), POSTGRES)

    assert result == (
        'CREATE TABLE "orders" (\n'
        '  "id" INTEGER NOT NULL GENERATED BY DEFAULT AS IDENTITY,\n'
        '  "customer_id" INTEGER NOT NULL,\n'
        "  \"status\" TEXT DEFAULT 'new',\n"
        '  PRIMARY KEY ("id"),\n'
        '  UNIQUE ("status"),\n'
        '  CONSTRAINT "fk_customer" FOREIGN KEY ("customer_id") REFERENCES "customers" ("id")\n'
        ")"
    )


def test_serialize_postgres_drops_on_update_clock() -> None:
    """Test ON UPDATE CURRENT_TIMESTAMP disappears but ON UPDATE CASCADE stays."""
    table = parse_statement(
        "CREATE TABLE t ("
        " changed DATETIME DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,"
        " owner_id INT REFERENCES owners (id) ON UPDATE CASCADE"
        ");",
    )

    result = serialize(table, POSTGRES)

    assert "changed TIMESTAMP DEFAULT CURRENT_TIMESTAMP,\n" in result
    assert "owner_id INTEGER REFERENCES owners (id) ON UPDATE CASCADE\n" in result
