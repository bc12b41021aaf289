"""Tests for the schema dump pipeline."""

from datetime import UTC, datetime

import pytest

from dump import POSTGRES, DanglingReferenceError, DumpOptions, merge_dumps, process_dump

GENERATED_AT = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)

DUMP = """-- MySQL dump
/*!40101 SET NAMES latin1 */;

CREATE TABLE `old_orders` (
  `id` INT NOT NULL,
  `customer_id` INT NOT NULL,
  `note` TINYTEXT,
  PRIMARY KEY (`id`),
  CONSTRAINT `fk_orders_customer` FOREIGN KEY (`customer_id`) REFERENCES `old_customers` (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=latin1;

CREATE TABLE `old_customers` (
  `id` INT NOT NULL,
  `name` VARCHAR(80) NOT NULL,
  PRIMARY KEY (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=latin1;

INSERT INTO `old_customers` VALUES (1,'Ada');
"""


def test_process_dump_without_merge_keeps_input_order() -> None:
    """Test statements stay in input order unless merging."""
    result = process_dump(DUMP, DumpOptions(strip_prefix="old_", generated_at=GENERATED_AT))

    assert [statement.table for statement in result.statements] == [None, "orders", "customers", None]
    assert result.unresolved == []


def test_process_dump_with_merge_orders_definitions() -> None:
    """Test merge mode puts referenced tables first and passthrough last."""
    result = process_dump(
        DUMP,
        DumpOptions(strip_prefix="old_", merge=True, generated_at=GENERATED_AT),
    )

    assert [statement.table for statement in result.statements] == ["customers", "orders", None, None]
    assert result.document.index("CREATE TABLE `customers`") < result.document.index(
        "CREATE TABLE `orders`",
    )


def test_process_dump_document_content() -> None:
    """Test the assembled document carries rewritten definitions and pragmas."""
    result = process_dump(DUMP, DumpOptions(strip_prefix="old_", generated_at=GENERATED_AT))
    document = result.document

    assert document.startswith("-- Generated by DB Blender\n-- Timestamp: 2024-01-02T03:04:05.000Z\n")
    assert "  `note` VARCHAR(255) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci,\n" in document
    assert "REFERENCES `customers` (`id`)" in document
    assert ") ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;\n" in document
    # Passthrough statements keep their original text
    assert "INSERT INTO `old_customers` VALUES (1,'Ada');\n" in document
    assert document.endswith("SET FOREIGN_KEY_CHECKS = 1;\n")


def test_process_dump_registers_tables() -> None:
    """Test the run's context holds the rewritten definitions."""
    result = process_dump(DUMP, DumpOptions(strip_prefix="old_"))

    assert list(result.context.tables) == ["orders", "customers"]
    assert result.context.dependencies["orders"] == ("customers",)
    assert [column.name for column in result.context.tables["customers"].columns] == ["id", "name"]


def test_runs_do_not_share_state() -> None:
    """Test each run starts from an empty schema context."""
    first = process_dump("CREATE TABLE a (id INT);", DumpOptions())
    second = process_dump("CREATE TABLE b (id INT);", DumpOptions())

    assert list(first.context.tables) == ["a"]
    assert list(second.context.tables) == ["b"]


def test_merge_dumps_resolves_across_files() -> None:
    """Test a table defined in one dump satisfies references from another."""
    orders = "CREATE TABLE orders (id INT, customer_id INT REFERENCES customers (id));"
    customers = "CREATE TABLE customers (id INT);"

    result = merge_dumps([orders, customers], DumpOptions(strict_references=True))

    assert [statement.table for statement in result.statements] == ["customers", "orders"]


def test_merge_dumps_strict_references() -> None:
    """Test strict merging fails on a reference with no definition."""
    with pytest.raises(DanglingReferenceError):
        merge_dumps(
            ["CREATE TABLE orders (id INT, customer_id INT REFERENCES customers (id));"],
            DumpOptions(strict_references=True),
        )


def test_postgres_output() -> None:
    """Test PostgreSQL output uses its quoting and session settings."""
    result = process_dump(DUMP, DumpOptions(dialect=POSTGRES, generated_at=GENERATED_AT))

    assert "SET client_encoding = 'UTF8';\n" in result.document
    assert 'CREATE TABLE "old_customers" (\n  "id" INTEGER NOT NULL,\n' in result.document
    assert "ENGINE" not in result.document.split("INSERT")[0]
