"""Unit tests: read-only SQL validation."""

from __future__ import annotations

import pytest

from nilo.database.schema import table_names
from nilo.database.validator import SQLValidator, catalog_validator


@pytest.fixture()
def validator() -> SQLValidator:
    return SQLValidator(allowed_tables=set(table_names()), max_limit=100)


def test_accepts_select_and_appends_limit(validator) -> None:
    result = validator.validate("SELECT full_name FROM employees WHERE status = 1;")
    assert result.is_valid
    assert result.sql == "SELECT full_name FROM employees WHERE status = 1 LIMIT 100"
    assert result.warnings


def test_caps_large_limit(validator) -> None:
    result = validator.validate("SELECT * FROM items LIMIT 5000")
    assert result.is_valid
    assert result.sql == "SELECT * FROM items LIMIT 100"


def test_keeps_small_limit(validator) -> None:
    result = validator.validate("SELECT * FROM items LIMIT 5")
    assert result.sql == "SELECT * FROM items LIMIT 5"
    assert result.warnings == []


@pytest.mark.parametrize(
    "sql, expected",
    [
        ("SELECT * FROM employees LIMIT 0, 100000", "SELECT * FROM employees LIMIT 0, 100"),
        ("SELECT * FROM employees LIMIT 20, 5", "SELECT * FROM employees LIMIT 20, 5"),
        ("SELECT * FROM employees LIMIT 500 OFFSET 10", "SELECT * FROM employees LIMIT 100 OFFSET 10"),
    ],
)
def test_caps_row_count_not_offset(validator, sql, expected) -> None:
    assert validator.validate(sql).sql == expected


def test_accepts_joins_over_catalog_tables(validator) -> None:
    sql = (
        "SELECT c.full_name, SUM(d.total) FROM documents d "
        "JOIN contacts c ON d.contact_id = c.id "
        "WHERE EXTRACT(YEAR FROM d.document_date) = 2024 GROUP BY c.full_name;"
    )
    assert validator.validate(sql).is_valid


def test_accepts_comma_separated_catalog_tables(validator) -> None:
    sql = (
        "SELECT e.full_name, ec.salary FROM employees e, employee_contracts ec "
        "WHERE e.id = ec.employee_id"
    )
    assert validator.validate(sql).is_valid


def test_accepts_tables_qualified_with_current_database() -> None:
    validator = SQLValidator(allowed_tables=set(table_names()), schema="payroll")
    assert validator.validate("SELECT * FROM payroll.employees").is_valid
    assert validator.validate("SELECT * FROM `payroll`.`contacts` c JOIN payroll.documents d ON 1 = 1").is_valid

    result = validator.validate("SELECT * FROM employees, mysql.user")
    assert not result.is_valid
    assert result.error == "Table not allowed: mysql.user"


def test_catalog_validator_uses_database_from_url() -> None:
    validator = catalog_validator("mysql+pymysql://nilo:secret@db:3306/payroll", max_limit=50)
    assert validator.schema == "payroll"
    assert validator.max_limit == 50
    assert "employees" in validator.allowed_tables


def test_columns_named_like_keywords_are_allowed(validator) -> None:
    result = validator.validate("SELECT created_at, updated_at FROM payroll_details")
    assert result.is_valid


@pytest.mark.parametrize(
    "sql",
    [
        "",
        "   ",
        "DELETE FROM employees",
        "UPDATE employees SET status = 0",
        "SELECT * FROM employees; DROP TABLE employees",
        "SELECT * FROM employees INTO OUTFILE '/tmp/x'",
        "SELECT SLEEP(10) FROM employees",
        "SELECT * FROM users",
        "SELECT * FROM employees JOIN mysql.user u ON 1 = 1",
        "SELECT * FROM employees, mysql.user",
        "SELECT * FROM employees e, users u WHERE e.id = u.id",
        "SELECT id FROM (SELECT id FROM users) AS t",
    ],
)
def test_rejects_unsafe_sql(validator, sql) -> None:
    result = validator.validate(sql)
    assert not result.is_valid
    assert result.error


def test_without_catalog_any_table_is_allowed() -> None:
    assert SQLValidator().validate("SELECT * FROM anything").is_valid
