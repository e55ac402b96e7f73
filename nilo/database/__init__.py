"""
Database module - read-only access to the payroll/billing database.

This module handles:
- Database connection management
- Query execution
- SQL validation
- The static table catalog
- Parameterized payroll/billing queries
"""
from nilo.database.connection import DatabaseConnection, get_database, reset_database
from nilo.database.executor import QueryExecutor, QueryResult
from nilo.database.validator import SQLValidator, ValidationResult
from nilo.database.schema import TableSpec, PAYROLL_TABLES, describe_catalog, table_names
from nilo.database.queries import PayrollQueries

__all__ = [
    # Connection
    "DatabaseConnection",
    "get_database",
    "reset_database",
    # Executor
    "QueryExecutor",
    "QueryResult",
    # Validator
    "SQLValidator",
    "ValidationResult",
    # Catalog
    "TableSpec",
    "PAYROLL_TABLES",
    "describe_catalog",
    "table_names",
    # Queries
    "PayrollQueries",
]
