"""
Query Executor - SQL execution with timing and logging.

Every statement that reaches the database goes through QueryExecutor so
that it is logged and timed in one place.
"""
import time
from typing import Dict, List, Any, Optional
from dataclasses import dataclass, field

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from nilo.database.connection import DatabaseConnection, get_database
from nilo.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class QueryResult:
    """
    Result of a database query.

    Attributes:
        success: Whether the query executed successfully
        data: List of rows as dictionaries
        row_count: Number of rows returned
        columns: List of column names
        execution_time_ms: Query execution time in milliseconds
        error: Error message if query failed
    """
    success: bool
    data: List[Dict[str, Any]] = field(default_factory=list)
    row_count: int = 0
    columns: List[str] = field(default_factory=list)
    execution_time_ms: float = 0.0
    error: Optional[str] = None


class QueryExecutor:
    """
    Executes SQL queries with logging and timing.

    Errors are captured into the QueryResult instead of being raised.

    Example:
        >>> executor = QueryExecutor()
        >>> result = executor.execute("SELECT COUNT(*) AS n FROM employees")
        >>> result.data
        [{'n': 12}]
    """

    def __init__(self, db: Optional[DatabaseConnection] = None):
        self.db = db if db is not None else get_database()

    def execute(
        self,
        sql: str,
        params: Optional[Dict[str, Any]] = None
    ) -> QueryResult:
        """
        Execute a SQL query and return results.

        Args:
            sql: SQL query string (named placeholders, e.g. ":year")
            params: Optional parameters for the placeholders

        Returns:
            QueryResult with data or error
        """
        logger.info(f"Executing query: {' '.join(sql.split())[:100]}")

        start_time = time.perf_counter()

        try:
            with self.db.get_session() as session:
                result = session.execute(text(sql), params or {})

                rows = result.fetchall()
                columns = list(result.keys())

                data = [
                    dict(zip(columns, row))
                    for row in rows
                ]

            execution_time = (time.perf_counter() - start_time) * 1000

            logger.info(
                f"Query completed: {len(data)} rows in {execution_time:.2f}ms"
            )

            return QueryResult(
                success=True,
                data=data,
                row_count=len(data),
                columns=columns,
                execution_time_ms=execution_time,
            )

        except SQLAlchemyError as e:
            execution_time = (time.perf_counter() - start_time) * 1000
            error_msg = str(e)

            logger.error(f"Query failed: {error_msg}")

            return QueryResult(
                success=False,
                execution_time_ms=execution_time,
                error=error_msg,
            )
