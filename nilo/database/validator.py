"""
SQL Validator - Ensures SQL is safe to execute.

This module validates SQL queries for:
- A single SELECT statement (no mutations)
- Allowed tables (the payroll catalog)
- A bounded LIMIT clause

Both LLM-generated SQL and the raw query endpoint go through it.
"""
import re
from typing import List, Set, Optional, Tuple
from dataclasses import dataclass, field

from sqlalchemy.engine import make_url

from nilo.core.logging_config import get_logger
from nilo.database.schema import table_names

logger = get_logger(__name__)

# Keywords that should never appear in a read-only query
FORBIDDEN_KEYWORDS = (
    "DROP", "DELETE", "UPDATE", "INSERT", "ALTER", "CREATE", "TRUNCATE",
    "GRANT", "REVOKE", "EXEC", "EXECUTE", "MERGE", "CALL", "HANDLER",
    "INTO OUTFILE", "INTO DUMPFILE", "LOAD_FILE", "SLEEP", "BENCHMARK",
)

DEFAULT_MAX_LIMIT = 100

IDENTIFIER = r'(?:`[^`]+`|"[^"]+"|[a-zA-Z0-9_$]+)'
QUALIFIED_NAME = rf'{IDENTIFIER}(?:\s*\.\s*{IDENTIFIER})?'

# Everything between FROM and the next clause keyword, e.g. "employees e, contacts c"
FROM_CLAUSE_PATTERN = re.compile(
    r'\bFROM\b(.*?)(?=\b(?:WHERE|GROUP|ORDER|HAVING|LIMIT|UNION|WINDOW|FOR|LOCK|SELECT|FROM|'
    r'JOIN|STRAIGHT_JOIN|INNER|LEFT|RIGHT|CROSS|FULL|NATURAL|ON|USING)\b|[()]|$)',
    re.IGNORECASE | re.DOTALL
)
JOIN_PATTERN = re.compile(rf'\b(?:JOIN|STRAIGHT_JOIN)\s+({QUALIFIED_NAME})', re.IGNORECASE)
TABLE_REFERENCE_PATTERN = re.compile(rf'\s*({QUALIFIED_NAME})')
# EXTRACT(YEAR FROM col) would otherwise look like a table reference
EXTRACT_PATTERN = re.compile(r'\bEXTRACT\s*\([^)]*\)', re.IGNORECASE)
# LIMIT count, LIMIT count OFFSET n, or MySQL's LIMIT offset, count
LIMIT_PATTERN = re.compile(r'\bLIMIT\s+(\d+)(?:\s*,\s*(\d+))?', re.IGNORECASE)


@dataclass
class ValidationResult:
    """Result of SQL validation."""
    is_valid: bool
    sql: str  # Possibly modified SQL (trailing semicolon removed, LIMIT capped)
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class SQLValidator:
    """
    Validates SQL queries for safety before execution.

    Example:
        >>> validator = SQLValidator(allowed_tables={"employees"})
        >>> validator.validate("SELECT * FROM employees;").sql
        'SELECT * FROM employees LIMIT 100'
    """

    def __init__(
        self,
        allowed_tables: Optional[Set[str]] = None,
        max_limit: int = DEFAULT_MAX_LIMIT,
        schema: Optional[str] = None
    ):
        """
        Args:
            allowed_tables: Table names that can be queried. Empty allows all.
            max_limit: Largest LIMIT accepted; added when missing
            schema: Current database name. Qualified names must use it.
        """
        self.allowed_tables = {t.lower() for t in (allowed_tables or set())}
        self.max_limit = max_limit
        self.schema = schema.lower() if schema else None

    def validate(self, sql: str) -> ValidationResult:
        """
        Validate an SQL query for safety.

        Args:
            sql: The SQL query to validate

        Returns:
            ValidationResult with is_valid, sql (possibly modified), error message
        """
        if not sql or not sql.strip():
            return ValidationResult(is_valid=False, sql=sql or "", error="Empty SQL query")

        sql = sql.strip().rstrip(";").strip()

        if ";" in sql:
            return ValidationResult(
                is_valid=False,
                sql=sql,
                error="Only a single statement is allowed"
            )

        if not sql.upper().startswith("SELECT"):
            return ValidationResult(
                is_valid=False,
                sql=sql,
                error="Only SELECT statements are allowed"
            )

        forbidden = self._check_forbidden_keywords(sql)
        if forbidden:
            return ValidationResult(
                is_valid=False,
                sql=sql,
                error=f"Forbidden SQL keyword detected: {forbidden}"
            )

        if self.allowed_tables:
            table_error = self._check_allowed_tables(sql)
            if table_error:
                return ValidationResult(is_valid=False, sql=sql, error=table_error)

        warnings = []
        sql, limit_added = self._ensure_limit(sql)
        if limit_added:
            warnings.append(f"Added LIMIT {self.max_limit} for safety")

        logger.debug(f"SQL validation passed: {sql[:80]}")

        return ValidationResult(is_valid=True, sql=sql, warnings=warnings)

    def _check_forbidden_keywords(self, sql: str) -> Optional[str]:
        """Returns the first forbidden keyword found, if any."""
        sql_upper = sql.upper()

        for keyword in FORBIDDEN_KEYWORDS:
            pattern = r'\b' + keyword.replace(" ", r"\s+") + r'\b'
            if re.search(pattern, sql_upper):
                logger.warning(f"Forbidden keyword detected: {keyword}")
                return keyword

        return None

    def _check_allowed_tables(self, sql: str) -> Optional[str]:
        """Returns an error message if a table outside the catalog is used."""
        invalid_tables = set()
        for reference in self._table_references(sql):
            parts = [part.strip().strip('`"').lower() for part in re.split(r'\s*\.\s*', reference)]
            table = parts[-1]
            if len(parts) > 1 and parts[0] != self.schema:
                invalid_tables.add(".".join(parts))
            elif table not in self.allowed_tables:
                invalid_tables.add(table)

        if invalid_tables:
            logger.warning(f"SQL references unknown tables: {sorted(invalid_tables)}")
            return f"Table not allowed: {', '.join(sorted(invalid_tables))}"

        return None

    @staticmethod
    def _table_references(sql: str) -> List[str]:
        """Every table named in a FROM list or after a JOIN, possibly schema-qualified."""
        scan = EXTRACT_PATTERN.sub("", sql)
        references = []

        for clause in FROM_CLAUSE_PATTERN.finditer(scan):
            for item in clause.group(1).split(","):
                match = TABLE_REFERENCE_PATTERN.match(item)
                if match:
                    references.append(match.group(1))

        references.extend(match.group(1) for match in JOIN_PATTERN.finditer(scan))
        return references

    def _ensure_limit(self, sql: str) -> Tuple[str, bool]:
        """
        Ensure SQL has a bounded LIMIT clause.

        Returns:
            Tuple of (sql, was_limit_added)
        """
        if LIMIT_PATTERN.search(sql):
            return LIMIT_PATTERN.sub(self._cap_limit, sql), False

        return f"{sql} LIMIT {self.max_limit}", True

    def _cap_limit(self, match: re.Match) -> str:
        if match.group(2) is not None:
            offset, count = match.group(1), int(match.group(2))
        else:
            offset, count = None, int(match.group(1))

        if count <= self.max_limit:
            return match.group(0)

        logger.warning(f"Reduced LIMIT from {count} to {self.max_limit}")
        if offset is not None:
            return f"LIMIT {offset}, {self.max_limit}"
        return f"LIMIT {self.max_limit}"


def catalog_validator(database_url: str, max_limit: int = DEFAULT_MAX_LIMIT) -> SQLValidator:
    """Validator restricted to the payroll catalog of the configured database."""
    return SQLValidator(
        allowed_tables=set(table_names()),
        max_limit=max_limit,
        schema=make_url(database_url).database
    )
