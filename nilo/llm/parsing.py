"""
Response parsing for SQL generation.

The model is asked for a single line of SQL but small models still wrap
it in prose or markdown fences, so only the first SELECT statement that
ends in a semicolon is kept.
"""
import re
from typing import Optional

from nilo.core.logging_config import get_logger

logger = get_logger(__name__)

SELECT_STATEMENT_PATTERN = re.compile(r"select[\s\S]*?;", re.IGNORECASE)


def extract_sql(content: Optional[str]) -> Optional[str]:
    """
    Pull the first `SELECT ... ;` statement out of an LLM answer.

    Args:
        content: Raw completion text

    Returns:
        The SQL statement including its trailing semicolon, or None
    """
    if not content:
        return None

    match = SELECT_STATEMENT_PATTERN.search(content)
    if not match:
        logger.debug(f"No SELECT statement in LLM answer: {content[:80]!r}")
        return None

    return match.group(0)
