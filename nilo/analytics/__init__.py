"""
Analytics Package - Formatting of query results and amounts.

Example:
    >>> from nilo.analytics import ResultFormatter, format_currency
    >>> format_currency(2500000)
    '$ 2.500.000,00'
"""
from nilo.analytics.formatter import (
    ResultFormatter,
    format_currency,
    format_number,
    format_value,
    NO_RESULTS,
)

__all__ = [
    "ResultFormatter",
    "format_currency",
    "format_number",
    "format_value",
    "NO_RESULTS",
]
