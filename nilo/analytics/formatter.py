"""
Result Formatter - Render query results and amounts for Spanish readers.

Numbers follow the es-CO convention: "." groups thousands and "," marks
decimals. Money is Colombian pesos.
"""
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Dict, Any

from nilo.core.logging_config import get_logger

logger = get_logger(__name__)

NO_RESULTS = "No se encontraron resultados."
MISSING_VALUE = "sin dato"


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def format_number(value, min_decimals: int = 0, max_decimals: int = 3) -> str:
    """
    Format a number with es-CO separators.

    >>> format_number(1234567.891)
    '1.234.567,891'
    >>> format_number(2500)
    '2.500'
    """
    amount = _to_decimal(value).quantize(Decimal(1).scaleb(-max_decimals), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""

    text = f"{abs(amount):,.{max_decimals}f}"
    if max_decimals:
        int_part, fraction = text.split(".")
    else:
        int_part, fraction = text, ""

    fraction = fraction.rstrip("0")
    if len(fraction) < min_decimals:
        fraction = fraction.ljust(min_decimals, "0")

    int_part = int_part.replace(",", ".")
    return f"{sign}{int_part},{fraction}" if fraction else f"{sign}{int_part}"


def format_currency(amount) -> str:
    """
    Format an amount as Colombian pesos.

    >>> format_currency(1500000)
    '$ 1.500.000,00'
    """
    text = format_number(amount or 0, min_decimals=2, max_decimals=2)
    if text.startswith("-"):
        return f"-$ {text[1:]}"
    return f"$ {text}"


def format_value(value: Any) -> str:
    """Format a single cell for natural-language output."""
    if value is None:
        return MISSING_VALUE
    if isinstance(value, bool):
        return "sí" if value else "no"
    if isinstance(value, (int, float, Decimal)):
        return format_number(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class ResultFormatter:
    """
    Formats query results for the LLM explanation step and for display.

    Example:
        >>> formatter = ResultFormatter()
        >>> formatter.format_for_humans([{"full_name": "Ana", "total": 1200}])
        'Resultado 1: full name: Ana, total: 1.200'
    """

    def __init__(self, max_rows: int = 20, max_col_width: int = 50):
        """
        Args:
            max_rows: Maximum rows to include in a markdown table
            max_col_width: Maximum cell width before truncation in tables
        """
        self.max_rows = max_rows
        self.max_col_width = max_col_width

    def format_for_humans(self, rows: List[Dict[str, Any]]) -> str:
        """
        Render rows as numbered "label: value" lines.

        Column names lose their underscores; numbers use es-CO separators.
        """
        if not rows:
            return NO_RESULTS

        lines = []
        for index, row in enumerate(rows, start=1):
            entries = ", ".join(
                f"{key.replace('_', ' ')}: {format_value(value)}"
                for key, value in row.items()
            )
            lines.append(f"Resultado {index}: {entries}")

        return "\n".join(lines)

    def format_as_table(self, rows: List[Dict[str, Any]]) -> str:
        """
        Format results as a markdown table.

        Args:
            rows: List of dictionaries (query results)

        Returns:
            Markdown table string
        """
        if not rows:
            return "_Sin datos para mostrar_"

        headers = list(rows[0].keys())
        if not headers:
            return "_Sin columnas_"

        header_row = "| " + " | ".join(headers) + " |"
        separator = "|" + "|".join(["---" for _ in headers]) + "|"

        lines = [header_row, separator]
        for row in rows[:self.max_rows]:
            values = [self._format_cell(row.get(header)) for header in headers]
            lines.append("| " + " | ".join(values) + " |")

        table = "\n".join(lines)

        if len(rows) > self.max_rows:
            table += f"\n\n_Mostrando {self.max_rows} de {len(rows)} filas_"

        return table

    def _format_cell(self, value: Any) -> str:
        str_value = format_value(value)

        if len(str_value) > self.max_col_width:
            str_value = str_value[:self.max_col_width - 3] + "..."

        # Escape pipe characters for markdown
        return str_value.replace("|", "\\|")
