"""
Payroll/billing table catalog.

The database is owned by the payroll application; the assistant only
reads it. This catalog is the whitelist of tables and columns the LLM is
told about and the SQL validator accepts.
"""
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class TableSpec:
    """A table and the columns exposed to the LLM."""
    name: str
    columns: Tuple[str, ...]

    def describe(self) -> str:
        """Compact prompt form, e.g. 'items(id, name, total)'."""
        return f"{self.name}({', '.join(self.columns)})"


PAYROLL_TABLES: List[TableSpec] = [
    TableSpec("employees", ("id", "full_name", "email", "employee_position_id", "status")),
    TableSpec("employee_contracts", ("id", "employee_id", "type", "salary", "start_date", "end_date", "status")),
    TableSpec("contract_salary_history", ("employee_contract_id", "salary", "start_date", "end_date")),
    TableSpec("payrolls", ("id", "start_date", "end_date", "total_payment")),
    TableSpec(
        "payroll_details",
        ("id", "payroll_id", "employee_id", "worked_days", "incomes_total",
         "deductions_total", "total", "overtime_surcharge_hours"),
    ),
    TableSpec(
        "payroll_consolidated",
        ("employee_id", "worked_days", "incomes_total", "deductions_total",
         "total", "start_date", "end_date"),
    ),
    TableSpec("payments", ("id", "contact_id", "total", "document_date")),
    TableSpec(
        "documents",
        ("id", "contact_id", "total", "document_date", "pending",
         "document_type_id", "document_status_id"),
    ),
    TableSpec("contacts", ("id", "full_name", "client", "provider")),
    TableSpec("items", ("id", "name", "total")),
]


def describe_catalog(tables: List[TableSpec] = None) -> str:
    """Join every table description for the SQL prompt."""
    return ", ".join(table.describe() for table in (tables or PAYROLL_TABLES))


def table_names(tables: List[TableSpec] = None) -> List[str]:
    return [table.name for table in (tables or PAYROLL_TABLES)]
