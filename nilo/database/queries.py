"""
Payroll and billing queries used by the rule-based assistant.

Every statement is parameterized; values never get formatted into the SQL
text. Dates are matched with MONTH()/YEAR() as the payroll database is
MySQL.
"""
from typing import Any, Dict, List, Optional

from nilo.core.exceptions import DatabaseError
from nilo.core.logging_config import get_logger
from nilo.database.executor import QueryExecutor

logger = get_logger(__name__)

# document_type_id / document_status_id conventions of the billing schema
SALES_INVOICE = 1
VALID_DOCUMENT = 1
ACTIVE = 1

Row = Dict[str, Any]


def previous_month(month: int, year: int) -> tuple:
    """Month before (month, year); January rolls back to December."""
    if month == 1:
        return 12, year - 1
    return month - 1, year


class PayrollQueries:
    """
    Parameterized query library over the payroll/billing schema.

    Example:
        >>> queries = PayrollQueries()
        >>> queries.active_employees()
        [{'active_count': 12}]
    """

    def __init__(self, executor: Optional[QueryExecutor] = None):
        self.executor = executor or QueryExecutor()

    def _run(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Row]:
        result = self.executor.execute(sql, params)
        if not result.success:
            raise DatabaseError(f"Query failed: {result.error}")
        return result.data

    # Billing

    def top_clients_by_revenue(self, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT
                c.id,
                c.full_name,
                SUM(d.total) AS total_revenue
            FROM documents d
            JOIN contacts c ON d.contact_id = c.id
            WHERE
                d.document_type_id = :document_type
                AND MONTH(d.document_date) = :month
                AND YEAR(d.document_date) = :year
                AND d.document_status_id = :document_status
            GROUP BY c.id, c.full_name
            ORDER BY total_revenue DESC
            LIMIT 10
            """,
            {
                "document_type": SALES_INVOICE,
                "document_status": VALID_DOCUMENT,
                "month": month,
                "year": year,
            },
        )

    def year_to_date_revenue(self, year: int) -> List[Row]:
        return self._run(
            """
            SELECT SUM(total) AS total_revenue
            FROM documents
            WHERE
                document_type_id = :document_type
                AND YEAR(document_date) = :year
                AND document_status_id = :document_status
            """,
            {"document_type": SALES_INVOICE, "document_status": VALID_DOCUMENT, "year": year},
        )

    def monthly_comparison(self, month: int, year: int) -> List[Row]:
        """Invoice totals of (month, year) and of the month before it."""
        prev_month, prev_year = previous_month(month, year)
        return self._run(
            """
            SELECT
                MONTH(document_date) AS month,
                SUM(total) AS total_revenue
            FROM documents
            WHERE
                document_type_id = :document_type
                AND (
                    (MONTH(document_date) = :month AND YEAR(document_date) = :year)
                    OR
                    (MONTH(document_date) = :prev_month AND YEAR(document_date) = :prev_year)
                )
                AND document_status_id = :document_status
            GROUP BY MONTH(document_date)
            """,
            {
                "document_type": SALES_INVOICE,
                "document_status": VALID_DOCUMENT,
                "month": month,
                "year": year,
                "prev_month": prev_month,
                "prev_year": prev_year,
            },
        )

    def top_debtors(self) -> List[Row]:
        return self._run(
            """
            SELECT
                c.id,
                c.full_name,
                SUM(d.pending) AS total_debt
            FROM documents d
            JOIN contacts c ON d.contact_id = c.id
            WHERE
                d.document_type_id = :document_type
                AND d.pending > 0
            GROUP BY c.id, c.full_name
            ORDER BY total_debt DESC
            LIMIT 10
            """,
            {"document_type": SALES_INVOICE},
        )

    def monthly_collection_vs_billing(self, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT
                (SELECT SUM(total)
                 FROM documents
                 WHERE document_type_id = :document_type
                 AND MONTH(document_date) = :month
                 AND YEAR(document_date) = :year) AS total_billing,
                (SELECT SUM(total)
                 FROM payments
                 WHERE MONTH(document_date) = :month
                 AND YEAR(document_date) = :year) AS total_collection
            """,
            {"document_type": SALES_INVOICE, "month": month, "year": year},
        )

    # Payroll

    def top_paid_employees(self) -> List[Row]:
        return self._run(
            """
            SELECT
                e.id,
                e.full_name,
                ec.salary
            FROM employees e
            JOIN employee_contracts ec ON e.id = ec.employee_id
            WHERE ec.status = :active
            ORDER BY ec.salary DESC
            LIMIT 3
            """,
            {"active": ACTIVE},
        )

    def last_month_payroll(self, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT SUM(total_payment) AS total_payroll
            FROM payrolls
            WHERE
                MONTH(end_date) = :month
                AND YEAR(end_date) = :year
            """,
            {"month": month, "year": year},
        )

    def active_employees(self) -> List[Row]:
        return self._run(
            "SELECT COUNT(*) AS active_count FROM employees WHERE status = :active",
            {"active": ACTIVE},
        )

    def average_salary(self) -> List[Row]:
        return self._run(
            "SELECT AVG(salary) AS avg_salary FROM employee_contracts WHERE status = :active",
            {"active": ACTIVE},
        )

    def new_contracts(self, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT COUNT(*) AS new_contracts
            FROM employee_contracts
            WHERE
                MONTH(start_date) = :month
                AND YEAR(start_date) = :year
            """,
            {"month": month, "year": year},
        )

    def employee_by_name(self, name: str) -> List[Row]:
        """First employee whose full name contains `name`."""
        return self._run(
            """
            SELECT id, full_name
            FROM employees
            WHERE full_name LIKE :pattern
            LIMIT 1
            """,
            {"pattern": f"%{name}%"},
        )

    def employee_yearly_payments(self, employee_id: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT SUM(pc.total) AS total_payments
            FROM payroll_consolidated pc
            JOIN employees e ON pc.employee_id = e.id
            WHERE
                e.id = :employee_id
                AND YEAR(pc.start_date) = :year
            """,
            {"employee_id": employee_id, "year": year},
        )

    def employee_monthly_deductions(self, employee_id: int, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT pd.deductions_total AS deductions
            FROM payroll_details pd
            JOIN employees e ON pd.employee_id = e.id
            WHERE
                e.id = :employee_id
                AND MONTH(pd.created_at) = :month
                AND YEAR(pd.created_at) = :year
            """,
            {"employee_id": employee_id, "month": month, "year": year},
        )

    def employee_overtime(self, employee_id: int, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT pd.overtime_surcharge_hours
            FROM payroll_details pd
            JOIN employees e ON pd.employee_id = e.id
            WHERE
                e.id = :employee_id
                AND MONTH(pd.created_at) = :month
                AND YEAR(pd.created_at) = :year
            """,
            {"employee_id": employee_id, "month": month, "year": year},
        )

    def employee_worked_days(self, month: int, year: int) -> List[Row]:
        return self._run(
            """
            SELECT
                e.full_name,
                pd.worked_days
            FROM payroll_details pd
            JOIN employees e ON pd.employee_id = e.id
            WHERE
                MONTH(pd.created_at) = :month
                AND YEAR(pd.created_at) = :year
            """,
            {"month": month, "year": year},
        )

    def employee_contract_type(self, employee_id: int) -> List[Row]:
        return self._run(
            """
            SELECT ec.type
            FROM employee_contracts ec
            JOIN employees e ON ec.employee_id = e.id
            WHERE
                e.id = :employee_id
                AND ec.status = :active
            """,
            {"employee_id": employee_id, "active": ACTIVE},
        )
