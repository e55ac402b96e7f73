"""
Chat Processor - Rule-based answers to payroll and billing questions.

The processor maps a question to an intent (see intents.py), runs the
matching parameterized query and renders a canned Spanish answer. No LLM
is involved, which makes this path cheap and deterministic.
"""
from datetime import date
from typing import Callable, Dict, Optional

from nilo.analytics.formatter import format_currency, format_number
from nilo.chat.intents import Intent, IntentMatch, IntentMatcher, EMPLOYEE_INTENTS
from nilo.core.logging_config import get_logger
from nilo.database.queries import PayrollQueries, previous_month

logger = get_logger(__name__)

UNKNOWN_QUESTION = "Lo siento, no entiendo tu pregunta. ¿Podrías darme más detalles o reformularla?"
MISSING_EMPLOYEE = "¿De qué empleado quieres saberlo? Escribe su nombre en la pregunta."


def _number(value) -> float:
    """Numeric cell as float; NULL aggregates count as zero."""
    if value is None:
        return 0.0
    return float(value)


def _percentage(part: float, whole: float) -> str:
    if not whole:
        return "0"
    return f"{part / whole * 100:.2f}"


class ChatProcessor:
    """
    Answers keyword-matched questions from the payroll/billing database.

    The reference date ("este mes", "el mes pasado") is fixed when the
    processor is created.

    Example:
        >>> processor = ChatProcessor(today=date(2024, 3, 15))
        >>> processor.process_question("¿Cuántos empleados activos hay?")
        'Actualmente tienes 12 empleados activos.'
    """

    def __init__(
        self,
        queries: Optional[PayrollQueries] = None,
        today: Optional[date] = None,
        matcher: Optional[IntentMatcher] = None
    ):
        self.queries = queries or PayrollQueries()
        self.current_date = today or date.today()
        self.matcher = matcher or IntentMatcher()

        self._handlers: Dict[Intent, Callable[..., str]] = {
            Intent.TOP_CLIENTS: self._top_clients,
            Intent.YEAR_TO_DATE_REVENUE: self._year_to_date_revenue,
            Intent.MONTHLY_COMPARISON: self._monthly_comparison,
            Intent.TOP_DEBTORS: self._top_debtors,
            Intent.COLLECTION_VS_BILLING: self._collection_vs_billing,
            Intent.TOP_PAID_EMPLOYEES: self._top_paid_employees,
            Intent.LAST_MONTH_PAYROLL: self._last_month_payroll,
            Intent.ACTIVE_EMPLOYEES: self._active_employees,
            Intent.AVERAGE_SALARY: self._average_salary,
            Intent.NEW_CONTRACTS: self._new_contracts,
            Intent.EMPLOYEE_YEARLY_PAYMENTS: self._employee_yearly_payments,
            Intent.EMPLOYEE_DEDUCTIONS: self._employee_deductions,
            Intent.EMPLOYEE_OVERTIME: self._employee_overtime,
            Intent.WORKED_DAYS: self._worked_days,
            Intent.EMPLOYEE_CONTRACT_TYPE: self._employee_contract_type,
        }

    @property
    def month(self) -> int:
        return self.current_date.month

    @property
    def year(self) -> int:
        return self.current_date.year

    def process_question(self, question: str) -> str:
        """
        Answer a question with the matching canned response.

        Args:
            question: User question in Spanish

        Returns:
            Answer text

        Raises:
            DatabaseError: If a query fails
        """
        match = self.matcher.match(question)
        logger.info(f"Rule-based question: intent={match.intent.value}")

        if match.intent == Intent.UNKNOWN:
            return UNKNOWN_QUESTION

        handler = self._handlers[match.intent]

        if match.intent in EMPLOYEE_INTENTS:
            return self._for_employee(match, handler)

        return handler()

    def _for_employee(self, match: IntentMatch, handler: Callable[[int, str], str]) -> str:
        name = match.employee_name
        if not name:
            return MISSING_EMPLOYEE

        employees = self.queries.employee_by_name(name)
        if not employees:
            return f'No encontré a un empleado llamado "{name}".'

        return handler(employees[0]["id"], name)

    # Billing

    def _top_clients(self) -> str:
        rows = self.queries.top_clients_by_revenue(self.month, self.year)
        if not rows:
            return "No hay datos de clientes para el mes actual."

        response = "Los clientes que más ingresos han generado este mes son:\n\n"
        for index, row in enumerate(rows, start=1):
            response += f"{index}. {row['full_name']}: {format_currency(row['total_revenue'])}\n"
        return response

    def _year_to_date_revenue(self) -> str:
        rows = self.queries.year_to_date_revenue(self.year)
        total = _number(rows[0]["total_revenue"]) if rows else 0
        return (
            f"La facturación total del año {self.year} hasta la fecha es de "
            f"{format_currency(total)}."
        )

    def _monthly_comparison(self) -> str:
        rows = self.queries.monthly_comparison(self.month, self.year)
        if len(rows) < 2:
            return "No hay suficientes datos para hacer la comparación."

        current = next(
            (_number(r["total_revenue"]) for r in rows if int(r["month"]) == self.month), 0.0
        )
        previous = next(
            (_number(r["total_revenue"]) for r in rows if int(r["month"]) != self.month), 0.0
        )
        difference = current - previous
        trend = "aumentaron" if difference >= 0 else "disminuyeron"

        return (
            f"Las ventas del mes actual ({format_currency(current)}) {trend} un "
            f"{_percentage(difference, previous)}% con respecto al mes anterior "
            f"({format_currency(previous)})."
        )

    def _top_debtors(self) -> str:
        rows = self.queries.top_debtors()
        if not rows:
            return "No hay clientes con deudas pendientes."

        response = "Los clientes con mayores deudas pendientes son:\n\n"
        for index, row in enumerate(rows, start=1):
            response += f"{index}. {row['full_name']}: {format_currency(row['total_debt'])}\n"
        return response

    def _collection_vs_billing(self) -> str:
        rows = self.queries.monthly_collection_vs_billing(self.month, self.year)
        row = rows[0] if rows else {}
        billing = _number(row.get("total_billing"))
        collection = _number(row.get("total_collection"))

        return (
            f"En el mes actual:\n"
            f"Facturación: {format_currency(billing)}\n"
            f"Recaudo: {format_currency(collection)}\n"
            f"Porcentaje de recaudo: {_percentage(collection, billing)}%"
        )

    # Payroll

    def _top_paid_employees(self) -> str:
        rows = self.queries.top_paid_employees()
        if not rows:
            return "No hay datos de empleados disponibles."

        response = "Los 3 empleados que mejor ganan son:\n\n"
        for index, row in enumerate(rows, start=1):
            response += f"{index}. {row['full_name']}: {format_currency(row['salary'])}\n"
        return response

    def _last_month_payroll(self) -> str:
        month, year = previous_month(self.month, self.year)
        rows = self.queries.last_month_payroll(month, year)
        total = _number(rows[0]["total_payroll"]) if rows else 0
        return f"El total pagado en nómina el mes pasado fue de {format_currency(total)}."

    def _active_employees(self) -> str:
        rows = self.queries.active_employees()
        count = int(_number(rows[0]["active_count"])) if rows else 0
        return f"Actualmente tienes {count} empleados activos."

    def _average_salary(self) -> str:
        rows = self.queries.average_salary()
        average = _number(rows[0]["avg_salary"]) if rows else 0
        return f"El salario promedio de tus empleados es de {format_currency(average)}."

    def _new_contracts(self) -> str:
        rows = self.queries.new_contracts(self.month, self.year)
        count = int(_number(rows[0]["new_contracts"])) if rows else 0
        return f"Este mes se han registrado {count} nuevos contratos."

    def _employee_yearly_payments(self, employee_id: int, name: str) -> str:
        rows = self.queries.employee_yearly_payments(employee_id, self.year)
        total = _number(rows[0]["total_payments"]) if rows else 0
        return f"Se le ha pagado a {name} un total de {format_currency(total)} este año."

    def _employee_deductions(self, employee_id: int, name: str) -> str:
        rows = self.queries.employee_monthly_deductions(employee_id, self.month, self.year)
        if not rows:
            return f"No hay datos de deducciones para {name} este mes."

        deductions = _number(rows[0]["deductions"])
        return f"Las deducciones de {name} este mes fueron de {format_currency(deductions)}."

    def _employee_overtime(self, employee_id: int, name: str) -> str:
        rows = self.queries.employee_overtime(employee_id, self.month, self.year)
        if not rows:
            return f"No hay datos de horas extras para {name} este mes."

        hours = f"{_number(rows[0]['overtime_surcharge_hours']):g}"
        return f"{name} registró {hours} horas extras este mes."

    def _worked_days(self) -> str:
        rows = self.queries.employee_worked_days(self.month, self.year)
        if not rows:
            return "No hay datos de días trabajados para este mes."

        response = "Días trabajados por cada empleado este mes:\n\n"
        for row in rows:
            response += f"{row['full_name']}: {format_number(_number(row['worked_days']))} días\n"
        return response

    def _employee_contract_type(self, employee_id: int, name: str) -> str:
        rows = self.queries.employee_contract_type(employee_id)
        if not rows:
            return f"{name} no tiene un contrato activo."

        contract_type = rows[0]["type"] or "Desconocido"
        return f"El tipo de contrato de {name} es: {contract_type}."
