"""
Intent Matcher - Keyword rules for payroll and billing questions.

Questions are lower-cased and checked against keyword rules in a fixed
order; the first rule that matches wins. Some questions match several
rules ("¿Qué empleados que más ganan...?" also mentions "empleados"), so
the order is part of the behaviour.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from nilo.core.logging_config import get_logger

logger = get_logger(__name__)


class Intent(str, Enum):
    """Questions the rule-based assistant knows how to answer."""
    TOP_CLIENTS = "top_clients"
    YEAR_TO_DATE_REVENUE = "year_to_date_revenue"
    MONTHLY_COMPARISON = "monthly_comparison"
    TOP_DEBTORS = "top_debtors"
    COLLECTION_VS_BILLING = "collection_vs_billing"
    TOP_PAID_EMPLOYEES = "top_paid_employees"
    LAST_MONTH_PAYROLL = "last_month_payroll"
    ACTIVE_EMPLOYEES = "active_employees"
    AVERAGE_SALARY = "average_salary"
    NEW_CONTRACTS = "new_contracts"
    EMPLOYEE_YEARLY_PAYMENTS = "employee_yearly_payments"
    EMPLOYEE_DEDUCTIONS = "employee_deductions"
    EMPLOYEE_OVERTIME = "employee_overtime"
    WORKED_DAYS = "worked_days"
    EMPLOYEE_CONTRACT_TYPE = "employee_contract_type"
    UNKNOWN = "unknown"


# Intents answered for one employee named in the question
EMPLOYEE_INTENTS = frozenset({
    Intent.EMPLOYEE_YEARLY_PAYMENTS,
    Intent.EMPLOYEE_DEDUCTIONS,
    Intent.EMPLOYEE_OVERTIME,
    Intent.EMPLOYEE_CONTRACT_TYPE,
})

# Words after which an employee name usually follows
NAME_MARKER_PATTERN = re.compile(
    r"\b(?:a|al|de|del|para|tiene|tuvo|hizo|registró|lleva)\s+",
    re.IGNORECASE
)
WORD_PATTERN = re.compile(r"[^\W\d_]+")

# A name ends at the first of these words
NAME_STOPWORDS = frozenset({
    "a", "al", "de", "del", "el", "la", "los", "las", "en", "y", "o", "por",
    "para", "con", "que", "su", "sus", "es", "fue", "fueron", "ha", "han",
    "este", "esta", "mes", "año", "semana", "hoy", "actual", "pasado",
    "anterior", "último", "durante", "hasta", "ahora", "favor", "tipo",
    "contrato", "descuentos", "descuento", "horas", "extras", "pagado",
    "tiene", "tuvo", "hizo", "registró", "lleva", "cuánto", "cuántas",
    "cuántos", "cuál", "qué", "empleado", "empleada", "trabajador",
    "trabajadora",
})

# Role words and honorifics that may come between a marker and the name,
# as in "al empleado Juan Pérez"
TITLE_WORDS = frozenset({
    "empleado", "empleada", "trabajador", "trabajadora", "señor", "señora",
    "sr", "sra", "don", "doña",
})


@dataclass(frozen=True)
class IntentMatch:
    """Matched intent and, for per-employee intents, the employee name."""
    intent: Intent
    employee_name: Optional[str] = None


def _has_any(text: str, *keywords: str) -> bool:
    return any(keyword in text for keyword in keywords)


def extract_employee_name(question: str) -> Optional[str]:
    """
    Find the employee name in a question.

    The name is the run of words after the last marker ("a", "de",
    "tiene"...) up to the first stopword, skipping a leading role word
    such as "empleado". Markers are tried from the end
    of the question backwards until one is followed by a name.

    >>> extract_employee_name("¿Cuáles son los descuentos de Juan Pérez este mes?")
    'Juan Pérez'
    """
    markers = list(NAME_MARKER_PATTERN.finditer(question))

    for marker in reversed(markers):
        words = []
        for word in WORD_PATTERN.findall(question[marker.end():]):
            if not words and word.lower() in TITLE_WORDS:
                continue
            if word.lower() in NAME_STOPWORDS:
                break
            words.append(word)
        if words:
            return " ".join(words)

    return None


class IntentMatcher:
    """
    Selects the intent of a Spanish question from keyword rules.

    Example:
        >>> matcher = IntentMatcher()
        >>> matcher.match("¿Cuál es el salario promedio?").intent
        <Intent.AVERAGE_SALARY: 'average_salary'>
    """

    def __init__(self):
        # Evaluated in order; first match wins
        self.rules: List[Tuple[Intent, Callable[[str], bool]]] = [
            # Billing
            (Intent.TOP_CLIENTS,
             lambda q: _has_any(q, "mejor ingreso", "clientes que más", "mayor ingreso")),
            (Intent.YEAR_TO_DATE_REVENUE,
             lambda q: "facturado" in q and _has_any(q, "año", "hasta ahora")),
            (Intent.MONTHLY_COMPARISON,
             lambda q: "ventas" in q and _has_any(q, "mes anterior", "comparación")),
            (Intent.TOP_DEBTORS,
             lambda q: _has_any(q, "deben", "cartera", "deudas")),
            (Intent.COLLECTION_VS_BILLING,
             lambda q: "recaudo" in q and _has_any(q, "ventas", "facturación")),
            # Payroll
            (Intent.TOP_PAID_EMPLOYEES,
             lambda q: _has_any(q, "mejor ganan", "empleados que más ganan")),
            (Intent.LAST_MONTH_PAYROLL,
             lambda q: "nómina" in q and _has_any(q, "mes pasado", "último mes")),
            (Intent.ACTIVE_EMPLOYEES,
             lambda q: "empleados" in q and _has_any(q, "activos", "cantidad")),
            (Intent.AVERAGE_SALARY,
             lambda q: "salario promedio" in q),
            (Intent.NEW_CONTRACTS,
             lambda q: _has_any(q, "contratos nuevos", "nuevos contratos")),
            (Intent.EMPLOYEE_YEARLY_PAYMENTS,
             lambda q: "pagado" in q and "año" in q and extract_employee_name(q) is not None),
            (Intent.EMPLOYEE_DEDUCTIONS,
             lambda q: "descuentos" in q),
            (Intent.EMPLOYEE_OVERTIME,
             lambda q: "horas extras" in q),
            (Intent.WORKED_DAYS,
             lambda q: _has_any(q, "días trabajó", "días trabajados")),
            (Intent.EMPLOYEE_CONTRACT_TYPE,
             lambda q: "tipo de contrato" in q),
        ]

    def match(self, question: str) -> IntentMatch:
        """
        Classify a question.

        Args:
            question: Raw user question

        Returns:
            IntentMatch; UNKNOWN when no rule applies
        """
        lowered = (question or "").lower()

        for intent, rule in self.rules:
            if rule(lowered):
                employee_name = None
                if intent in EMPLOYEE_INTENTS:
                    employee_name = extract_employee_name(question)
                logger.debug(f"Intent matched: {intent.value} (employee={employee_name})")
                return IntentMatch(intent=intent, employee_name=employee_name)

        logger.debug("No intent matched")
        return IntentMatch(intent=Intent.UNKNOWN)
