"""Unit tests: keyword intent matching and employee name extraction."""

from __future__ import annotations

import pytest

from nilo.chat.intents import Intent, IntentMatch, IntentMatcher, extract_employee_name


@pytest.fixture()
def matcher() -> IntentMatcher:
    return IntentMatcher()


@pytest.mark.parametrize(
    "question, expected",
    [
        ("¿Cuáles son los clientes que más ingresos generan?", Intent.TOP_CLIENTS),
        ("¿Quién me dio el mayor ingreso?", Intent.TOP_CLIENTS),
        ("¿Cuánto he facturado en el año?", Intent.YEAR_TO_DATE_REVENUE),
        ("¿Cuánto llevo facturado hasta ahora?", Intent.YEAR_TO_DATE_REVENUE),
        ("¿Cómo van las ventas frente al mes anterior?", Intent.MONTHLY_COMPARISON),
        ("¿Qué clientes me deben?", Intent.TOP_DEBTORS),
        ("Muéstrame la cartera", Intent.TOP_DEBTORS),
        ("¿Cómo va el recaudo frente a la facturación?", Intent.COLLECTION_VS_BILLING),
        ("¿Cuáles son los empleados que más ganan?", Intent.TOP_PAID_EMPLOYEES),
        ("¿Cuánto pagué de nómina el mes pasado?", Intent.LAST_MONTH_PAYROLL),
        ("¿Cuántos empleados activos tengo?", Intent.ACTIVE_EMPLOYEES),
        ("¿Cuál es el salario promedio?", Intent.AVERAGE_SALARY),
        ("¿Hay contratos nuevos este mes?", Intent.NEW_CONTRACTS),
        ("¿Cuánto se le ha pagado a Ana Gómez este año?", Intent.EMPLOYEE_YEARLY_PAYMENTS),
        ("¿Cuánto se le ha pagado al empleado Juan Pérez este año?", Intent.EMPLOYEE_YEARLY_PAYMENTS),
        ("¿Cuáles son los descuentos de Juan Pérez este mes?", Intent.EMPLOYEE_DEDUCTIONS),
        ("¿Cuántas horas extras tuvo Ana Gómez?", Intent.EMPLOYEE_OVERTIME),
        ("¿Cuántos días trabajó cada uno?", Intent.WORKED_DAYS),
        ("¿Qué tipo de contrato tiene María López?", Intent.EMPLOYEE_CONTRACT_TYPE),
        ("¿Qué tiempo hace hoy?", Intent.UNKNOWN),
    ],
)
def test_match_selects_expected_intent(matcher, question, expected) -> None:
    assert matcher.match(question).intent == expected


def test_match_is_case_insensitive(matcher) -> None:
    assert matcher.match("¿CUÁL ES EL SALARIO PROMEDIO?").intent == Intent.AVERAGE_SALARY


def test_top_paid_wins_over_active_count(matcher) -> None:
    """'empleados que más ganan' also mentions employees and a quantity."""
    match = matcher.match("Dame la cantidad de empleados que más ganan")
    assert match.intent == Intent.TOP_PAID_EMPLOYEES


def test_yearly_payments_requires_a_person(matcher) -> None:
    assert matcher.match("¿Cuánto se ha pagado este año?").intent == Intent.UNKNOWN


def test_yearly_payments_after_role_word(matcher) -> None:
    match = matcher.match("¿Cuánto se le ha pagado al empleado Juan Pérez este año?")
    assert match == IntentMatch(intent=Intent.EMPLOYEE_YEARLY_PAYMENTS, employee_name="Juan Pérez")


def test_empty_question_is_unknown(matcher) -> None:
    assert matcher.match("").intent == Intent.UNKNOWN
    assert matcher.match(None).intent == Intent.UNKNOWN


def test_employee_intents_carry_the_name(matcher) -> None:
    match = matcher.match("¿Qué tipo de contrato tiene María López?")
    assert match.employee_name == "María López"


def test_company_intents_have_no_employee_name(matcher) -> None:
    assert matcher.match("¿Cuáles son los clientes que más ingresos generan?").employee_name is None


@pytest.mark.parametrize(
    "question, expected",
    [
        ("¿Cuáles son los descuentos de Juan Pérez este mes?", "Juan Pérez"),
        ("¿Cuánto se le ha pagado a Ana Gómez este año?", "Ana Gómez"),
        ("¿Cuántas horas extras tuvo Ana?", "Ana"),
        ("¿Qué tipo de contrato tiene María López?", "María López"),
        ("¿Cuántas horas extras registró carlos ruiz en marzo?", "carlos ruiz"),
        ("¿Cuánto se le ha pagado al empleado Juan Pérez este año?", "Juan Pérez"),
        ("¿Cuáles son los descuentos de doña María López?", "María López"),
    ],
)
def test_extract_employee_name(question, expected) -> None:
    assert extract_employee_name(question) == expected


def test_extract_employee_name_without_marker() -> None:
    assert extract_employee_name("¿Cuáles son los descuentos?") is None


def test_extract_employee_name_skips_markers_without_name() -> None:
    # "del mes" yields nothing, so the earlier "de" is used.
    assert extract_employee_name("descuentos de Juan del mes") == "Juan"
