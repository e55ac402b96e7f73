"""Unit tests: SQL mode orchestration with a scripted LLM."""

from __future__ import annotations

import pytest

from nilo.core.config import get_settings
from nilo.core.exceptions import DatabaseError, LLMError
from nilo.core.validators import MODE_CHAT, MODE_SQL
from nilo.database.executor import QueryResult
from nilo.services.chat_service import ChatService
from nilo.services.sql_service import NO_ROWS_FOUND, SQLService


@pytest.fixture()
def build_service(executor, fake_llm_factory):
    def build(*responses, chat_responses=("Hola, soy NILO.",), service_executor=None):
        settings = get_settings()
        llm = fake_llm_factory(*responses)
        chat = ChatService(llm_client=fake_llm_factory(*chat_responses), settings=settings)
        service = SQLService(
            llm=llm,
            executor=service_executor or executor,
            chat_service=chat,
            settings=settings,
        )
        return service, llm, chat

    return build


def test_answer_runs_sql_and_explains(build_service) -> None:
    service, llm, _ = build_service(
        "SELECT full_name, salary FROM employee_contracts ec "
        "JOIN employees e ON e.id = ec.employee_id ORDER BY salary DESC;",
        "Ana Gómez es quien más gana.",
    )

    response = service.answer("¿Quién gana más?")

    assert response.result == "Ana Gómez es quien más gana."
    assert response.mode_used == MODE_SQL
    assert response.query.endswith("LIMIT 100")
    assert response.row_count == 4

    sql_call, explain_call = llm.calls
    assert sql_call["model"] == "sql-model"
    assert sql_call["user_message"] == 'Pregunta: "¿Quién gana más?"'
    assert "employees(" in sql_call["system_prompt"]
    assert explain_call["model"] == "explain-model"
    # Only the first rows are summarized for the explanation
    assert "Resultado 3:" in explain_call["user_message"]
    assert "Resultado 4:" not in explain_call["user_message"]


def test_answer_returns_summary_when_explanation_fails(build_service) -> None:
    service, _, _ = build_service(
        "SELECT COUNT(*) AS total FROM employees;",
        LLMError("explain model down"),
    )

    response = service.answer("¿Cuántos empleados hay?")

    assert response.result == "Resultado 1: total: 4"


def test_answer_returns_summary_when_explanation_is_empty(build_service) -> None:
    service, _, _ = build_service("SELECT COUNT(*) AS total FROM employees;", "")
    assert service.answer("¿Cuántos empleados hay?").result == "Resultado 1: total: 4"


def test_answer_without_rows(build_service) -> None:
    service, llm, _ = build_service("SELECT full_name FROM employees WHERE status = 9;")

    response = service.answer("¿Quién está suspendido?")

    assert response.result == NO_ROWS_FOUND
    assert response.query == "SELECT full_name FROM employees WHERE status = 9 LIMIT 100"
    assert len(llm.calls) == 1


def test_falls_back_to_chat_when_no_sql(build_service) -> None:
    service, _, _ = build_service("¡Hola! ¿En qué te ayudo?")

    response = service.answer("Hola")

    assert response.result == "Hola, soy NILO."
    assert response.query is None
    assert response.mode_used == MODE_CHAT


def test_falls_back_to_chat_when_sql_generation_fails(build_service) -> None:
    service, _, _ = build_service(LLMError("groq down"))
    assert service.answer("Hola").mode_used == MODE_CHAT


def test_falls_back_to_chat_when_sql_is_rejected(build_service) -> None:
    service, _, _ = build_service("SELECT * FROM users;")

    response = service.answer("Lista de usuarios")

    assert response.mode_used == MODE_CHAT
    assert response.query is None


class _BrokenExecutor:
    def execute(self, sql, params=None):
        return QueryResult(success=False, error="Unknown column 'foo'")


def test_execution_failure_raises(build_service) -> None:
    service, _, _ = build_service("SELECT foo FROM employees;", service_executor=_BrokenExecutor())

    with pytest.raises(DatabaseError, match="Unknown column"):
        service.answer("foo")

