from __future__ import annotations

import os
import tempfile
from datetime import date

import pytest
from sqlalchemy import event, text

# Settings are read on import of the app; point them at throwaway values first.
_TMP_DIR = tempfile.mkdtemp(prefix="nilo-tests-")
os.environ["GROQ_API_KEY"] = "test-groq-key"
os.environ["GOOGLE_API_KEY"] = ""
os.environ["APP_ENV"] = "testing"
os.environ["LOG_DIR"] = _TMP_DIR
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'default.sqlite3')}"
os.environ["LLM_RETRY_BACKOFF_SECONDS"] = "0"
os.environ["LLM_MODEL_SQL"] = "sql-model"
os.environ["LLM_MODEL_CHAT"] = "chat-model"
os.environ["LLM_MODEL_EXPLAIN"] = "explain-model"
os.environ["LLM_MODEL_FALLBACK"] = "fallback-model"

from nilo.core.config import get_settings  # noqa: E402
from nilo.core.exceptions import LLMError  # noqa: E402
from nilo.database.connection import DatabaseConnection  # noqa: E402
from nilo.database.executor import QueryExecutor  # noqa: E402
from nilo.database.queries import PayrollQueries  # noqa: E402

# Reference date used by rule-based answers in tests
TODAY = date(2024, 3, 15)

SCHEMA = [
    """CREATE TABLE employees (
        id INTEGER PRIMARY KEY, full_name TEXT, email TEXT,
        employee_position_id INTEGER, status INTEGER)""",
    """CREATE TABLE employee_contracts (
        id INTEGER PRIMARY KEY, employee_id INTEGER, type TEXT, salary NUMERIC,
        start_date TEXT, end_date TEXT, status INTEGER)""",
    """CREATE TABLE contract_salary_history (
        employee_contract_id INTEGER, salary NUMERIC, start_date TEXT, end_date TEXT)""",
    """CREATE TABLE payrolls (
        id INTEGER PRIMARY KEY, start_date TEXT, end_date TEXT, total_payment NUMERIC)""",
    """CREATE TABLE payroll_details (
        id INTEGER PRIMARY KEY, payroll_id INTEGER, employee_id INTEGER,
        worked_days INTEGER, incomes_total NUMERIC, deductions_total NUMERIC,
        total NUMERIC, overtime_surcharge_hours NUMERIC, created_at TEXT)""",
    """CREATE TABLE payroll_consolidated (
        employee_id INTEGER, worked_days INTEGER, incomes_total NUMERIC,
        deductions_total NUMERIC, total NUMERIC, start_date TEXT, end_date TEXT)""",
    """CREATE TABLE payments (
        id INTEGER PRIMARY KEY, contact_id INTEGER, total NUMERIC, document_date TEXT)""",
    """CREATE TABLE documents (
        id INTEGER PRIMARY KEY, contact_id INTEGER, total NUMERIC, document_date TEXT,
        pending NUMERIC, document_type_id INTEGER, document_status_id INTEGER)""",
    """CREATE TABLE contacts (
        id INTEGER PRIMARY KEY, full_name TEXT, client INTEGER, provider INTEGER)""",
    """CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT, total NUMERIC)""",
]

SEED = [
    """INSERT INTO employees VALUES
        (1, 'Ana Gómez', 'ana@example.com', 1, 1),
        (2, 'Juan Pérez', 'juan@example.com', 2, 1),
        (3, 'María López', 'maria@example.com', 2, 1),
        (4, 'Carlos Ruiz', 'carlos@example.com', 3, 0)""",
    """INSERT INTO employee_contracts VALUES
        (1, 1, 'Término indefinido', 4500000, '2024-03-01', NULL, 1),
        (2, 2, 'Término fijo', 3000000, '2023-06-01', NULL, 1),
        (3, 3, 'Prestación de servicios', 2500000, '2024-03-10', NULL, 1),
        (4, 4, 'Término fijo', 9000000, '2022-01-01', '2023-01-01', 0)""",
    """INSERT INTO payrolls VALUES
        (1, '2023-12-01', '2023-12-31', 9500000),
        (2, '2024-02-01', '2024-02-29', 10000000),
        (3, '2024-03-01', '2024-03-31', 11000000)""",
    """INSERT INTO payroll_details VALUES
        (1, 3, 1, 30, 4800000, 384000, 4416000, 12.5, '2024-03-31'),
        (2, 3, 2, 28, 3000000, 240000, 2760000, 0, '2024-03-31'),
        (3, 2, 1, 29, 4500000, 360000, 4140000, 4, '2024-02-29')""",
    """INSERT INTO payroll_consolidated VALUES
        (1, 30, 4500000, 500000, 4000000, '2023-12-01', '2023-12-31'),
        (1, 29, 4500000, 360000, 4140000, '2024-02-01', '2024-02-29'),
        (1, 30, 4800000, 384000, 4416000, '2024-03-01', '2024-03-31')""",
    """INSERT INTO contacts VALUES
        (1, 'Comercial Andina', 1, 0),
        (2, 'Distribuciones Sol', 1, 0),
        (3, 'Papelería Central', 0, 1)""",
    """INSERT INTO documents VALUES
        (1, 1, 5000000, '2024-03-05', 1000000, 1, 1),
        (2, 2, 3000000, '2024-03-12', 0, 1, 1),
        (3, 1, 2000000, '2024-02-20', 500000, 1, 1),
        (4, 2, 4000000, '2024-03-20', 0, 1, 2),
        (5, 3, 700000, '2024-03-08', 700000, 2, 1),
        (6, 2, 1000000, '2023-12-10', 2000000, 1, 1)""",
    """INSERT INTO payments VALUES
        (1, 1, 3000000, '2024-03-10'),
        (2, 2, 3000000, '2024-03-15'),
        (3, 1, 1000000, '2024-02-15')""",
]


def _month(value):
    return None if value is None else int(str(value)[5:7])


def _year(value):
    return None if value is None else int(str(value)[:4])


def _register_mysql_functions(dbapi_connection, connection_record) -> None:
    # The payroll queries use MySQL's MONTH()/YEAR(); SQLite lacks them.
    dbapi_connection.create_function("MONTH", 1, _month)
    dbapi_connection.create_function("YEAR", 1, _year)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def db(tmp_path):
    connection = DatabaseConnection(f"sqlite:///{tmp_path / 'payroll.sqlite3'}")
    event.listen(connection.engine, "connect", _register_mysql_functions)

    with connection.engine.begin() as conn:
        for statement in SCHEMA + SEED:
            conn.execute(text(statement))

    yield connection
    connection.close()


@pytest.fixture()
def executor(db) -> QueryExecutor:
    return QueryExecutor(db)


@pytest.fixture()
def queries(executor) -> PayrollQueries:
    return PayrollQueries(executor)


class FakeLLM:
    """
    Stand-in for LLMClient.

    Answers are taken in order from `responses`; an exception instance in
    the list is raised instead of returned. Calls are recorded.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def generate(self, user_message, system_prompt=None, model=None):
        self.calls.append({"user_message": user_message, "system_prompt": system_prompt, "model": model})
        if not self.responses:
            raise LLMError("no scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def fake_llm_factory():
    return FakeLLM


@pytest.fixture()
def app():
    from nilo.api.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c
