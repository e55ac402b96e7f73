"""
FastAPI dependencies.

Routes receive their collaborators through Depends so that tests can
swap them with app.dependency_overrides.
"""
from nilo.chat.processor import ChatProcessor
from nilo.core.config import get_settings
from nilo.database.connection import DatabaseConnection, get_database
from nilo.database.executor import QueryExecutor
from nilo.database.queries import PayrollQueries
from nilo.database.validator import SQLValidator, catalog_validator
from nilo.services.chat_service import ChatService, get_chat_service
from nilo.services.sql_service import SQLService, get_sql_service


def get_db() -> DatabaseConnection:
    return get_database()


def get_query_executor() -> QueryExecutor:
    return QueryExecutor(get_database())


def get_sql_validator() -> SQLValidator:
    settings = get_settings()
    return catalog_validator(settings.database_url, max_limit=settings.query_max_rows)


def get_chat_processor() -> ChatProcessor:
    """A processor per request so "this month" follows the calendar."""
    return ChatProcessor(queries=PayrollQueries(get_query_executor()))


__all__ = [
    "ChatService",
    "SQLService",
    "get_chat_service",
    "get_sql_service",
    "get_db",
    "get_query_executor",
    "get_sql_validator",
    "get_chat_processor",
]
