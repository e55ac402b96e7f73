"""
Services module - Business logic and orchestration.

Services contain the core application logic:
- No HTTP concerns (those belong in api/)
- No SQL text (that belongs in database/)
- Orchestrate between LLM and database layers
"""
from nilo.services.chat_service import ChatService, get_chat_service, reset_chat_service
from nilo.services.sql_service import SQLService, SQLResponse, get_sql_service, reset_sql_service

__all__ = [
    "ChatService",
    "get_chat_service",
    "reset_chat_service",
    "SQLService",
    "SQLResponse",
    "get_sql_service",
    "reset_sql_service",
]
