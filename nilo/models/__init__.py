"""
Models module - Pydantic schemas for request/response validation.
"""
from nilo.models.chat import (
    ChatRequest,
    ChatResponse,
    AssistantRequest,
    AssistantResponse,
    QueryRequest,
    QueryResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "AssistantRequest",
    "AssistantResponse",
    "QueryRequest",
    "QueryResponse",
    "HealthResponse",
    "ErrorResponse",
]
