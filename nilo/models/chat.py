"""
Request and Response models for the HTTP API.

These Pydantic models define the contract between the chat UI and the
server. Prompts are optional: an empty prompt gets a friendly
warning instead of a 422.
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """
    Request model for the /api/chat endpoint.

    Attributes:
        prompt: The user's natural language question.
        mode: 'SQL' to query the database, anything else for conversation.
    """
    prompt: Optional[str] = Field(
        default=None,
        description="The user's question",
        examples=["¿Cuáles son los 5 empleados con mayor salario?"]
    )
    mode: Optional[str] = Field(
        default=None,
        description="'SQL' for database questions, 'CHAT' (default) for conversation"
    )


class ChatResponse(BaseModel):
    """Response model for the /api/chat endpoint."""
    result: str = Field(..., description="Answer shown to the user")
    query: Optional[str] = Field(
        default=None,
        description="Executed SQL (SQL mode only)"
    )


class AssistantRequest(BaseModel):
    """Request model for the rule-based /api/assistant endpoint."""
    question: Optional[str] = Field(
        default=None,
        description="Question about payroll or billing",
        examples=["¿Cuántos empleados activos tengo?"]
    )


class AssistantResponse(BaseModel):
    """Response model for the /api/assistant endpoint."""
    answer: str


class QueryRequest(BaseModel):
    """Request model for the raw /api/query endpoint."""
    query: Optional[str] = Field(
        default=None,
        description="A single SELECT statement over the payroll catalog"
    )


class QueryResponse(BaseModel):
    """Response model for the /api/query endpoint."""
    data: List[Dict[str, Any]]
    row_count: int
    formatted_data: Optional[str] = Field(
        default=None,
        description="Rows rendered as a markdown table"
    )


class HealthResponse(BaseModel):
    """Response model for the /health endpoints."""
    status: str = Field(default="healthy")
    version: str
    database: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str
    message: Optional[str] = None
    details: Optional[str] = None
