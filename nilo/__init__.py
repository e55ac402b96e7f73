"""
NILO - chat assistant over a payroll/billing database.

This package contains all application source code organized by responsibility:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, and cross-cutting utilities
- services/  : SQL mode and conversational mode orchestration
- chat/      : Rule-based intent matching and canned answers
- llm/       : LLM integration, prompts and response parsing
- database/  : Database access, validation and payroll queries
- analytics/ : Number, currency and result formatting
- models/    : Pydantic models for request/response schemas
"""
__version__ = "0.1.0"
