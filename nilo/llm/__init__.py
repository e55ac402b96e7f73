"""
LLM module - Language model integration.

This module handles all LLM interactions:
- Prompt construction
- API calls to Groq (Gemini as fallback)
- Response parsing
"""
from nilo.core.exceptions import LLMError
from nilo.llm.client import LLMClient, get_llm_client
from nilo.llm.parsing import extract_sql

__all__ = [
    "LLMClient",
    "LLMError",
    "get_llm_client",
    "extract_sql",
]
