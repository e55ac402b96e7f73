"""
Prompts module - LLM prompt templates.

Prompts are stored as separate Python files so wording changes are
reviewed like code.
"""
from nilo.llm.prompts.sql_prompts import (
    ASSISTANT_NAME,
    get_sql_system_prompt,
    get_sql_user_prompt,
    get_chat_system_prompt,
    get_explain_system_prompt,
    get_explain_user_prompt,
)

__all__ = [
    "ASSISTANT_NAME",
    "get_sql_system_prompt",
    "get_sql_user_prompt",
    "get_chat_system_prompt",
    "get_explain_system_prompt",
    "get_explain_user_prompt",
]
