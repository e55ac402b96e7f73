"""
Chat module - rule-based question answering.

- intents.py   : keyword intent matcher and employee name extraction
- processor.py : canned answers backed by parameterized queries
"""
from nilo.chat.intents import Intent, IntentMatch, IntentMatcher, extract_employee_name
from nilo.chat.processor import ChatProcessor, UNKNOWN_QUESTION, MISSING_EMPLOYEE

__all__ = [
    "Intent",
    "IntentMatch",
    "IntentMatcher",
    "extract_employee_name",
    "ChatProcessor",
    "UNKNOWN_QUESTION",
    "MISSING_EMPLOYEE",
]
