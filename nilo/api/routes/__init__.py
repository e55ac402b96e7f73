"""
API Routes module - Endpoint definitions.

- chat.py   : LLM chat and rule-based assistant endpoints
- query.py  : raw SELECT endpoint
- health.py : health check endpoints
"""
from nilo.api.routes.chat import router as chat_router
from nilo.api.routes.health import router as health_router
from nilo.api.routes.query import router as query_router

__all__ = [
    "chat_router",
    "health_router",
    "query_router",
]
