"""
API module - FastAPI routes and HTTP handling.

The application object lives in nilo.api.main; it is not imported here so
that importing route modules does not configure logging as a side effect.
"""
