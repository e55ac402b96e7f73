"""
Core module - Configuration and cross-cutting concerns.

This module provides:
- config.py         : Environment-based configuration management
- logging_config.py : Centralized logging setup
- exceptions.py     : Error hierarchy used by the API layer
- validators.py     : Prompt and mode normalization
- audit.py          : Request logging and security header middleware
"""
from nilo.core.config import get_settings, Settings
from nilo.core.logging_config import setup_logging, get_logger

__all__ = [
    "get_settings",
    "Settings",
    "setup_logging",
    "get_logger",
]
