"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

Database access can be configured either with a single DATABASE_URL or
with the MYSQL_* variables the payroll database is usually deployed with.
"""
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for daily log files (empty = <project>/logs)
        database_url: SQLAlchemy connection string for the payroll database
        groq_api_key: API key for Groq LLM service
        google_api_key: API key for Google Gemini (empty disables fallback)
        llm_model_sql: Model used to write SQL
        llm_model_chat: Model used for conversational answers
        llm_model_explain: Model used to explain query results
        llm_model_fallback: Groq model tried when the requested one fails
        llm_model_google: Gemini model used as last resort
        llm_temperature: LLM creativity (0.0 = deterministic, 1.0 = creative)
        llm_max_tokens: Maximum response length
        llm_retry_backoff_seconds: Linear backoff between provider attempts
        query_max_rows: Upper bound enforced on LIMIT of generated SQL
        enable_audit_logging: Log every HTTP request
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: str

    # Database settings
    database_url: str

    # LLM settings
    groq_api_key: str
    google_api_key: str
    llm_model_sql: str
    llm_model_chat: str
    llm_model_explain: str
    llm_model_fallback: str
    llm_model_google: str
    llm_temperature: float
    llm_max_tokens: int
    llm_retry_backoff_seconds: float

    # Safety settings
    query_max_rows: int
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"

    @property
    def gemini_enabled(self) -> bool:
        return bool(self.google_api_key)


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None:
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


def _build_database_url() -> str:
    """
    Resolve the database URL.

    Priority:
    1. DATABASE_URL
    2. MYSQL_HOST / MYSQL_PORT / MYSQL_USER / MYSQL_PASSWORD / MYSQL_DATABASE
    """
    database_url = os.environ.get("DATABASE_URL")

    if not database_url:
        host = _get_env("MYSQL_HOST", "localhost")
        port = _get_env("MYSQL_PORT", "3306")
        user = _get_env("MYSQL_USER", "root")
        password = _get_env("MYSQL_PASSWORD", "")
        name = _get_env("MYSQL_DATABASE")
        database_url = f"mysql+pymysql://{user}:{password}@{host}:{port}/{name}"

    # SQLAlchemy needs an explicit driver for MySQL and the new postgres scheme
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)

    # pymysql rejects ssl-mode, hosted MySQL URLs often carry it
    if "ssl-mode=" in database_url:
        database_url = re.sub(r"[?&]ssl-mode=[^&]+", "", database_url)
        if "?" not in database_url and "&" in database_url:
            database_url = database_url.replace("&", "?", 1)

    return database_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once; tests call get_settings.cache_clear() after
    changing the environment.

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing
    """
    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "NILO"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_dir=_get_env("LOG_DIR", ""),

        # Database
        database_url=_build_database_url(),

        # LLM
        groq_api_key=_get_env("GROQ_API_KEY"),
        google_api_key=_get_env("GOOGLE_API_KEY", ""),
        llm_model_sql=_get_env("LLM_MODEL_SQL", "llama-3.3-70b-versatile"),
        llm_model_chat=_get_env("LLM_MODEL_CHAT", "llama-3.1-8b-instant"),
        llm_model_explain=_get_env("LLM_MODEL_EXPLAIN", "llama-3.3-70b-versatile"),
        llm_model_fallback=_get_env("LLM_MODEL_FALLBACK", "llama-3.1-8b-instant"),
        llm_model_google=_get_env("LLM_MODEL_GOOGLE", "gemini-2.0-flash"),
        llm_temperature=float(_get_env("LLM_TEMPERATURE", "0.1")),
        llm_max_tokens=int(_get_env("LLM_MAX_TOKENS", "1024")),
        llm_retry_backoff_seconds=float(_get_env("LLM_RETRY_BACKOFF_SECONDS", "1")),

        # Safety
        query_max_rows=int(_get_env("QUERY_MAX_ROWS", "100")),
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
    )
