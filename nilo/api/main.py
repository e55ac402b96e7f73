"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance:
1. Logging initialization
2. Middleware (audit logging, security headers, CORS)
3. Exception handlers
4. Router registration
5. Startup/shutdown events

Run with: uvicorn nilo.api.main:app --reload
"""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from nilo import __version__
from nilo.core.config import get_settings
from nilo.core.logging_config import setup_logging, get_logger
from nilo.core.exceptions import NiloException
from nilo.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from nilo.api.routes import chat_router, health_router, query_router


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level, Path(settings.log_dir) if settings.log_dir else None)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: log the effective configuration
    - Shutdown: close the database pool if it was opened
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"SQL model: {settings.llm_model_sql}, chat model: {settings.llm_model_chat}")
    logger.info(f"Gemini fallback: {settings.gemini_enabled}")
    logger.info(f"Audit Logging: {settings.enable_audit_logging}")

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from nilo.database.connection import reset_database
    try:
        reset_database()
    except Exception as e:
        logger.error(f"Error closing database connections: {e}")


app = FastAPI(
    title="NILO API",
    description="""
    Chat assistant over a payroll and billing database.

    ## Features

    - **SQL mode**: questions in Spanish become a single read-only SELECT,
      executed and explained in plain language
    - **Conversation mode**: friendly answers from the NILO persona
    - **Rule-based assistant**: canned answers to common payroll and billing questions
    - **Raw queries**: validated SELECT statements over the payroll tables
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (Order matters!)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(NiloException)
async def nilo_exception_handler(request: Request, exc: NiloException):
    """Handle all application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(chat_router)
app.include_router(query_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "NILO API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nilo.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )
