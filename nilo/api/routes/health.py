"""
Health Check Routes - System health and monitoring endpoints.

- /health       : the process is up
- /health/ready : the payroll database answers
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from nilo import __version__
from nilo.api.dependencies import get_db
from nilo.core.logging_config import get_logger
from nilo.database.connection import DatabaseConnection
from nilo.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
def health_check() -> HealthResponse:
    """Liveness: does not touch the database or the LLM."""
    logger.debug("Health check requested")

    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(timezone.utc)
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
)
def readiness_check(db: DatabaseConnection = Depends(get_db)) -> HealthResponse:
    """Readiness: reports 'degraded' when the database is unreachable."""
    logger.debug("Readiness check requested")

    database_ok = db.check_connection()

    return HealthResponse(
        status="ready" if database_ok else "degraded",
        version=__version__,
        database="ok" if database_ok else "unreachable",
        timestamp=datetime.now(timezone.utc)
    )
