"""
HTTP middleware for the NILO API.

AuditMiddleware writes one log line per call to the chat, assistant and
query endpoints, with the status and elapsed time, and reports the time
back to the Streamlit client in X-Response-Time. The sidebar polls
/health on every rerun, so those calls are only logged at DEBUG.
"""
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from nilo.core.logging_config import get_logger

logger = get_logger(__name__)

HEALTH_PATHS = ("/health", "/health/ready")

# Short labels so log lines can be grepped by endpoint
ENDPOINT_LABELS = {
    "/api/chat": "chat",
    "/api/assistant": "assistant",
    "/api/query": "query",
}


def endpoint_label(path: str) -> str:
    if path in HEALTH_PATHS:
        return "health"
    return ENDPOINT_LABELS.get(path, "other")


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs each API call with its outcome and elapsed milliseconds."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        label = endpoint_label(request.url.path)
        caller = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{label}] {request.method} {request.url.path} crashed after "
                f"{self._elapsed_ms(started):.0f}ms from {caller}: {e}"
            )
            raise

        elapsed_ms = self._elapsed_ms(started)
        response.headers["X-Response-Time"] = f"{elapsed_ms / 1000:.3f}s"

        message = (
            f"[{label}] {request.method} {request.url.path} -> {response.status_code} "
            f"in {elapsed_ms:.0f}ms from {caller}"
        )
        if label == "health":
            logger.debug(message)
        elif response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)

        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds nosniff, frame and referrer headers to every response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response
