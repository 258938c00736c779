"""
Custom middleware for the FastAPI application.
"""
import time
import logging
import uuid
from typing import Dict, List

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.types import ASGIApp

from ..config import Settings

# Set up logging
logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "X-XSS-Protection": "0",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with a correlation id and the authenticated account.

    An incoming ``X-Request-ID`` is reused so the frontend can correlate its
    own logs; otherwise a new id is generated.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        client_host = request.client.host if request.client else "unknown"

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{request_id}] {request.method} {request.url.path} failed after {elapsed_ms:.1f}ms: {str(e)}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        account = getattr(request.state, "account", None)
        caller = f"{account.role.value}:{account.id}" if account is not None else "anonymous"
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms, {caller}, {client_host})"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.6f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add conservative security headers to every response."""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware for basic rate limiting.

    This is a simple in-memory, per-process limiter keyed by client IP.
    Clients idle for a whole window are swept out once per window.
    """
    def __init__(self, app: ASGIApp, rate_limit: int = 1000, window_seconds: int = 900):
        super().__init__(app)
        self.rate_limit = rate_limit
        self.window_seconds = window_seconds
        self.requests: Dict[str, List[float]] = {}
        self._last_sweep = 0.0

    def prune(self, now: float) -> None:
        """Forget clients whose most recent request is outside the window."""
        stale = [
            client_ip for client_ip, timestamps in self.requests.items()
            if not timestamps or now - timestamps[-1] >= self.window_seconds
        ]
        for client_ip in stale:
            del self.requests[client_ip]
        self._last_sweep = now

    async def dispatch(self, request: Request, call_next):
        """
        Process the request with rate limiting.

        Returns:
            Response: The response from the next handler or a 429 envelope
        """
        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        if now - self._last_sweep >= self.window_seconds:
            self.prune(now)

        recent = [
            timestamp for timestamp in self.requests.get(client_ip, [])
            if now - timestamp < self.window_seconds
        ]
        if len(recent) >= self.rate_limit:
            self.requests[client_ip] = recent
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "message": "Demasiadas solicitudes desde esta IP, intenta más tarde",
                    "error": "RATE_LIMIT_EXCEEDED",
                },
            )

        recent.append(now)
        self.requests[client_ip] = recent
        return await call_next(request)


def setup_middlewares(app, settings: Settings):
    """
    Set up all custom middlewares for the application.

    Args:
        app: FastAPI application instance
        settings: Application settings
    """
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            rate_limit=settings.rate_limit_requests,
            window_seconds=settings.rate_limit_window_seconds,
        )
