"""
Flotify - Security Middleware

Request/response middleware for:
- Request ID injection for tracing
- Request logging with timing
- Security headers
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from flotify.log import get_logger, set_request_id


logger = get_logger(__name__)


class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Security-focused middleware for all incoming requests.
    
    Responsibilities:
    1. Inject X-Request-ID header for tracing (honours a client-sent one)
    2. Log method, path, status and duration of every request
    3. Add security headers to response
    """
    
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process each request through security pipeline."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)
        
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            set_request_id(None)
        
        duration_ms = (time.perf_counter() - start_time) * 1000
        
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        
        logger.info(
            "http.request",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        
        return response
