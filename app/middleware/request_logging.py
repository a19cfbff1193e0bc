"""
Request logging middleware.
"""
import time
import uuid
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with a trace_id and log method, path, status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse an upstream trace id when a proxy already set one
        trace_id = request.headers.get(TRACE_HEADER) or str(uuid.uuid4())
        request.state.trace_id = trace_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            latency_ms = int((time.perf_counter() - start_time) * 1000)
            logger.error(
                f"[{trace_id}] {request.method} {request.url.path} -> EXCEPTION after {latency_ms}ms: {exc}",
                exc_info=True
            )
            # Let the global exception handler build the response
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{trace_id}] {request.method} {request.url.path} -> {response.status_code} ({latency_ms}ms)"
        )

        response.headers[TRACE_HEADER] = trace_id
        return response
