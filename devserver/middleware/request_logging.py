"""
Middleware de log de requests do dev server.

Loga método, path, status e latência de cada request. Respostas 5xx
sobem para WARNING; o restante fica em DEBUG para não poluir o
terminal durante o desenvolvimento.
"""

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Loga cada request com latência em ms."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start_time) * 1000

        message = (
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed:.2f}ms)"
        )
        if response.status_code >= 500:
            logger.warning(message)
        else:
            logger.debug(message)

        response.headers["X-Response-Time-Ms"] = f"{elapsed:.2f}"
        return response
