"""
Middlewares do dev server.

Middlewares disponíveis:
- RequestLoggingMiddleware: Log de método, path, status e latência
"""

from .request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
