"""API middleware for request logging."""

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from datetime import datetime
from storefront.analytics.logger import logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging middleware."""

    async def dispatch(self, request: Request, call_next):
        start_time = datetime.now()
        client_host = request.client.host if request.client else "unknown"

        logger.info(f"{request.method} {request.url.path} - {client_host}")

        response = await call_next(request)

        process_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )

        return response
