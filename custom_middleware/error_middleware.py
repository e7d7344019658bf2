"""
Custom error handling middleware for the gateway.
Catches unhandled exceptions, logs them, and returns a consistent JSON error response.
Sits inside CorsHeadersMiddleware so the 500 still carries CORS headers.
"""
import logging
import traceback

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from support.constants import APP_NAME


logger = logging.getLogger(APP_NAME)


class ErrorMiddleware(BaseHTTPMiddleware):
    """Middleware to catch unhandled exceptions and return 500 JSON response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        """Catch exceptions and return JSON error response."""
        try:
            return await call_next(request)
        except Exception as e:
            logger.error("Unhandled error: %s", str(e))
            logger.error("Traceback: %s", traceback.format_exc())

            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
            )
