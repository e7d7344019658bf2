"""
Middleware that stamps the fixed cross-origin header set on every response.
Preflight requests are answered here and never reach a route.
"""
from typing import Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from support.constants import CORS_HEADERS


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Adds CORS headers to success and error responses alike."""

    def __init__(self, app, cors_headers: Optional[Dict[str, str]] = None):
        super().__init__(app)
        self.cors_headers = dict(cors_headers or CORS_HEADERS)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        for name, value in self.cors_headers.items():
            response.headers[name] = value
        return response
