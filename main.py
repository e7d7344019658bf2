"""
Identity Resolution Gateway
---------------------------
Entry point for the gateway. Sets up the FastAPI app, routers, middleware and
exception handlers.

Routers:
    - auth: OAuth PKCE login, callback and logout
    - resolution: job submission and result polling

Middleware (outermost first):
    - EnhancedLoggingMiddleware: structured request/response logging
    - CorsHeadersMiddleware: fixed CORS headers on every response, preflight answers
    - ErrorMiddleware: unhandled exceptions -> JSON 500

App State:
    - resolution_manager: ResolutionViewsManager (holds the task engine need)
    - auth_manager: AuthViewsManager (holds the token client need)

Health Endpoint:
    - GET /health: Returns service status
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from support.constants import APP_NAME, LOG_FILE_PATH, LOG_LEVEL
from support.credential_store import clear_verifier_cookie
from support.exceptions import GatewayError
from custom_middleware.cors_middleware import CorsHeadersMiddleware
from custom_middleware.error_middleware import ErrorMiddleware
from custom_middleware.logging_middleware import EnhancedLoggingMiddleware
from logging_management import LoggingManager
from routers import auth_router, resolution_router


logger = LoggingManager.setup_logging(
    service_name=APP_NAME, log_file_path=LOG_FILE_PATH, log_level=LOG_LEVEL
)


# FastAPI app setup
app = FastAPI(title="identity-gateway-service", version="1.0.0")


# Middleware
app.add_middleware(ErrorMiddleware)
app.add_middleware(CorsHeadersMiddleware)
app.add_middleware(EnhancedLoggingMiddleware, service_name=APP_NAME)


# Include routers
app.include_router(auth_router.router)
app.include_router(resolution_router.router)

app.state.resolution_manager = resolution_router.views_manager
app.state.auth_manager = auth_router.views_manager


# Exception handlers
@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.warning(
        "%s on %s %s -> %s", type(exc).__name__, request.method, request.url.path, exc.status_code
    )
    if exc.plain_text:
        response = PlainTextResponse(exc.message, status_code=exc.status_code)
    else:
        response = JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    if exc.clears_verifier:
        clear_verifier_cookie(response)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unmatched path/method combinations are all reported as not found
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Only named fields are reported; list indexes and undecodable bodies collapse to "body"
    fields = sorted({
        ".".join(p for p in err.get("loc", ())[1:] if isinstance(p, str)) or "body"
        for err in exc.errors()
    })
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {', '.join(fields)}"},
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """
    Health check endpoint for the gateway.

    Returns:
        dict: Service status
    """
    return {"status": "ok"}
