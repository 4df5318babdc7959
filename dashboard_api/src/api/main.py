from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional
from uuid import uuid4

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import DashboardError, RepositoryError
from src.core.logging import configure_logging, correlation_id_var
from src.core.security import CredentialStore
from src.core.settings import get_app_settings
from src.db.session import DatabaseManager
from src.schemas.common import ApiResponse, HealthResponse

# Routers
from src.api.routes.auth import router as auth_router
from src.api.routes.clients import router as clients_router
from src.api.routes.dashboard import router as dashboard_router
from src.api.routes.diagnostic import router as diagnostic_router

settings = get_app_settings()

# Configure structured logging once at import
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Liveness probe."},
    {"name": "Auth", "description": "Login and current user."},
    {"name": "Clients", "description": "Sociétés listing and lookup."},
    {"name": "Dashboard", "description": "Aggregate statistics."},
    {"name": "Diagnostic", "description": "Database connectivity checks."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Build the shared DatabaseManager and CredentialStore, then try to connect.

    A failed connection is not fatal: listing and stats fall back to sample data
    until a reconnection succeeds. On shutdown the pools are released after the
    server has finished in-flight requests.
    """
    db: Optional[DatabaseManager] = getattr(app.state, "db", None)
    if db is None:
        db = DatabaseManager()
        app.state.db = db
    if getattr(app.state, "credentials", None) is None:
        app.state.credentials = CredentialStore.from_settings()

    try:
        await db.connect()
    except RepositoryError as exc:
        logger.warning("Could not connect to the database, serving sample data: %s", exc)
        logger.warning("Set the DB_* and DB2_* variables in .env to use MySQL")

    yield

    await db.disconnect()


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

# CORS - avoid wildcard with credentials
cors_allow_credentials = settings.CORS_ALLOW_CREDENTIALS
if settings.CORS_ORIGINS == ["*"] and cors_allow_credentials:
    logger.warning("CORS_ALLOW_CREDENTIALS=True with '*' origins is not permitted; disabling credentials.")
    cors_allow_credentials = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=cors_allow_credentials,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """
    Bind a correlation id to the request for logging and echo it back in
    'X-Correlation-ID'.
    """
    corr = request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or str(uuid4())
    token_corr = correlation_id_var.set(corr)
    request.state.correlation_id = corr

    logger.info("Incoming request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token_corr)

    response.headers["X-Correlation-ID"] = corr
    return response


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Build the `{success: false, error}` envelope."""
    body = ApiResponse.fail(message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    """Map application errors onto their status code."""
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes and framework HTTP errors use the same envelope."""
    if exc.status_code == 404:
        return _error_response(404, "Route not found")
    detail = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
    return _error_response(exc.status_code, detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed query strings or bodies answer 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    return _error_response(400, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler to avoid leaking stack traces.
    """
    logger.exception("Unhandled error processing request")
    return _error_response(500, "Internal server error")


api = APIRouter(prefix="/api")


# PUBLIC_INTERFACE
@api.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    tags=["Health"],
)
def health_check() -> HealthResponse:
    """
    Basic liveness health check endpoint. Never touches the database.
    """
    return HealthResponse(
        success=True,
        message="Dashboard API is running",
        timestamp=datetime.now(tz=timezone.utc).isoformat(),
    )


api.include_router(auth_router)
api.include_router(clients_router)
api.include_router(dashboard_router)
api.include_router(diagnostic_router)

app.include_router(api)


# PUBLIC_INTERFACE
def run() -> None:
    """
    Serve the app with uvicorn. On SIGINT/SIGTERM uvicorn stops accepting
    connections and waits up to SHUTDOWN_GRACE_SECONDS for in-flight requests
    before the lifespan releases the database pools.
    """
    uvicorn.run(
        "src.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
    )


if __name__ == "__main__":
    run()
