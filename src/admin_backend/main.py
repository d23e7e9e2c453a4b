"""
# Admin Backend Application

FastAPI entry point of the Admin Backend.

## Startup Sequence

The `lifespan()` context manager:

1. Connects to MongoDB (with retries, see `DatabaseManager.connect`).
2. Creates/verifies the collection indexes.
3. Yields to serve requests.
4. Disconnects from MongoDB on shutdown.

A failed database connection aborts startup.

## Middleware & Routers

- `CORSMiddleware` with origins from `CORS_ORIGINS`.
- `RequestLoggingMiddleware` logging every request with its duration.
- `/admin/blog` CRUD router, `/health` probes, Prometheus `/metrics`.

## Error Responses

Framework-level request errors are returned as `validation_error` envelopes
and unhandled exceptions as `internal_server_error`, so clients always receive
`{status, message, data}`.

## Running

```bash
uvicorn admin_backend.main:app --reload --host 0.0.0.0 --port 8000
```
"""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from admin_backend import __version__
from admin_backend.config import settings
from admin_backend.database import db_manager
from admin_backend.managers.logging_manager import get_logger
from admin_backend.routes.admin.blog import router as admin_blog_router
from admin_backend.routes.health import router as health_router
from admin_backend.services.validation_service import format_validation_errors
from admin_backend.utils import response_handler as res
from admin_backend.utils.logging_utils import (
    RequestLoggingMiddleware,
    log_application_lifecycle,
    log_error_with_context,
)

APP_NAME = "Admin Backend API"
APP_VERSION = __version__

logger = get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Connect the database before serving and release it afterwards.

    Raises:
        HTTPException: If the database cannot be initialized.
    """
    startup_start_time = time.time()
    log_application_lifecycle(
        "startup_initiated",
        {
            "app_name": APP_NAME,
            "version": APP_VERSION,
            "environment": settings.ENVIRONMENT,
            "debug_mode": settings.DEBUG,
        },
    )

    try:
        db_connect_start = time.time()
        logger.info("Initiating database connection...")
        await db_manager.connect()
        log_application_lifecycle(
            "database_connected",
            {
                "connection_duration": f"{time.time() - db_connect_start:.3f}s",
                "database_name": settings.MONGODB_DATABASE,
                "connection_url": (
                    settings.MONGODB_URL.split("@")[-1] if "@" in settings.MONGODB_URL else settings.MONGODB_URL
                ),
            },
        )

        indexes_start = time.time()
        logger.info("Creating/verifying database indexes...")
        await db_manager.create_indexes()
        log_application_lifecycle("database_indexes_ready", {"indexes_duration": f"{time.time() - indexes_start:.3f}s"})
    except Exception as e:
        log_error_with_context(e, {"operation": "application_startup", "phase": "database_initialization"})
        raise HTTPException(status_code=503, detail="Service unavailable: Database connection failed") from e

    log_application_lifecycle("startup_completed", {"startup_duration": f"{time.time() - startup_start_time:.3f}s"})

    yield

    shutdown_start_time = time.time()
    log_application_lifecycle("shutdown_initiated", {"app_name": APP_NAME})
    try:
        await db_manager.disconnect()
    except Exception as e:
        log_error_with_context(e, {"operation": "application_shutdown", "phase": "database_disconnection"})
    log_application_lifecycle("shutdown_completed", {"shutdown_duration": f"{time.time() - shutdown_start_time:.3f}s"})


app = FastAPI(
    title=APP_NAME,
    description="Admin CRUD endpoints for blog content, backed by MongoDB.",
    version=APP_VERSION,
    lifespan=lifespan,
    redirect_slashes=False,
    openapi_tags=[
        {"name": "admin-blog", "description": "Blog administration: create, list, update and delete"},
        {"name": "System", "description": "System health and monitoring endpoints"},
    ],
)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render framework request validation failures in the standard envelope."""
    message = format_validation_errors(exc)
    logger.info("Rejected request to %s: %s", request.url.path, message)
    return res.validation_error(message=f"Invalid values in parameters, {message}")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Pass through envelopes already built (e.g. by the auth dependency); wrap plain details."""
    if isinstance(exc.detail, dict) and "status" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail, headers=exc.headers)
    if exc.status_code == 401:
        return res.unauthorized(message=str(exc.detail))
    if exc.status_code == 404:
        return res.record_not_found(message=str(exc.detail))
    if exc.status_code >= 500:
        return res.internal_server_error(message=str(exc.detail))
    return res.bad_request(message=str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log_error_with_context(exc, {"operation": "request", "method": request.method, "path": request.url.path})
    return res.internal_server_error(message=str(exc))


cors_origins = ["http://localhost:3000", "http://localhost:8000", *settings.cors_origins_list]
logger.info("Configuring CORS with origins: %s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)
app.add_middleware(RequestLoggingMiddleware)
log_application_lifecycle(
    "middleware_configured",
    {"middleware": ["CORSMiddleware", "RequestLoggingMiddleware"], "cors_origins": cors_origins},
)

routers_config = [
    ("admin/blog", admin_blog_router, "Blog administration endpoints"),
    ("health", health_router, "Liveness and readiness probes"),
]

included_routers = []
for router_name, router, description in routers_config:
    app.include_router(router)
    included_routers.append({"name": router_name, "description": description})
    logger.info("Included %s router: %s", router_name, description)

log_application_lifecycle("routers_configured", {"total_routers": len(included_routers), "routers": included_routers})

instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    should_respect_env_var=False,
    should_instrument_requests_inprogress=True,
)
instrumentator.instrument(app).expose(app, include_in_schema=False, endpoint="/metrics")
log_application_lifecycle("prometheus_configured", {"metrics_endpoint": "/metrics"})


def run():
    """Serve the application with uvicorn using the configured host and port."""
    uvicorn.run("admin_backend.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG, log_level="info")


if __name__ == "__main__":
    run()
