# app/main.py

"""Blog Content API - posts with search, filtering, pagination and ownership rules."""

from logging import getLogger
from typing import cast

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND

from app.configs import Settings, get_settings
from app.db import Database, get_database
from app.errors import (
    AuthenticationError,
    BaseAppError,
    ConflictError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    auth_exception_handler,
    create_exception_handler,
    create_unhandled_exception_handler,
    database_exception_handler,
    error_envelope,
    validation_exception_handler,
)
from app.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.monitoring import configure_logging
from app.routes import post_router
from app.utils.helpers import today_str

logger = getLogger(__name__)

VERSION = "1.0.0"

health_router = APIRouter(prefix="/api", tags=["🩺 Health"])


@health_router.get(
    "/health",
    summary="Health check endpoint",
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "ok",
                        "timestamp": "2025-01-01 00:00:00",
                        "environment": "production",
                        "database": "connected",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
async def health_check(request: Request) -> ORJSONResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Service status and database reachability.
    """
    database_ok = await get_database(request).ping()
    settings: Settings = request.app.state.settings

    return ORJSONResponse(
        {
            "status": "ok" if database_ok else "degraded",
            "timestamp": today_str(),
            "environment": settings.ENVIRONMENT,
            "database": "connected" if database_ok else "unavailable",
        },
    )


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Wrap Starlette HTTP errors (unknown route, wrong method) in the envelope."""
    http_exc = cast(StarletteHTTPException, exc)
    if http_exc.status_code == HTTP_404_NOT_FOUND:
        message = "Route not found"
    else:
        message = str(http_exc.detail)
    return ORJSONResponse(
        content=error_envelope(message),
        status_code=http_exc.status_code,
        headers=http_exc.headers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application from explicit settings.

    The `Database` is created here and stored on ``app.state`` together with
    the settings, so tests can build isolated apps against their own store.

    Parameters
    ----------
    settings : Settings | None
        Settings to use; defaults to the environment-loaded settings.

    Returns
    -------
    FastAPI
        Configured application.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Blog Content API",
        version=VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        swagger_ui_parameters={
            "docExpansion": "none",
            "operationsSorter": "method",
        },
    )
    app.state.settings = settings
    app.state.database = Database(settings)

    configure_cors(app, settings)

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    for router in (health_router, post_router):
        app.include_router(router)

    unhandled_exception_handler = create_unhandled_exception_handler(logger)
    errors = [
        (AuthenticationError, auth_exception_handler),
        (ForbiddenError, auth_exception_handler),
        (NotFoundError, database_exception_handler),
        (ConflictError, database_exception_handler),
        (InfrastructureError, database_exception_handler),
        (BaseAppError, create_exception_handler(logger)),
        (RequestValidationError, validation_exception_handler),
        (StarletteHTTPException, http_exception_handler),
        (SQLAlchemyError, unhandled_exception_handler),
        (Exception, unhandled_exception_handler),
    ]

    for exc_type, handler in errors:
        app.add_exception_handler(exc_type, handler)

    return app


app = create_app()


if __name__ == "__main__":
    from uvicorn import run

    run(
        "app.main:app",
        host="127.0.0.1",
        port=8000,
        log_level="info",
        reload=True,
    )
