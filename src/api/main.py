"""Application factory of the Prime Print back-office API.

``create_app`` configures logging and tracing, registers the exception
handlers and middleware, mounts the routers under ``api_prefix`` and adds
the ``/health`` and ``/info`` endpoints. Middleware run in reverse order of
registration: CORS first, then security headers, request context and
request logging.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated, Any, cast

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.middleware.security_headers import SecurityHeadersMiddleware
from src.api.routers import auth, documents, media, public, testimonials, trackings
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.core.observability import instrument_app, setup_tracing
from src.infrastructure.database.session import (
    check_database_connection,
    close_database,
    get_engine,
)


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Check the database on start-up and dispose of the engine on shutdown.

    Raises:
        RuntimeError: If the database cannot be reached at start-up.
    """
    is_healthy, error_msg = await check_database_connection()
    if not is_healthy:
        logger.error("Database connection failed during startup: {}", error_msg)
        raise RuntimeError(f"Database connection failed: {error_msg}")

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use, defaults to :func:`get_settings`.

    Returns:
        FastAPI: The configured application.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_exception_handlers(application)

    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)
    application.add_middleware(RequestContextMiddleware)
    application.add_middleware(
        SecurityHeadersMiddleware, hsts_enabled=settings.environment == "production"
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID", "X-Request-ID"],
    )

    for router in (
        auth.router,
        documents.router,
        testimonials.router,
        media.router,
        trackings.router,
        public.router,
    ):
        application.include_router(router, prefix=settings.api_prefix)
    application.include_router(media.files_router)

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Liveness probe; reports ``degraded`` when the database is unreachable."""
        health_status: dict[str, object] = {"status": "healthy", "database": False}

        is_healthy, error_msg = await check_database_connection()
        health_status["database"] = is_healthy

        if is_healthy:
            pool = cast("Any", get_engine().pool)
            logger.bind(
                metric_type="db.pool.health",
                checked_out=pool.checkedout(),
                size=pool.size(),
                overflow=pool.overflow(),
            ).info("Database pool health check")
        else:
            logger.warning("Database health check failed: {}", error_msg)
            health_status["status"] = "degraded"

        return health_status

    @application.get("/info")
    async def info(
        app_settings: Annotated[Settings, Depends(get_settings)],
    ) -> dict[str, Any]:
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
        }

    instrument_app(application, settings)

    return application


app = create_app()
