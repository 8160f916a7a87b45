"""FastAPI application factory and lifecycle.

``create_app`` builds one application instance with its own database handle,
token service, credential verifier and origin allowlist, all kept on
``app.state``. Middleware run in reverse order of registration, so the
origin gate registered last is the first to see a request.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.constants import (
    CORRELATION_ID_HEADER,
    CORS_MAX_AGE_SECONDS,
    REQUEST_ID_HEADER,
)
from src.api.middleware.error_handler import register_exception_handlers
from src.api.middleware.origin_gate import OriginGateMiddleware
from src.api.middleware.request_context import RequestContextMiddleware
from src.api.middleware.request_logging import RequestLoggingMiddleware
from src.api.routes import animals, auth, health
from src.api.utils.responses import ORJSONResponse
from src.auth.credentials import StaticCredentialVerifier
from src.auth.origins import OriginGate
from src.auth.tokens import TokenService
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.core.observability import instrument_app, setup_tracing
from src.infrastructure.database.session import Database


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Verify the database on startup and release the pool on shutdown.

    Raises:
        RuntimeError: If the database cannot be reached during startup.
    """
    database: Database = app_instance.state.database

    is_healthy, error_msg = await database.check_connection()
    if not is_healthy:
        logger.error("Database connection failed during startup: {}", error_msg)
        await database.close()
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    logger.info("Database connection successful")
    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await database.close()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to build the application with; defaults to
            ``get_settings()``.

    Returns:
        FastAPI: Configured application instance.
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

    application.state.settings = settings
    application.state.database = Database(
        settings.database_config, settings.log_config
    )
    application.state.token_service = TokenService.from_config(settings.auth_config)
    application.state.credential_verifier = StaticCredentialVerifier.from_config(
        settings.auth_config
    )
    origin_gate = OriginGate(settings.cors_config.allowed_origins)
    application.state.origin_gate = origin_gate

    register_exception_handlers(application)

    # 4. CORS headers and preflight responses for allowed origins
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_config.allowed_origins,
        allow_methods=settings.cors_config.allowed_methods,
        allow_headers=settings.cors_config.allowed_headers,
        allow_credentials=False,
        expose_headers=[CORRELATION_ID_HEADER, REQUEST_ID_HEADER],
        max_age=CORS_MAX_AGE_SECONDS,
    )

    # 3. Reject disallowed origins before CORS or any route runs
    application.add_middleware(
        OriginGateMiddleware, gate=origin_gate, settings=settings
    )

    # 2. Access log with timing
    application.add_middleware(
        RequestLoggingMiddleware, log_config=settings.log_config, settings=settings
    )

    # 1. Correlation ID
    application.add_middleware(RequestContextMiddleware)

    application.include_router(health.router)
    application.include_router(auth.router)
    application.include_router(animals.router)

    instrument_app(application, settings)

    logger.info(
        "Application configured",
        environment=settings.environment,
        allowed_origins=sorted(origin_gate.allowed_origins),
        protect_all_writes=settings.auth_config.protect_all_writes,
    )

    return application


app = create_app()
