"""Global exception handlers for the FastAPI application.

Application errors are mapped to status codes by type, logged with
sanitized context, and returned as ``ErrorResponse`` bodies. Unexpected
exceptions become a generic 500 whose message never includes internal
details outside development.
"""

import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import ErrorResponse, ServiceInfo
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.context import RequestContext, generate_request_id
from src.core.error_context import sanitize_error_context
from src.core.exceptions import (
    AnimalApiError,
    AuthError,
    ErrorCode,
    NotFoundError,
    OriginError,
    Severity,
    StoreError,
    ValidationError,
)

STATUS_BY_ERROR: tuple[tuple[type[AnimalApiError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (OriginError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (StoreError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings."""
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def request_settings(request: Request) -> Settings:
    """Settings of the application serving ``request``."""
    settings: Settings = request.app.state.settings
    return settings


def status_code_for(exc: AnimalApiError) -> int:
    """HTTP status code for an application error."""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(
    exc: AnimalApiError, settings: Settings | None = None
) -> ORJSONResponse:
    """Render an application error as an ``ErrorResponse``.

    Debug information is attached only in development and only for expected
    errors; storage and other high-severity failures never carry it.

    Args:
        exc: The error to render.
        settings: Application settings; defaults to ``get_settings()``.

    Returns:
        ORJSONResponse: Response with the mapped status code.
    """
    settings = settings or get_settings()

    debug_info = None
    if settings.environment == "development" and exc.is_expected:
        debug_info = {
            "stack_trace": exc.stack_trace,
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=exc.context or None,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=generate_request_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )
    return ORJSONResponse(
        status_code=status_code_for(exc),
        content=error_response.model_dump(mode="json"),
    )


async def app_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ``AnimalApiError`` and its subclasses.

    Raises:
        TypeError: If exc is not an AnimalApiError instance
    """
    if not isinstance(exc, AnimalApiError):
        raise TypeError(f"Expected AnimalApiError, got {type(exc).__name__}")

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "fingerprint": exc.fingerprint,
        },
    )

    if exc.severity in (Severity.HIGH, Severity.CRITICAL) and exc.cause is not None:
        logger.opt(exception=exc.cause).error(
            "Handling {}: {}", type(exc).__name__, exc.message, **error_context
        )
    else:
        logger.warning(
            "Handling {}: {}", type(exc).__name__, exc.message, **error_context
        )

    return build_error_response(exc, request_settings(request))


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI ``RequestValidationError`` with field-level details.

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = request_settings(request)

    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # ("body", "animal_name") -> "animal_name"
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        field_errors.setdefault(field_name, []).append(
            error.get("msg", "Invalid value")
        )

    logger.warning(
        "Request validation failed",
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        method=request.method,
        path=str(request.url.path),
        validation_errors=field_errors,
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        correlation_id=RequestContext.get_correlation_id(),
        request_id=generate_request_id(),
        severity=Severity.LOW.value,
        service_info=get_service_info(settings),
    )
    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump(mode="json"),
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette ``HTTPException`` (unknown routes, wrong methods).

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = request_settings(request)

    error_code = ErrorCode.INTERNAL_ERROR.value
    severity = Severity.MEDIUM
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND.value
        severity = Severity.LOW
    elif exc.status_code == status.HTTP_401_UNAUTHORIZED:
        error_code = ErrorCode.INVALID_TOKEN.value
        severity = Severity.HIGH
    elif exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR:
        error_code = ErrorCode.VALIDATION_ERROR.value
        severity = Severity.LOW

    logger.warning(
        "HTTP exception",
        status=exc.status_code,
        method=request.method,
        path=str(request.url.path),
        detail=exc.detail,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=str(exc.detail),
        correlation_id=RequestContext.get_correlation_id(),
        request_id=generate_request_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
    )
    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle any exception not covered above with a generic 500."""
    settings = request_settings(request)

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )
    logger.opt(exception=exc).error(
        "Unhandled exception: {}", type(exc).__name__, **error_context
    )

    if settings.environment == "development":
        message = f"Internal server error: {type(exc).__name__}"
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }
    else:
        message = "An internal server error occurred"
        debug_info = None

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=generate_request_id(),
        severity=Severity.CRITICAL.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )
    return ORJSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application."""
    app.add_exception_handler(AnimalApiError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
