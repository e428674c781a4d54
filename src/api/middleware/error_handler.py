"""Global exception handlers.

Every error leaves the API as an :class:`ErrorResponse`. Application errors
keep their code, severity and context; the context is sanitized before it is
logged or returned. Stack traces are only included in development.
"""

import traceback
import uuid

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import ErrorResponse, ServiceInfo
from src.api.utils.responses import ORJSONResponse
from src.core.config import Settings, get_settings
from src.core.context import RequestContext
from src.core.error_context import sanitize_dict, sanitize_error_context
from src.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    ErrorCode,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    PrimePrintError,
    Severity,
    TooManyAttemptsError,
    UnauthorizedError,
    ValidationError,
)

ERROR_STATUS_CODES: dict[type[PrimePrintError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    TooManyAttemptsError: status.HTTP_429_TOO_MANY_REQUESTS,
    ExternalServiceError: status.HTTP_502_BAD_GATEWAY,
}

HTTP_ERROR_CODES: dict[int, tuple[ErrorCode, Severity]] = {
    status.HTTP_400_BAD_REQUEST: (ErrorCode.VALIDATION_ERROR, Severity.LOW),
    status.HTTP_401_UNAUTHORIZED: (ErrorCode.UNAUTHORIZED, Severity.HIGH),
    status.HTTP_403_FORBIDDEN: (ErrorCode.FORBIDDEN, Severity.HIGH),
    status.HTTP_404_NOT_FOUND: (ErrorCode.NOT_FOUND, Severity.LOW),
    status.HTTP_405_METHOD_NOT_ALLOWED: (ErrorCode.VALIDATION_ERROR, Severity.LOW),
    status.HTTP_409_CONFLICT: (ErrorCode.CONFLICT, Severity.LOW),
    status.HTTP_429_TOO_MANY_REQUESTS: (ErrorCode.TOO_MANY_ATTEMPTS, Severity.MEDIUM),
}


def get_service_info(settings: Settings) -> ServiceInfo:
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def status_code_for(exc: PrimePrintError) -> int:
    """Map an application error to its HTTP status, 500 when unmapped."""
    for error_class in type(exc).__mro__:
        if error_class in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_class]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(
    status_code: int,
    error_code: str,
    message: str,
    severity: Severity,
    settings: Settings,
    details: dict[str, object] | None = None,
    debug_info: dict[str, object] | None = None,
) -> Response:
    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        details=details,
        correlation_id=RequestContext.get_correlation_id(),
        request_id=f"req-{uuid.uuid4()}",
        severity=severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )
    return ORJSONResponse(
        status_code=status_code, content=error_response.model_dump(mode="json")
    )


async def prime_print_error_handler(request: Request, exc: Exception) -> Response:
    """Convert an application error into its HTTP error response.

    Raises:
        TypeError: If exc is not a PrimePrintError instance.
    """
    if not isinstance(exc, PrimePrintError):
        raise TypeError(f"Expected PrimePrintError, got {type(exc).__name__}")

    settings = get_settings()
    status_code = status_code_for(exc)
    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "fingerprint": exc.fingerprint,
            "actor": RequestContext.get_actor(),
        },
    )
    log = logger.error if exc.should_alert else logger.warning
    log(
        "Handling {}: {}",
        type(exc).__name__,
        exc.message,
        status_code=status_code,
        **error_context,
    )

    details = sanitize_dict(exc.context) if exc.context else None

    debug_info: dict[str, object] | None = None
    if settings.environment == "development":
        debug_info = {
            "stack_trace": exc.stack_trace,
            "error_context": details or {},
            "exception_type": type(exc).__name__,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    return _error_response(
        status_code,
        exc.error_code,
        exc.message,
        exc.severity,
        settings,
        details=details,
        debug_info=debug_info,
    )


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Report request validation failures as 400 with per-field messages.

    Raises:
        TypeError: If exc is not a RequestValidationError instance.
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        # ("body", "email") -> "email"
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:]) or "root"
        field_errors.setdefault(field_name, []).append(
            error.get("msg", "Invalid value")
        )

    logger.warning(
        "Request validation failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        **sanitize_error_context(
            exc,
            {
                "path": str(request.url.path),
                "method": request.method,
                "validation_errors": field_errors,
            },
        ),
    )
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorCode.VALIDATION_ERROR.value,
        "Request validation failed",
        Severity.LOW,
        get_settings(),
        details={"validation_errors": field_errors},
    )


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Wrap Starlette HTTP exceptions (unknown routes, wrong methods).

    Raises:
        TypeError: If exc is not an HTTPException instance.
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    error_code, severity = HTTP_ERROR_CODES.get(
        exc.status_code, (ErrorCode.INTERNAL_ERROR, Severity.HIGH)
    )
    logger.warning(
        "HTTP exception",
        **sanitize_error_context(
            exc,
            {
                "status": exc.status_code,
                "method": request.method,
                "path": str(request.url.path),
                "detail": exc.detail,
            },
        ),
    )
    return _error_response(
        exc.status_code, error_code.value, str(exc.detail), severity, get_settings()
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Turn any unhandled exception into a 500, hiding details in production."""
    settings = get_settings()
    logger.exception(
        "Unhandled exception: {}",
        type(exc).__name__,
        **sanitize_error_context(
            exc,
            {
                "request_method": request.method,
                "request_path": str(request.url.path),
            },
        ),
    )

    details: dict[str, object] | None = None
    debug_info: dict[str, object] | None = None
    if settings.environment == "production":
        message = "An internal server error occurred"
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR.value,
        message,
        Severity.CRITICAL,
        settings,
        details=details,
        debug_info=debug_info,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PrimePrintError, prime_print_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.info("Exception handlers registered")
