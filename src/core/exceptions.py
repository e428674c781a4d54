"""Structured exception hierarchy for consistent error handling.

Every error raised on purpose by the service derives from
:class:`PrimePrintError`. Each carries a machine-readable error code, a
severity, optional structured context and the originating cause. The API
layer maps the concrete subclasses to HTTP status codes, so services never
deal with HTTP directly.

Severity drives logging: LOW and MEDIUM errors are expected outcomes of user
input, HIGH and CRITICAL ones should alert.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Authentication failed or no credentials were supplied."""

    FORBIDDEN = "FORBIDDEN"
    """The caller is authenticated but lacks the required role."""

    CONFLICT = "CONFLICT"
    """The resource already exists."""

    TOO_MANY_ATTEMPTS = "TOO_MANY_ATTEMPTS"
    """Login is temporarily blocked after repeated failures."""

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    """A third-party service failed or returned an unusable answer."""


class Severity(Enum):
    """Severity levels for application errors."""

    LOW = "LOW"
    """Expected errors caused by user input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single operation."""

    HIGH = "HIGH"
    """Errors impacting security or critical functionality."""

    CRITICAL = "CRITICAL"
    """Errors requiring immediate attention."""


class PrimePrintError(Exception):
    """Base exception class for all application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Hash the error type and raising location for error grouping.

        Returns:
            str: A 16 character hex digest.
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "src/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error is a normal outcome (LOW or MEDIUM severity)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error should trigger alerts (HIGH or CRITICAL severity)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(PrimePrintError):
    """Raised when user input does not meet format or business validation rules."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class NotFoundError(PrimePrintError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class UnauthorizedError(PrimePrintError):
    """Raised when credentials are missing, invalid or expired."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.UNAUTHORIZED,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class ForbiddenError(PrimePrintError):
    """Raised when an authenticated caller lacks the required role."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.FORBIDDEN,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class ConflictError(PrimePrintError):
    """Raised when creating a resource that already exists."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.CONFLICT,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class TooManyAttemptsError(PrimePrintError):
    """Raised while an identifier is blocked after repeated failed logins."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.TOO_MANY_ATTEMPTS,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)


class ExternalServiceError(PrimePrintError):
    """Raised when a third-party service cannot fulfil a request."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, context, cause)


class BusinessRuleError(PrimePrintError):
    """Raised when an operation violates a business rule."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.INTERNAL_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)
