"""Structured exception hierarchy for consistent error handling.

Every failure the service reports to a caller is an ``AnimalApiError``
subclass. Each carries a machine-readable error code, a caller-safe message,
a severity used to choose log level and whether debug detail may be exposed,
and an optional structured context.

HTTP status mapping lives in ``src.api.middleware.error_handler``:

- ``ValidationError`` -> 400
- ``AuthError`` -> 401
- ``OriginError`` -> 403
- ``NotFoundError`` -> 404
- ``StoreError`` -> 500
"""

import hashlib
import traceback
from enum import Enum

from src.core.types import ErrorContext


class ErrorCode(Enum):
    """Standardized error codes returned in error responses."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input failed validation."""

    NOT_FOUND = "NOT_FOUND"
    """No record exists for the given identifier."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    """Username/password pair did not match the known identity."""

    MISSING_TOKEN = "MISSING_TOKEN"
    """No Authorization header was presented."""

    MALFORMED_HEADER = "MALFORMED_HEADER"
    """Authorization header is not of the form ``Bearer <token>``."""

    INVALID_TOKEN = "INVALID_TOKEN"
    """Token signature, structure or expiry check failed."""

    ORIGIN_NOT_ALLOWED = "ORIGIN_NOT_ALLOWED"
    """Cross-origin request from an origin outside the allowlist."""

    STORE_ERROR = "STORE_ERROR"
    """Storage or transport failure while talking to the database."""


class Severity(Enum):
    """Severity levels used for logging and response shaping."""

    LOW = "LOW"
    """Caller mistakes that are part of normal operation."""

    MEDIUM = "MEDIUM"
    """Unusual conditions that do not indicate a fault."""

    HIGH = "HIGH"
    """Security-relevant rejections or failures of a dependency."""

    CRITICAL = "CRITICAL"
    """Unexpected faults requiring immediate attention."""


class AnimalApiError(Exception):
    """Base exception class for all application errors.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable, caller-safe error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional structured information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Exclude this frame
        self.stack_trace = traceback.format_stack()[:-1]
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Hash the error type and raising location for log grouping.

        Returns:
            str: A 16 character hex digest.
        """
        max_frames = 5
        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in self.stack_trace[-max_frames:]:
            if "site-packages" not in frame and "src/" in frame:
                first_line = frame.strip().split("\n")[0]
                fingerprint_data += f":{first_line}"
        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether this error is a normal-operation outcome (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(AnimalApiError):
    """Raised when caller-supplied data fails validation.

    Args:
        message: Description of the validation failure
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            ErrorCode.VALIDATION_ERROR, message, Severity.LOW, context, cause
        )


class NotFoundError(AnimalApiError):
    """Raised when no record exists for the requested identifier.

    Args:
        message: Description of what was not found
        context: Additional context information about the error
    """

    def __init__(self, message: str, context: ErrorContext | None = None) -> None:
        super().__init__(ErrorCode.NOT_FOUND, message, Severity.LOW, context)


class AuthError(AnimalApiError):
    """Raised when credentials or a bearer token are rejected.

    The error code identifies the reason: ``INVALID_CREDENTIALS``,
    ``MISSING_TOKEN``, ``MALFORMED_HEADER`` or ``INVALID_TOKEN``.

    Args:
        error_code: Reason for the rejection
        message: Caller-safe description of the failure
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.HIGH, None, cause)

    @property
    def reason(self) -> ErrorCode:
        """The rejection reason as an ``ErrorCode`` member."""
        return ErrorCode(self.error_code)


class OriginError(AnimalApiError):
    """Raised when a browser request comes from an origin outside the allowlist.

    Args:
        origin: The rejected ``Origin`` header value
    """

    def __init__(self, origin: str) -> None:
        super().__init__(
            ErrorCode.ORIGIN_NOT_ALLOWED,
            "Not allowed by CORS",
            Severity.HIGH,
            {"origin": origin},
        )


class StoreError(AnimalApiError):
    """Raised when the database cannot complete an operation.

    The message is generic and safe to return; the underlying driver error
    is kept only as ``cause`` for logging.

    Args:
        message: Caller-safe description of the failed operation
        context: Additional context (operation name, record id)
        cause: The storage exception that triggered this error
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.STORE_ERROR, message, Severity.HIGH, context, cause)
