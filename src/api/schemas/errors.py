"""Uniform error response body.

Every non-2xx response produced by the exception handlers or the origin
middleware uses ``ErrorResponse``. The human-readable text is exposed both
as ``error`` and ``message`` so front ends reading either key keep working.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator


class ServiceInfo(BaseModel):
    """Identifies the service that produced an error."""

    name: str = Field(..., description="Name of the service", examples=["Animal API"])
    version: str = Field(..., description="Version of the service", examples=["1.0.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "INVALID_TOKEN"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["animal_name is required.", "No animal found with id 7"],
    )
    error: str = Field(
        default="",
        description="Same text as message",
        examples=["Invalid credentials"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (e.g. field-level validation errors)",
    )
    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Unique identifier of this error response",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Time the error occurred (UTC)",
    )
    severity: str | None = Field(
        default=None,
        description="Error severity (LOW, MEDIUM, HIGH, CRITICAL)",
    )
    service_info: ServiceInfo | None = Field(
        default=None,
        description="Service that generated the error",
    )
    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (development environment only)",
    )

    @model_validator(mode="after")
    def _mirror_message(self) -> "ErrorResponse":
        if not self.error:
            self.error = self.message
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "MISSING_TOKEN",
                    "message": "Missing Authorization header",
                    "error": "Missing Authorization header",
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2025-01-10T12:00:00+00:00",
                    "severity": "HIGH",
                    "service_info": {
                        "name": "Animal API",
                        "version": "1.0.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "NOT_FOUND",
                    "message": "No animal found with id 42",
                    "error": "No animal found with id 42",
                    "details": {"animal_id": 42},
                    "timestamp": "2025-01-10T12:00:01+00:00",
                    "severity": "LOW",
                },
            ]
        }
    }
