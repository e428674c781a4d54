"""Error response body shared by every endpoint."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Identifies the deployment that produced an error."""

    name: str = Field(..., examples=["Prime Print"])
    version: str = Field(..., examples=["0.1.0"])
    environment: str = Field(..., examples=["development", "production"])


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error_code: str = Field(
        ...,
        description="Machine-readable error code",
        examples=["VALIDATION_ERROR", "NOT_FOUND", "UNAUTHORIZED"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Invalid credentials", "Tracking not found"],
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Error specific details such as field errors or lockout minutes",
        examples=[{"remaining_attempts": 3}, {"remaining_minutes": 12}],
    )
    correlation_id: str | None = Field(
        default=None,
        description="Correlation ID of the request",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    severity: str | None = Field(
        default=None, examples=["LOW", "MEDIUM", "HIGH", "CRITICAL"]
    )
    service_info: ServiceInfo | None = None
    request_id: str | None = Field(
        default=None, examples=["req-660e8400-e29b-41d4-a716-446655440000"]
    )
    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Stack trace and context, only populated in development",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "UNAUTHORIZED",
                    "message": "Invalid credentials",
                    "details": {"remaining_attempts": 4},
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2026-03-02T12:00:00+00:00",
                    "severity": "HIGH",
                    "service_info": {
                        "name": "Prime Print",
                        "version": "0.1.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "TOO_MANY_ATTEMPTS",
                    "message": "Too many failed attempts. Try again in 12 minutes",
                    "details": {"remaining_minutes": 12},
                    "timestamp": "2026-03-02T12:00:01+00:00",
                    "severity": "MEDIUM",
                },
            ]
        }
    }
