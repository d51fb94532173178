"""API error response models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: ErrorDetail

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": {
                    "code": "ROBOTS_DISALLOWED",
                    "message": "robots.txt at https://example.com/robots.txt disallows https://example.com/private",
                    "details": {"url": "https://example.com/private"},
                }
            }
        }
    }


class ErrorCodes:
    """Standardized error codes."""

    # 4xx Client Errors
    INVALID_URL = "INVALID_URL"
    URL_BLOCKED_SSRF = "URL_BLOCKED_SSRF"
    ROBOTS_DISALLOWED = "ROBOTS_DISALLOWED"
    NOT_ENOUGH_CONTENT = "NOT_ENOUGH_CONTENT"
    RUN_NOT_FOUND = "RUN_NOT_FOUND"
    INVALID_REQUEST = "INVALID_REQUEST"

    # 5xx Server Errors
    FETCH_FAILED = "FETCH_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
