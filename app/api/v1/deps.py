"""API dependencies: run store access and audit error mapping."""
from __future__ import annotations

from fastapi import HTTPException, status

from app.api.models.errors import ErrorCodes
from geo_audit.audit.run_store import RunStore
from geo_audit.errors import (
    AuditError,
    BlockedHost,
    FetchFailed,
    RobotsDisallowed,
    ValidationFailed,
)

# Status 451 "Unavailable For Legal Reasons" marks robots.txt refusals
HTTP_451_ROBOTS_DISALLOWED = 451

_ERROR_MAP: list[tuple[type[AuditError], int, str]] = [
    (ValidationFailed, status.HTTP_400_BAD_REQUEST, ErrorCodes.INVALID_URL),
    (BlockedHost, status.HTTP_403_FORBIDDEN, ErrorCodes.URL_BLOCKED_SSRF),
    (RobotsDisallowed, HTTP_451_ROBOTS_DISALLOWED, ErrorCodes.ROBOTS_DISALLOWED),
    (FetchFailed, status.HTTP_502_BAD_GATEWAY, ErrorCodes.FETCH_FAILED),
]


def get_run_store() -> RunStore:
    """Run store bound to the configured runs directory."""
    return RunStore()


def api_error(status_code: int, code: str, message: str, **details) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            }
        },
    )


def audit_error_to_http(exc: AuditError, url: str) -> HTTPException:
    """Map an audit failure to its HTTP status and error code."""
    for error_type, status_code, code in _ERROR_MAP:
        if isinstance(exc, error_type):
            details = {"url": url}
            if isinstance(exc, FetchFailed) and exc.status_code is not None:
                details["upstream_status"] = exc.status_code
            return api_error(status_code, code, str(exc), **details)
    return api_error(
        status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCodes.INTERNAL_ERROR, str(exc), url=url
    )
