"""API Pydantic models."""
from app.api.models.errors import ErrorCodes, ErrorDetail, ErrorResponse
from app.api.models.requests import AnalyzeRequest
from app.api.models.responses import AuditResultResponse, FaqResponse, HealthResponse

__all__ = [
    "AnalyzeRequest",
    "AuditResultResponse",
    "FaqResponse",
    "HealthResponse",
    "ErrorResponse",
    "ErrorDetail",
    "ErrorCodes",
]
