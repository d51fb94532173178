"""FAQ-only generation endpoint."""
from __future__ import annotations

from fastapi import APIRouter, status

from app.api.models.errors import ErrorCodes, ErrorResponse
from app.api.models.requests import AnalyzeRequest
from app.api.models.responses import FaqResponse
from app.api.v1.deps import api_error, audit_error_to_http
from geo_audit.audit.runner import generate_faq_only
from geo_audit.errors import AuditError

router = APIRouter(tags=["FAQ"])


@router.post(
    "/generate-faq",
    response_model=FaqResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed URL"},
        403: {"model": ErrorResponse, "description": "URL resolves to a private or internal address"},
        422: {"model": ErrorResponse, "description": "Fewer than three question headings"},
        451: {"model": ErrorResponse, "description": "robots.txt disallows the audit agent"},
        502: {"model": ErrorResponse, "description": "Page could not be fetched"},
    },
    summary="Generate an FAQ page from question headings",
)
def generate_faq(body: AnalyzeRequest) -> FaqResponse:
    """Render the page and build an FAQ artifact without scoring."""
    try:
        artifact = generate_faq_only(body.url)
    except AuditError as exc:
        raise audit_error_to_http(exc, body.url) from exc

    if artifact is None:
        raise api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            ErrorCodes.NOT_ENOUGH_CONTENT,
            "Not enough question-style headings to build an FAQ (need at least 3)",
            url=body.url,
        )
    return FaqResponse(url=body.url, artifact=artifact.to_dict())
