"""Full audit endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from app.api.models.errors import ErrorResponse
from app.api.models.requests import AnalyzeRequest
from app.api.models.responses import AuditResultResponse
from app.api.v1.deps import audit_error_to_http, get_run_store
from geo_audit.audit.run_store import RunStore
from geo_audit.audit.runner import run_geo_audit
from geo_audit.errors import AuditError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=AuditResultResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed URL"},
        403: {"model": ErrorResponse, "description": "URL resolves to a private or internal address"},
        451: {"model": ErrorResponse, "description": "robots.txt disallows the audit agent"},
        502: {"model": ErrorResponse, "description": "Page could not be fetched"},
    },
    summary="Run a GEO audit for one URL",
    description="""
Fetch the page with and without JavaScript, score it across five pillars and
return prioritized fixes.

**Pillars:**
- **Answer Readiness** (25)
- **Schema & Structured Data** (20)
- **Rendering & Indexability** (20)
- **Evidence Packaging** (15)
- **Entity Clarity** (10)

Red flags subtract up to 20 points. The result is stored and can be fetched
again with `GET /api/v1/runs/{run_id}`.
""",
)
def analyze(
    body: AnalyzeRequest,
    store: RunStore = Depends(get_run_store),
) -> dict:
    """Run a full audit synchronously."""
    try:
        result = run_geo_audit(body.url, store=store)
    except AuditError as exc:
        logger.info("Audit of %s failed: %s: %s", body.url, type(exc).__name__, exc)
        raise audit_error_to_http(exc, body.url) from exc
    return result.to_dict()
