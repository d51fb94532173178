"""Entry points: full audit and FAQ-only generation."""
from __future__ import annotations

import logging
from uuid import uuid4

from geo_audit.audit.faq import maybe_generate_faq_artifact
from geo_audit.audit.models import AuditResult, FaqArtifact
from geo_audit.audit.pipeline import build_audit_context
from geo_audit.audit.run_store import RunStore
from geo_audit.audit.score import score_audit_context
from geo_audit.audit.suggestions import FindingKind

logger = logging.getLogger(__name__)


def run_geo_audit(url: str, store: RunStore | None = None) -> AuditResult:
    """Audit one URL, persist the result and return it.

    Raises:
        ValidationFailed, BlockedHost, RobotsDisallowed, FetchFailed
    """
    run_id = uuid4().hex
    ctx = build_audit_context(url, run_id)
    outcome = score_audit_context(ctx)

    faq_page = None
    if any(finding.id == FindingKind.FAQ_MISSING for finding in outcome.findings):
        faq_page = maybe_generate_faq_artifact(ctx)

    result = AuditResult(
        id=run_id,
        url=ctx.url,
        timestamp=ctx.timestamp,
        geo_score=outcome.geo_score,
        pillars=outcome.pillars,
        evidence=outcome.evidence,
        findings=outcome.findings,
        top_fixes=outcome.top_fixes,
        score_trace=outcome.score_trace,
        faq_page=faq_page,
    )
    (store or RunStore()).put(result)

    logger.info(
        "GEO audit complete run_id=%s url=%s bytes=%d ttfb_ms=%.0f score=%.2f console_errors=%d",
        run_id,
        ctx.url,
        ctx.artifacts.base.bytes,
        ctx.artifacts.base.ttfb_ms,
        result.geo_score,
        len(ctx.artifacts.js.console_errors),
    )
    return result


def generate_faq_only(url: str) -> FaqArtifact | None:
    """Run the render pipeline without scoring. None means not enough content."""
    ctx = build_audit_context(url, uuid4().hex)
    artifact = maybe_generate_faq_artifact(ctx)
    if artifact is None:
        logger.info("Not enough question headings on %s to build an FAQ", ctx.url)
    return artifact
