"""API response models."""
from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

LevelName = Literal["low", "medium", "high"]


class PillarScore(BaseModel):
    """Score for one of the five pillars."""

    name: str
    score: float = Field(..., ge=0)
    max: int = Field(..., gt=0)


class RuleTrace(BaseModel):
    """One scored check; penalty rows have max 0 and a negative score."""

    id: str
    pillar: str
    title: str
    description: str | None = None
    score: float
    max: float
    passed: bool
    finding_id: str | None = None
    evidence: str | None = None


class FindingItem(BaseModel):
    """Deduplicated issue with copy-ready remediation."""

    id: str
    severity: LevelName
    title: str
    why: str
    where: str
    impact: LevelName
    effort: LevelName
    snippet_html: str | None = None
    snippet_jsonld: str | None = None
    snippet_js: str | None = None
    evidence: str | None = None


class TopFixItem(BaseModel):
    """Prioritized fix."""

    id: str
    impact: LevelName
    effort: LevelName
    why: str
    where: str
    snippet_html: str | None = None
    snippet_jsonld: str | None = None
    snippet_js: str | None = None


class ScreenshotRefs(BaseModel):
    base: str | None = None
    js: str | None = None


class EvidenceSummary(BaseModel):
    """Verbatim extracted facts backing the score."""

    text_ratio_no_js: float
    no_js_headings: list[str] = Field(default_factory=list)
    js_headings: list[str] = Field(default_factory=list)
    missing_headings: list[str] = Field(default_factory=list)
    json_ld_types: list[str] = Field(default_factory=list)
    console_errors: list[str] = Field(default_factory=list)
    screenshots: ScreenshotRefs = Field(default_factory=ScreenshotRefs)
    canonical: str | None = None
    sitemap: str | None = None
    robots: str | None = None
    updated_on_text: str | None = None
    sitemap_lastmod: str | None = None
    rendering_mode: Literal["dual", "single"] = "dual"
    degraded: list[str] = Field(default_factory=list)
    bytes: int = 0
    ttfb_ms: float = 0.0


class FaqArtifactModel(BaseModel):
    """Publishable FAQ block with matching JSON-LD."""

    recommended_path: str
    html: str
    jsonld: str
    provenance: str


class GeneratedArtifacts(BaseModel):
    faq_page: FaqArtifactModel | None = None


class AuditResultResponse(BaseModel):
    """Complete audit result."""

    id: str = Field(..., description="Run identifier (32 hex chars)")
    url: str
    timestamp: datetime
    geo_score: float = Field(..., ge=0, le=100, description="GEO score (0-100)")
    pillars: list[PillarScore]
    evidence: EvidenceSummary
    findings: list[FindingItem]
    top_fixes: list[TopFixItem] = Field(..., max_length=5)
    generated_artifacts: GeneratedArtifacts = Field(default_factory=GeneratedArtifacts)
    score_trace: list[RuleTrace]


class FaqResponse(BaseModel):
    """Response for FAQ-only generation."""

    url: str
    artifact: FaqArtifactModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    timestamp: datetime
    checks: dict[str, bool] = Field(
        default_factory=dict, description="Individual health check results"
    )
