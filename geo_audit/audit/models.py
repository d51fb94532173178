"""Data model for one audit run: render snapshots, context, signals and result."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from geo_audit.audit.base import Finding, Pillar, RuleEvaluation, TopFix
from geo_audit.fetcher.robots import RobotsInfo
from geo_audit.fetcher.sitemap import SitemapMeta


@dataclass(frozen=True)
class ImageRef:
    src: str
    alt: str


@dataclass(frozen=True)
class OutboundLink:
    href: str
    text: str
    is_external: bool


@dataclass(frozen=True)
class RenderSnapshot:
    """Normalized structural view of one HTML render."""
    title: str
    description: str
    headings: tuple[str, ...]
    paragraphs: tuple[str, ...]
    paragraph_word_counts: tuple[int, ...]
    paragraph_has_citation: tuple[bool, ...]
    tldr_near_top: bool
    claim_evidence_blocks: int
    claim_citation_pairs: int
    microdata_types: tuple[str, ...]
    first_paragraph_word_count: int
    reference_citation_count: int
    visible_text_length: int
    total_word_count: int
    inline_dates: tuple[str, ...]
    canonical_url: str | None
    images: tuple[ImageRef, ...]
    tables: int
    dataset_hints: tuple[str, ...]
    outbound_links: tuple[OutboundLink, ...]
    updated_on_snippet: str | None
    has_robots_noindex: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class BaseRender:
    """The no-JS render: snapshot of the raw HTML plus transfer metrics."""
    snapshot: RenderSnapshot
    bytes: int
    ttfb_ms: float


@dataclass(frozen=True)
class JsRender:
    """The JS-executed render, or the no-JS snapshot substituted for it."""
    snapshot: RenderSnapshot
    console_errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class Screenshots:
    base: str | None = None
    js: str | None = None


@dataclass(frozen=True)
class DualRenderArtifacts:
    """Everything gathered for one URL, owned by a single audit run."""
    base: BaseRender
    js: JsRender
    screenshots: Screenshots
    json_ld: tuple[dict[str, Any], ...]
    robots: RobotsInfo | None
    sitemap: SitemapMeta | None
    text_ratio_no_js: float
    missing_headings: tuple[str, ...]
    rendering_mode: str = "dual"
    degraded: tuple[str, ...] = ()


@dataclass(frozen=True)
class AuditContext:
    url: str
    artifacts: DualRenderArtifacts
    timestamp: str


@dataclass(frozen=True)
class AuditSignals:
    """Flat, typed facts the rule engine evaluates."""
    url: str
    faq_heading_count: int
    tldr_near_top: bool
    claim_evidence_blocks: int
    claim_citation_pairs: int
    text_ratio_no_js: float
    canonical: str | None
    canonical_exists: bool
    canonical_matches_host: bool
    sitemap_url: str | None
    sitemap_fresh_within_365: bool
    robots_allow: bool
    robots_url: str | None
    meta_noindex: bool
    inline_date_count: int
    external_link_count: int
    reference_citation_count: int
    has_images: bool
    alt_coverage: float
    table_count: int
    dataset_hint_count: int
    json_ld_count: int
    supported_schema_count: int
    schema_has_rich_properties: bool
    organization_schema: bool
    person_or_product_schema: bool
    same_as_count: int
    updated_on_snippet: str | None
    title_matches_heading: bool
    base_heading_count: int
    json_ld_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class Evidence:
    """Verbatim extracted facts for display alongside the score."""
    text_ratio_no_js: float
    no_js_headings: tuple[str, ...] = ()
    js_headings: tuple[str, ...] = ()
    missing_headings: tuple[str, ...] = ()
    json_ld_types: tuple[str, ...] = ()
    console_errors: tuple[str, ...] = ()
    screenshots: Screenshots = field(default_factory=Screenshots)
    canonical: str | None = None
    sitemap: str | None = None
    robots: str | None = None
    updated_on_text: str | None = None
    sitemap_lastmod: str | None = None
    rendering_mode: str = "dual"
    degraded: tuple[str, ...] = ()
    bytes: int = 0
    ttfb_ms: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data


@dataclass(frozen=True)
class FaqArtifact:
    recommended_path: str
    html: str
    jsonld: str
    provenance: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AuditResult:
    """Complete outcome of one audit run."""
    id: str
    url: str
    timestamp: str
    geo_score: float
    pillars: tuple[Pillar, ...]
    evidence: Evidence
    findings: tuple[Finding, ...]
    top_fixes: tuple[TopFix, ...]
    score_trace: tuple[RuleEvaluation, ...]
    faq_page: FaqArtifact | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        generated = {"faq_page": self.faq_page.to_dict()} if self.faq_page else {}
        return {
            "id": self.id,
            "url": self.url,
            "timestamp": self.timestamp,
            "geo_score": self.geo_score,
            "pillars": [pillar.to_dict() for pillar in self.pillars],
            "evidence": self.evidence.to_dict(),
            "findings": [finding.to_dict() for finding in self.findings],
            "top_fixes": [fix.to_dict() for fix in self.top_fixes],
            "generated_artifacts": generated,
            "score_trace": [rule.to_dict() for rule in self.score_trace],
        }
