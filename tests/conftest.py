"""Shared test fixtures and configuration."""
from __future__ import annotations

import pytest

from geo_audit.audit.models import AuditContext, AuditResult, AuditSignals
from geo_audit.audit.reconciler import reconcile
from geo_audit.audit.score import score_audit_context
from geo_audit.fetcher.html_fetcher import FetchResult
from geo_audit.fetcher.js_render_fetcher import RenderedPage, RenderUnavailable
from geo_audit.fetcher.robots import RobotsInfo
from geo_audit.fetcher.sitemap import SitemapMeta

PAGE_URL = "https://example.com/guides/geo-audit"
RUN_TIMESTAMP = "2026-10-18T12:00:00+00:00"

ALLOW_ROBOTS = RobotsInfo(url="https://example.com/robots.txt", allow=True)
FRESH_SITEMAP = SitemapMeta(
    url="https://example.com/sitemap.xml", lastmod="2026-09-01", within_365_days=True
)

ARTICLE_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
    <title>GEO Audit Guide</title>
    <meta name="description" content="How to audit pages for answer engines.">
    <link rel="canonical" href="https://example.com/guides/geo-audit">
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Article", "headline": "GEO Audit Guide",
     "author": {"@type": "Person", "name": "Ada"}, "datePublished": "2026-01-05",
     "publisher": {"@type": "Organization", "name": "Example"},
     "mainEntityOfPage": "https://example.com/guides/geo-audit"}
    </script>
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Organization", "name": "Example",
     "sameAs": ["https://www.linkedin.com/company/example", "https://twitter.com/example"]}
    </script>
</head>
<body>
    <h1>GEO Audit Guide</h1>
    <p>TL;DR: audits show which answers engines can lift from a page.</p>
    <h2>What is a GEO audit?</h2>
    <p>According to <a href="https://research.example.org/geo">a 2025 study</a>, structured pages are cited more often.</p>
    <h2>How is the score computed?</h2>
    <p>Research from <a href="https://data.example.net/report">the annual report</a> shows evidence matters. Updated on March 3, 2026.</p>
    <h2>Why do dates matter?</h2>
    <p>Fresh pages rank better in answer engines.</p>
    <table>
        <caption>Score by pillar</caption>
        <tr><th>Pillar</th><th>Max</th></tr>
        <tr><td>Answer</td><td>25</td></tr>
    </table>
    <img src="/img/chart.png" alt="Chart of scores">
</body>
</html>"""

THIN_HTML = """<!DOCTYPE html>
<html>
<head>
    <title>Pricing</title>
    <link rel="canonical" href="https://example.com/guides/geo-audit">
</head>
<body>
    <h1>Plans and pricing</h1>
    <p>Our plans start small and grow with your team as you add more seats over time and expand usage across departments and regions.</p>
    <h2>Team plan</h2>
    <p>Includes shared dashboards.</p>
</body>
</html>"""

SHELL_HTML = """<!DOCTYPE html>
<html>
<head><title>App</title></head>
<body><div id="root"></div></body>
</html>"""

HYDRATED_HTML = """<!DOCTYPE html>
<html>
<head><title>App</title></head>
<body>
<div id="root">
    <h1>Dashboard</h1>
    <h2>What does the dashboard show?</h2>
    <p>The dashboard shows weekly visibility for every tracked query across all answer engines we monitor.</p>
    <h2>How often is data refreshed?</h2>
    <p>Data refreshes every night at midnight UTC for all connected properties and their sitemaps.</p>
</div>
</body>
</html>"""


@pytest.fixture
def make_context():
    """Build an AuditContext from HTML without any network access."""

    def _make(
        base_html: str,
        js_html: str | None = None,
        *,
        url: str = PAGE_URL,
        robots: RobotsInfo | None = ALLOW_ROBOTS,
        sitemap: SitemapMeta | None = FRESH_SITEMAP,
        js_unavailable: bool = False,
        console_errors: tuple[str, ...] = (),
        timestamp: str = RUN_TIMESTAMP,
    ) -> AuditContext:
        fetch_result = FetchResult(
            html=base_html,
            bytes=len(base_html.encode("utf-8")),
            ttfb_ms=42.0,
            content_type="text/html; charset=utf-8",
            final_url=url,
        )
        if js_unavailable:
            outcome = RenderUnavailable(reason="TimeoutError: navigation timed out")
        else:
            outcome = RenderedPage(
                html=js_html if js_html is not None else base_html,
                console_errors=console_errors,
                screenshot_path="artifacts/run-js.png",
            )
        artifacts = reconcile(url, fetch_result, outcome, "artifacts/run-base.png", robots, sitemap)
        return AuditContext(url=url, artifacts=artifacts, timestamp=timestamp)

    return _make


@pytest.fixture
def make_signals():
    """Build AuditSignals with neutral defaults and keyword overrides."""

    def _make(**overrides) -> AuditSignals:
        values = {
            "url": PAGE_URL,
            "faq_heading_count": 0,
            "tldr_near_top": False,
            "claim_evidence_blocks": 0,
            "claim_citation_pairs": 0,
            "text_ratio_no_js": 1.0,
            "canonical": None,
            "canonical_exists": False,
            "canonical_matches_host": False,
            "sitemap_url": None,
            "sitemap_fresh_within_365": False,
            "robots_allow": True,
            "robots_url": None,
            "meta_noindex": False,
            "inline_date_count": 0,
            "external_link_count": 0,
            "reference_citation_count": 0,
            "has_images": False,
            "alt_coverage": 1.0,
            "table_count": 0,
            "dataset_hint_count": 0,
            "json_ld_count": 0,
            "supported_schema_count": 0,
            "schema_has_rich_properties": False,
            "organization_schema": False,
            "person_or_product_schema": False,
            "same_as_count": 0,
            "updated_on_snippet": None,
            "title_matches_heading": False,
            "base_heading_count": 3,
        }
        values.update(overrides)
        return AuditSignals(**values)

    return _make


@pytest.fixture
def article_html() -> str:
    """Well-structured article: FAQ headings, citations, JSON-LD, table and image."""
    return ARTICLE_HTML


@pytest.fixture
def thin_html() -> str:
    """Server-rendered page with no structured data or question headings."""
    return THIN_HTML


@pytest.fixture
def shell_html() -> str:
    """Client-rendered shell with an empty root element."""
    return SHELL_HTML


@pytest.fixture
def hydrated_html() -> str:
    """The shell after JavaScript has rendered its content."""
    return HYDRATED_HTML


@pytest.fixture
def make_result():
    """Score a context into an AuditResult with a fixed run id."""

    def _make(ctx: AuditContext, run_id: str = "a" * 32) -> AuditResult:
        outcome = score_audit_context(ctx)
        return AuditResult(
            id=run_id,
            url=ctx.url,
            timestamp=ctx.timestamp,
            geo_score=outcome.geo_score,
            pillars=outcome.pillars,
            evidence=outcome.evidence,
            findings=outcome.findings,
            top_fixes=outcome.top_fixes,
            score_trace=outcome.score_trace,
        )

    return _make
