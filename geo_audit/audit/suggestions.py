"""Turn finding identifiers into copy-ready fixes.

Every builder is a pure function of the audit context: the audited host, the
page title and the run date (taken from the context timestamp), so the same
context always renders the same snippets.
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from html import escape
from urllib.parse import urlparse

from geo_audit.audit.base import Finding, Level, TopFix
from geo_audit.audit.models import AuditContext

logger = logging.getLogger(__name__)

MAX_TOP_FIXES = 5
FAQ_SNIPPET_ITEMS = 3
FAQ_SNIPPET_HEADING = re.compile(r"\b(?:what|how|why|faq|when|where)", re.IGNORECASE)
FAQ_PLACEHOLDER_ANSWER = "Add a concise, evidence-backed answer in 80–120 words."


class FindingKind(str, Enum):
    FAQ_MISSING = "faq_missing"
    TLDR_MISSING = "tldr_missing"
    CLAIM_EVIDENCE_GAP = "claim_evidence_gap"
    CLAIM_NO_CITATION = "claim_no_citation"
    JSONLD_MISSING = "jsonld_missing"
    SCHEMA_PROPERTIES_SPARSE = "schema_properties_sparse"
    TEXT_RATIO_LOW = "text_ratio_low"
    CANONICAL_CONFLICT = "canonical_conflict"
    SITEMAP_MISSING = "sitemap_missing"
    SITEMAP_STALE = "sitemap_stale"
    ROBOTS_BLOCKING = "robots_blocking"
    INLINE_DATES_MISSING = "inline_dates_missing"
    OUTBOUND_LINKS_MISSING = "outbound_links_missing"
    ALT_TEXT_MISSING = "alt_text_missing"
    TABLE_MISSING = "table_missing"
    ENTITY_SCHEMA_MISSING = "entity_schema_missing"
    NAME_INCONSISTENT = "name_inconsistent"
    SAMEAS_MISSING = "sameas_missing"


@dataclass(frozen=True)
class Suggestion:
    impact: Level
    effort: Level
    title: str
    why: str
    where: str
    snippet_html: str | None = None
    snippet_jsonld: str | None = None
    snippet_js: str | None = None


@dataclass(frozen=True)
class PageFacts:
    """Values every snippet is parameterized with."""
    url: str
    domain: str
    origin: str
    path: str
    title: str
    iso_date: str
    display_date: str
    headings: tuple[str, ...]
    paragraphs: tuple[str, ...]


def display_date(moment: datetime) -> str:
    """'October 18, 2026' style date."""
    return f"{moment:%B} {moment.day}, {moment.year}"


def run_date(ctx: AuditContext) -> datetime:
    return datetime.fromisoformat(ctx.timestamp)


def page_facts(ctx: AuditContext) -> PageFacts:
    parsed = urlparse(ctx.url)
    domain = parsed.hostname or ctx.url
    artifacts = ctx.artifacts
    moment = run_date(ctx)
    return PageFacts(
        url=ctx.url,
        domain=domain,
        origin=f"{parsed.scheme}://{parsed.netloc}",
        path=parsed.path or "/",
        title=artifacts.js.snapshot.title or artifacts.base.snapshot.title or domain,
        iso_date=moment.date().isoformat(),
        display_date=display_date(moment),
        headings=artifacts.js.snapshot.headings,
        paragraphs=artifacts.js.snapshot.paragraphs,
    )


def _json(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _faq_missing(facts: PageFacts) -> Suggestion:
    questions = [h for h in facts.headings if FAQ_SNIPPET_HEADING.search(h)][:FAQ_SNIPPET_ITEMS]
    pairs = [
        (
            re.sub(r"[:?]+$", "?", heading),
            facts.paragraphs[idx] if idx < len(facts.paragraphs) else FAQ_PLACEHOLDER_ANSWER,
        )
        for idx, heading in enumerate(questions)
    ]
    items = "\n".join(
        f'<details class="border border-zinc-200 rounded-lg p-4">\n'
        f'  <summary class="font-semibold">{escape(question)}</summary>\n'
        f'  <p class="mt-2 text-sm leading-6">{escape(answer)}</p>\n'
        f"</details>"
        for question, answer in pairs
    )
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.LOW,
        title="Add visible FAQ with matching JSON-LD",
        why="No FAQ/Q&A headings detected, so the page cannot answer common queries directly.",
        where="After the section that introduces the product's workflow.",
        snippet_html=(
            '<section aria-labelledby="faq-title" class="space-y-4">\n'
            '  <h2 id="faq-title" class="text-2xl font-semibold">Frequently Asked Questions</h2>\n'
            f"  {items}\n"
            f'  <p class="text-sm text-muted-foreground">Generated from {escape(facts.url)} '
            f"on {facts.display_date}.</p>\n"
            "</section>"
        ),
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "FAQPage",
            "mainEntity": [
                {
                    "@type": "Question",
                    "name": question,
                    "acceptedAnswer": {"@type": "Answer", "text": answer},
                }
                for question, answer in pairs
            ],
            "mainEntityOfPage": facts.url,
        }),
    )


def _tldr_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Add TL;DR summary near the hero",
        why="No TL;DR or key takeaway statements were found within the first screenful.",
        where="Immediately after the hero paragraph.",
        snippet_html=(
            '<section class="rounded-lg border border-amber-200 bg-amber-50 p-4">\n'
            '  <p class="text-sm font-semibold tracking-wide text-amber-900">TL;DR</p>\n'
            '  <p class="text-base text-amber-900/90">\n'
            "    {Replace with a 2-sentence summary that states the claim and the measurable "
            "outcome customers care about.}\n"
            "  </p>\n"
            "</section>"
        ),
    )


def _claim_evidence_gap(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.MEDIUM,
        title="Pair each claim with inline evidence",
        why="Paragraphs mention benefits without citing primary sources or data.",
        where="Within the first two body sections.",
        snippet_html=(
            "<p>\n"
            "  <strong>Claim:</strong> Teams that ship weekly GEO audits improve answer surfaces "
            "within 2 sprints.\n"
            '  <strong>Evidence:</strong> According to <a href="https://example.com/report-2025" '
            'target="_blank" rel="noopener">Forrester, 2025</a>,\n'
            "  programs with structured audits saw a 31% lift in AI-ready snippets.\n"
            "</p>"
        ),
    )


def _claim_no_citation(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.MEDIUM,
        title="Add citations next to bold claims",
        why="Claims are not followed by outbound, primary-source links.",
        where="Wherever metrics or rankings are listed.",
        snippet_html=(
            "<p>\n"
            f"  <strong>Claim:</strong> {escape(facts.title)} reduces hallucinated answers by 48%.\n"
            f'  <strong>Evidence:</strong> According to <a href="https://data.{facts.domain}/geo-study.csv" '
            'target="_blank" rel="noopener">Internal Study, 2025</a>\n'
            "  across 120 intents.\n"
            "</p>"
        ),
    )


def _jsonld_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.LOW,
        title="Add Article schema describing the page",
        why="No JSON-LD blocks were detected.",
        where="<head>",
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "Article",
            "headline": facts.title,
            "author": {"@type": "Organization", "name": facts.domain},
            "datePublished": facts.iso_date,
            "dateModified": facts.iso_date,
            "mainEntityOfPage": facts.url,
            "publisher": {"@type": "Organization", "name": facts.domain},
        }),
    )


def _schema_properties_sparse(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Expand schema with author, dates, publisher, and mainEntity",
        why="Schema is missing author/publisher/date properties required for rich results.",
        where="<head>",
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "Article",
            "headline": facts.title,
            "author": {"@type": "Person", "name": "Please add editor name"},
            "datePublished": facts.iso_date,
            "dateModified": facts.iso_date,
            "publisher": {
                "@type": "Organization",
                "name": facts.domain,
                "logo": {"@type": "ImageObject", "url": f"https://{facts.domain}/logo.png"},
            },
            "mainEntityOfPage": facts.url,
        }),
    )


def _text_ratio_low(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.MEDIUM,
        title="Server-render primary content to improve text_ratio_noJS",
        why="Most of the copy renders only after hydration, so crawlers miss it.",
        where="Page-level data fetching (Next.js).",
        snippet_js=(
            "export async function getStaticProps() {\n"
            f"  const res = await fetch(`${{process.env.CONTENT_API}}/pages{facts.path}`);\n"
            "  const page = await res.json();\n"
            "  return {\n"
            "    props: { page },\n"
            "    revalidate: 3600\n"
            "  };\n"
            "}"
        ),
    )


def _canonical_conflict(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Set a canonical that matches the live URL",
        why="The canonical link points to a different host or is missing.",
        where="<head>",
        snippet_html=f'<link rel="canonical" href="{escape(facts.url)}" />',
    )


def _sitemap_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Expose sitemap in robots.txt",
        why="No sitemap file was discovered via robots.txt or default locations.",
        where=f"https://{facts.domain}/robots.txt",
        snippet_html=f"User-agent: *\nAllow: /\nSitemap: https://{facts.domain}/sitemap.xml",
    )


def _sitemap_stale(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Refresh sitemap <lastmod> within 365 days",
        why="Sitemap lastmod is older than one year.",
        where="build pipeline that writes sitemap.xml",
        snippet_js="\n".join([
            "import { writeFileSync } from 'node:fs';",
            "",
            'const lastmod = new Date().toISOString().split("T")[0];',
            "const urls = [",
            f"  {{ loc: '{facts.url}', lastmod }}",
            "];",
            "",
            "const xmlBody = urls",
            "  .map(url => `<url><loc>${url.loc}</loc><lastmod>${url.lastmod}</lastmod></url>`)",
            "  .join('');",
            "const xml = [",
            "  '<?xml version=\"1.0\" encoding=\"UTF-8\"?>',",
            "  '<urlset xmlns=\"http://www.sitemaps.org/schemas/sitemap/0.9\">',",
            "  xmlBody,",
            "  '</urlset>'",
            "].join('\\n');",
            "",
            "writeFileSync('public/sitemap.xml', xml);",
        ]),
    )


def _robots_blocking(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.HIGH,
        effort=Level.LOW,
        title="Allow GEO crawler access",
        why="robots.txt disallows this path for generic user-agents.",
        where=f"https://{facts.domain}/robots.txt",
        snippet_html=(
            "User-agent: *\nAllow: /\n\n"
            "User-agent: GPTBot\nAllow: /\n"
            f"Sitemap: https://{facts.domain}/sitemap.xml"
        ),
    )


def _inline_dates_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Add inline updated-on dates",
        why="No inline dates were found near key claims.",
        where="Under the heading or within stat blocks.",
        snippet_html=(
            "<p>\n"
            f'  <time datetime="{facts.iso_date}">Updated on {facts.display_date}</time> '
            "– GEO benchmarks refreshed monthly.\n"
            "</p>"
        ),
    )


def _outbound_links_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.MEDIUM,
        title="Link to primary research for each stat",
        why="Fewer than 2 outbound citations were detected.",
        where="Where stats or methodologies are presented.",
        snippet_html=(
            "<p>\n"
            f'  <strong>Evidence:</strong> Based on <a href="https://research.{facts.domain}/'
            'geo-trends-2025.pdf" target="_blank" rel="noopener">Geo Trends 2025</a>.\n'
            "</p>"
        ),
    )


def _alt_text_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Provide descriptive alt text on hero and chart images",
        why="Most images lack alt text, so assistive tech and crawlers miss the context.",
        where="Hero illustrations and data charts.",
        snippet_html=(
            "<figure>\n"
            '  <img src="/images/geo-score.png" alt="Chart showing GEO score climbing from 42 '
            'to 78 in 4 weeks" />\n'
            "  <figcaption>Weekly GEO score trend once audits were automated.</figcaption>\n"
            "</figure>"
        ),
    )


def _table_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.MEDIUM,
        title="Publish structured table with downloadable CSV",
        why="No tables or data downloads detected despite metrics being referenced.",
        where="After the methodology section.",
        snippet_html=(
            '<table class="w-full text-sm">\n'
            "  <caption>Weekly GEO score impact</caption>\n"
            "  <thead>\n"
            "    <tr><th>Week</th><th>Score</th><th>Primary Fix</th></tr>\n"
            "  </thead>\n"
            "  <tbody>\n"
            "    <tr><td>1</td><td>42</td><td>Added TL;DR</td></tr>\n"
            "    <tr><td>4</td><td>78</td><td>Shipped FAQ schema</td></tr>\n"
            "  </tbody>\n"
            "</table>"
        ),
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "Dataset",
            "name": "Weekly GEO score impact",
            "description": f"Key figures from {facts.title}.",
            "distribution": [
                {
                    "@type": "DataDownload",
                    "encodingFormat": "text/csv",
                    "contentUrl": f"{facts.origin}/downloads/geo-score.csv",
                }
            ],
        }),
    )


def _entity_schema_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.MEDIUM,
        effort=Level.LOW,
        title="Declare Organization and Person entities",
        why="Schema lacks Organization/WebSite + Person/Product definitions.",
        where="<head>",
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "Organization",
            "name": facts.domain,
            "url": facts.origin,
            "logo": f"https://{facts.domain}/logo.png",
            "sameAs": [
                f"https://www.linkedin.com/company/{facts.domain}",
                f"https://twitter.com/{facts.domain}",
            ],
        }),
    )


def _name_inconsistent(facts: PageFacts) -> Suggestion:
    title = escape(facts.title)
    return Suggestion(
        impact=Level.LOW,
        effort=Level.LOW,
        title="Align H1, title, and schema names",
        why="The H1 text does not match the <title> and schema headline.",
        where="Hero heading and metadata.",
        snippet_html=f'<h1>{title}</h1>\n<meta name="og:title" content="{title}" />',
    )


def _sameas_missing(facts: PageFacts) -> Suggestion:
    return Suggestion(
        impact=Level.LOW,
        effort=Level.LOW,
        title="Add sameAs references",
        why="Organization schema is missing sameAs links to public profiles.",
        where="Organization JSON-LD block.",
        snippet_jsonld=_json({
            "@context": "https://schema.org",
            "@type": "Organization",
            "name": facts.domain,
            "url": facts.origin,
            "sameAs": [
                f"https://en.wikipedia.org/wiki/{facts.domain}",
                f"https://www.crunchbase.com/organization/{facts.domain}",
            ],
        }),
    )


BUILDERS: dict[FindingKind, Callable[[PageFacts], Suggestion]] = {
    FindingKind.FAQ_MISSING: _faq_missing,
    FindingKind.TLDR_MISSING: _tldr_missing,
    FindingKind.CLAIM_EVIDENCE_GAP: _claim_evidence_gap,
    FindingKind.CLAIM_NO_CITATION: _claim_no_citation,
    FindingKind.JSONLD_MISSING: _jsonld_missing,
    FindingKind.SCHEMA_PROPERTIES_SPARSE: _schema_properties_sparse,
    FindingKind.TEXT_RATIO_LOW: _text_ratio_low,
    FindingKind.CANONICAL_CONFLICT: _canonical_conflict,
    FindingKind.SITEMAP_MISSING: _sitemap_missing,
    FindingKind.SITEMAP_STALE: _sitemap_stale,
    FindingKind.ROBOTS_BLOCKING: _robots_blocking,
    FindingKind.INLINE_DATES_MISSING: _inline_dates_missing,
    FindingKind.OUTBOUND_LINKS_MISSING: _outbound_links_missing,
    FindingKind.ALT_TEXT_MISSING: _alt_text_missing,
    FindingKind.TABLE_MISSING: _table_missing,
    FindingKind.ENTITY_SCHEMA_MISSING: _entity_schema_missing,
    FindingKind.NAME_INCONSISTENT: _name_inconsistent,
    FindingKind.SAMEAS_MISSING: _sameas_missing,
}

FALLBACK = Suggestion(
    impact=Level.LOW,
    effort=Level.LOW,
    title="Review recommendation",
    why="See audit output.",
    where="Page body",
)


def suggest(finding_id: str, facts: PageFacts) -> Suggestion:
    try:
        kind = FindingKind(finding_id)
    except ValueError:
        logger.warning("No suggestion template for finding %r", finding_id)
        return FALLBACK
    return BUILDERS[kind](facts)


def build_finding(finding_id: str, facts: PageFacts, evidence: str | None = None) -> Finding:
    suggestion = suggest(finding_id, facts)
    return Finding(
        id=finding_id,
        severity=suggestion.impact,
        title=suggestion.title,
        why=suggestion.why,
        where=suggestion.where,
        impact=suggestion.impact,
        effort=suggestion.effort,
        snippet_html=suggestion.snippet_html,
        snippet_jsonld=suggestion.snippet_jsonld,
        snippet_js=suggestion.snippet_js,
        evidence=evidence,
    )


def build_top_fixes(findings: list[Finding] | tuple[Finding, ...]) -> list[TopFix]:
    """The first five findings, in order, as prioritized fixes."""
    return [
        TopFix(
            id=finding.id,
            impact=finding.impact,
            effort=finding.effort,
            why=finding.why,
            where=finding.where,
            snippet_html=finding.snippet_html,
            snippet_jsonld=finding.snippet_jsonld,
            snippet_js=finding.snippet_js,
        )
        for finding in findings[:MAX_TOP_FIXES]
    ]
