"""Rendering & Indexability rules."""
from __future__ import annotations

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule, clamp_score

PILLAR = PillarName.RENDERING

TEXT_RATIO_TARGET = 0.6


def _robots_evidence(signals: AuditSignals) -> str:
    if signals.meta_noindex:
        return "meta robots=noindex"
    return "Robots allow" if signals.robots_allow else "Robots disallow"


def evaluate_rendering(signals: AuditSignals) -> list[RuleEvaluation]:
    ratio = signals.text_ratio_no_js
    ratio_ok = ratio >= TEXT_RATIO_TARGET

    if signals.canonical_matches_host:
        canonical_score = 4
    elif signals.canonical_exists:
        canonical_score = 2
    else:
        canonical_score = 0

    if not signals.sitemap_url:
        sitemap_score, sitemap_finding = 0, "sitemap_missing"
    elif signals.sitemap_fresh_within_365:
        sitemap_score, sitemap_finding = 4, None
    else:
        sitemap_score, sitemap_finding = 3, "sitemap_stale"

    if signals.robots_allow and not signals.meta_noindex:
        robots_score = 4
    elif signals.robots_allow:
        robots_score = 2
    else:
        robots_score = 0

    return [
        build_rule(
            id="render_text_ratio",
            pillar=PILLAR,
            title="≥60% of text in no-JS HTML",
            max=8,
            score=8 if ratio_ok else clamp_score(ratio * 8, 8),
            passed=ratio_ok,
            finding_id="text_ratio_low",
            evidence=f"text_ratio_noJS={ratio}",
        ),
        build_rule(
            id="render_canonical",
            pillar=PILLAR,
            title="Canonical matches live URL",
            max=4,
            score=canonical_score,
            passed=canonical_score == 4,
            finding_id="canonical_conflict",
            evidence=signals.canonical or "Not set",
        ),
        build_rule(
            id="render_sitemap",
            pillar=PILLAR,
            title="Sitemap discoverable",
            max=4,
            score=sitemap_score,
            passed=sitemap_score == 4,
            finding_id=sitemap_finding,
            evidence=signals.sitemap_url,
        ),
        build_rule(
            id="render_robots",
            pillar=PILLAR,
            title="Robots.txt + meta robots allow indexing",
            max=4,
            score=robots_score,
            passed=robots_score == 4,
            finding_id="robots_blocking",
            evidence=_robots_evidence(signals),
        ),
    ]
