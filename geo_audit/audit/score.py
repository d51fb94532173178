"""Aggregate rule evaluations into pillar scores, a GEO score and findings."""
from __future__ import annotations

from dataclasses import dataclass
from functools import reduce

from geo_audit.audit.base import (
    PILLAR_MAX,
    TOTAL_POSSIBLE,
    Finding,
    Pillar,
    PillarName,
    RuleEvaluation,
    TopFix,
)
from geo_audit.audit.models import AuditContext, AuditSignals, Evidence
from geo_audit.audit.registry import RuleRegistry, rule_registry
from geo_audit.audit.rules.penalties import evaluate_penalties
from geo_audit.audit.signals import compute_signals
from geo_audit.audit.suggestions import build_finding, build_top_fixes, page_facts


@dataclass(frozen=True)
class ScoreOutcome:
    """Everything an AuditResult carries except its run id and FAQ artifact."""
    url: str
    geo_score: float
    pillars: tuple[Pillar, ...]
    findings: tuple[Finding, ...]
    top_fixes: tuple[TopFix, ...]
    evidence: Evidence
    score_trace: tuple[RuleEvaluation, ...]
    signals: AuditSignals
    applied_penalty: float


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


def _add_rule(totals: dict[PillarName, float], rule: RuleEvaluation) -> dict[PillarName, float]:
    pillar = rule.pillar
    return {**totals, pillar: clamp(totals[pillar] + rule.score, 0, PILLAR_MAX[pillar])}


def fold_pillar_totals(rules: list[RuleEvaluation]) -> dict[PillarName, float]:
    """Sum rule scores per pillar, clamping to [0, max] after each addition."""
    return reduce(_add_rule, rules, {pillar: 0.0 for pillar in PILLAR_MAX})


def compute_geo_score(totals: dict[PillarName, float], applied_penalty: float) -> float:
    raw = sum(totals.values()) / TOTAL_POSSIBLE * 100
    return round(clamp(raw - applied_penalty, 0, 100), 2)


def collect_finding_ids(rules: list[RuleEvaluation]) -> list[tuple[str, str | None]]:
    """Unique finding ids of failing rows, first-seen order, with the first row's evidence."""
    seen: dict[str, str | None] = {}
    for rule in rules:
        if not rule.passed and rule.finding_id and rule.finding_id not in seen:
            seen[rule.finding_id] = rule.evidence
    return list(seen.items())


def build_evidence(ctx: AuditContext, signals: AuditSignals) -> Evidence:
    artifacts = ctx.artifacts
    sitemap = artifacts.sitemap
    return Evidence(
        text_ratio_no_js=signals.text_ratio_no_js,
        no_js_headings=artifacts.base.snapshot.headings,
        js_headings=artifacts.js.snapshot.headings,
        missing_headings=artifacts.missing_headings,
        json_ld_types=signals.json_ld_types,
        console_errors=artifacts.js.console_errors,
        screenshots=artifacts.screenshots,
        canonical=artifacts.js.snapshot.canonical_url,
        sitemap=sitemap.url if sitemap else None,
        robots=artifacts.robots.url if artifacts.robots else None,
        updated_on_text=artifacts.js.snapshot.updated_on_snippet,
        sitemap_lastmod=sitemap.lastmod if sitemap else None,
        rendering_mode=artifacts.rendering_mode,
        degraded=artifacts.degraded,
        bytes=artifacts.base.bytes,
        ttfb_ms=artifacts.base.ttfb_ms,
    )


def score_audit_context(ctx: AuditContext, registry: RuleRegistry | None = None) -> ScoreOutcome:
    """Evaluate every rule for a context and aggregate the result."""
    registry = registry or rule_registry
    signals = compute_signals(ctx)

    rules = registry.run_all(signals)
    applied_penalty, penalty_rules = evaluate_penalties(signals)

    totals = fold_pillar_totals(rules)
    facts = page_facts(ctx)
    findings = tuple(
        build_finding(finding_id, facts, evidence)
        for finding_id, evidence in collect_finding_ids(rules + penalty_rules)
    )

    return ScoreOutcome(
        url=ctx.url,
        geo_score=compute_geo_score(totals, applied_penalty),
        pillars=tuple(
            Pillar(name=name, score=round(score, 2), max=PILLAR_MAX[name])
            for name, score in totals.items()
        ),
        findings=findings,
        top_fixes=tuple(build_top_fixes(findings)),
        evidence=build_evidence(ctx, signals),
        score_trace=tuple(rules + penalty_rules),
        signals=signals,
        applied_penalty=applied_penalty,
    )
