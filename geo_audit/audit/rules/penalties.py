"""Red-flag penalties applied on top of the pillar totals."""
from __future__ import annotations

from dataclasses import replace

from geo_audit.audit.base import PENALTY_CAP, RED_FLAG_PENALTY, PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule

PILLAR = PillarName.RENDERING


def _penalty(id: str, title: str, finding_id: str, evidence: str | None = None) -> RuleEvaluation:
    return build_rule(
        id=id,
        pillar=PILLAR,
        title=title,
        max=0,
        score=-RED_FLAG_PENALTY,
        passed=False,
        finding_id=finding_id,
        evidence=evidence,
    )


def cap_penalties(rules: list[RuleEvaluation], cap: float = PENALTY_CAP) -> tuple[float, list[RuleEvaluation]]:
    """Limit the applied penalty to ``cap``.

    The trimmed amount is credited back onto the last penalty row so the
    rows still sum to the applied total. Returns new rows; inputs are untouched.
    """
    total = -sum(rule.score for rule in rules)
    if total <= cap or not rules:
        return total, list(rules)
    excess = total - cap
    last = rules[-1]
    return cap, [*rules[:-1], replace(last, score=round(last.score + excess, 2))]


def evaluate_penalties(signals: AuditSignals) -> tuple[float, list[RuleEvaluation]]:
    rules: list[RuleEvaluation] = []

    if signals.text_ratio_no_js < 0.5 and signals.base_heading_count <= 1:
        rules.append(
            _penalty(
                "penalty_text_ratio",
                "Red flag: body text only client-rendered",
                "text_ratio_low",
                evidence=f"text_ratio_noJS={signals.text_ratio_no_js}",
            )
        )

    if signals.meta_noindex:
        rules.append(
            _penalty(
                "penalty_noindex",
                "Red flag: Meta robots noindex on canonical content",
                "robots_blocking",
            )
        )
    elif signals.canonical_exists and not signals.canonical_matches_host:
        rules.append(
            _penalty(
                "penalty_canonical",
                "Red flag: Canonical conflicts with live URL",
                "canonical_conflict",
                evidence=signals.canonical,
            )
        )

    return cap_penalties(rules)
