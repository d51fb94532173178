"""Shared helpers for rule evaluators."""
from __future__ import annotations

import math

from geo_audit.audit.base import PillarName, RuleEvaluation


def clamp_score(value: float, maximum: float) -> float:
    if math.isnan(value):
        return 0
    return max(0, min(value, maximum))


def build_rule(
    id: str,
    pillar: PillarName,
    title: str,
    max: float,
    score: float,
    passed: bool,
    finding_id: str | None = None,
    evidence: str | None = None,
    description: str | None = None,
) -> RuleEvaluation:
    """Build a RuleEvaluation with the score rounded to 2 decimals."""
    return RuleEvaluation(
        id=id,
        pillar=pillar,
        title=title,
        score=round(score, 2),
        max=max,
        passed=passed,
        finding_id=None if passed else finding_id,
        evidence=evidence,
        description=description,
    )
