"""Audit engine: rule types, registry and the pillar scoring model."""
from geo_audit.audit.base import (
    PILLAR_MAX,
    TOTAL_POSSIBLE,
    Finding,
    Level,
    Pillar,
    PillarName,
    RuleEvaluation,
    TopFix,
)

__all__ = [
    "PILLAR_MAX",
    "TOTAL_POSSIBLE",
    "Finding",
    "Level",
    "Pillar",
    "PillarName",
    "RuleEvaluation",
    "TopFix",
]
