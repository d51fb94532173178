"""Base types for the rule engine: pillars, rule evaluations and findings."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PillarName(str, Enum):
    """The five fixed scoring pillars."""
    ANSWER_READINESS = "Answer Readiness"
    SCHEMA = "Schema & Structured Data"
    RENDERING = "Rendering & Indexability"
    EVIDENCE = "Evidence Packaging"
    ENTITY = "Entity Clarity"


PILLAR_MAX: dict[PillarName, int] = {
    PillarName.ANSWER_READINESS: 25,
    PillarName.SCHEMA: 20,
    PillarName.RENDERING: 20,
    PillarName.EVIDENCE: 15,
    PillarName.ENTITY: 10,
}

TOTAL_POSSIBLE = sum(PILLAR_MAX.values())

RED_FLAG_PENALTY = 10
PENALTY_CAP = RED_FLAG_PENALTY * 2


class Level(str, Enum):
    """Impact, effort and severity levels for findings."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class RuleEvaluation:
    """Result of a single scored check.

    Attributes:
        id: Stable rule identifier (e.g. "schema_jsonld")
        pillar: Pillar the score is credited to
        title: Human-readable name of the check
        score: Awarded score; negative only for penalty rows
        max: Maximum possible score (0 for penalties)
        passed: Whether the check passed
        finding_id: Remediation identifier, set only when the check failed
        evidence: Short explanation of what was measured
    """
    id: str
    pillar: PillarName
    title: str
    score: float
    max: float
    passed: bool
    finding_id: str | None = None
    evidence: str | None = None
    description: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "pillar": self.pillar.value,
            "title": self.title,
            "description": self.description,
            "score": self.score,
            "max": self.max,
            "passed": self.passed,
            "finding_id": self.finding_id,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class Pillar:
    name: PillarName
    score: float
    max: int

    @property
    def percentage(self) -> int:
        return int(round(self.score / self.max * 100)) if self.max else 0

    def to_dict(self) -> dict:
        return {"name": self.name.value, "score": self.score, "max": self.max}


@dataclass(frozen=True)
class Finding:
    """A deduplicated, user-facing issue with copy-ready remediation."""
    id: str
    severity: Level
    title: str
    why: str
    where: str
    impact: Level
    effort: Level
    snippet_html: str | None = None
    snippet_jsonld: str | None = None
    snippet_js: str | None = None
    evidence: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "why": self.why,
            "where": self.where,
            "impact": self.impact.value,
            "effort": self.effort.value,
            "snippet_html": self.snippet_html,
            "snippet_jsonld": self.snippet_jsonld,
            "snippet_js": self.snippet_js,
            "evidence": self.evidence,
        }


@dataclass(frozen=True)
class TopFix:
    """A prioritized finding carrying its remediation content."""
    id: str
    impact: Level
    effort: Level
    why: str
    where: str
    snippet_html: str | None = None
    snippet_jsonld: str | None = None
    snippet_js: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "impact": self.impact.value,
            "effort": self.effort.value,
            "why": self.why,
            "where": self.where,
            "snippet_html": self.snippet_html,
            "snippet_jsonld": self.snippet_jsonld,
            "snippet_js": self.snippet_js,
        }
