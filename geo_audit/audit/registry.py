"""Rule registry mapping each pillar to its evaluators."""
from __future__ import annotations

from collections.abc import Callable

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.answer_readiness import evaluate_answer_readiness
from geo_audit.audit.rules.entity import evaluate_entity_clarity
from geo_audit.audit.rules.evidence import evaluate_evidence
from geo_audit.audit.rules.rendering import evaluate_rendering
from geo_audit.audit.rules.schema import evaluate_schema

RuleEvaluator = Callable[[AuditSignals], list[RuleEvaluation]]


class RuleRegistry:
    """Registry of pure rule evaluators, grouped by pillar.

    Usage:
        registry = RuleRegistry()
        registry.register(PillarName.SCHEMA, evaluate_schema)
        rows = registry.run_all(signals)
    """

    def __init__(self):
        self._evaluators: dict[PillarName, list[RuleEvaluator]] = {}

    def register(self, pillar: PillarName, evaluator: RuleEvaluator) -> None:
        self._evaluators.setdefault(pillar, []).append(evaluator)

    def get_by_pillar(self, pillar: PillarName) -> list[RuleEvaluator]:
        return list(self._evaluators.get(pillar, []))

    def run_pillar(self, pillar: PillarName, signals: AuditSignals) -> list[RuleEvaluation]:
        return [rule for evaluator in self.get_by_pillar(pillar) for rule in evaluator(signals)]

    def run_all(self, signals: AuditSignals) -> list[RuleEvaluation]:
        """Evaluate every registered pillar in registration order."""
        return [rule for pillar in self._evaluators for rule in self.run_pillar(pillar, signals)]


def build_default_registry() -> RuleRegistry:
    registry = RuleRegistry()
    registry.register(PillarName.ANSWER_READINESS, evaluate_answer_readiness)
    registry.register(PillarName.SCHEMA, evaluate_schema)
    registry.register(PillarName.RENDERING, evaluate_rendering)
    registry.register(PillarName.EVIDENCE, evaluate_evidence)
    registry.register(PillarName.ENTITY, evaluate_entity_clarity)
    return registry


# Global registry instance
rule_registry = build_default_registry()
