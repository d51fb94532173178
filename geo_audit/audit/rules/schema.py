"""Schema & Structured Data rules."""
from __future__ import annotations

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule

PILLAR = PillarName.SCHEMA


def evaluate_schema(signals: AuditSignals) -> list[RuleEvaluation]:
    has_json_ld = signals.json_ld_count > 0
    has_supported = signals.supported_schema_count > 0

    return [
        build_rule(
            id="schema_jsonld",
            pillar=PILLAR,
            title="JSON-LD present",
            max=6,
            score=6 if has_json_ld else 0,
            passed=has_json_ld,
            finding_id="jsonld_missing",
            evidence=f"{signals.json_ld_count} script(s)" if has_json_ld else "No JSON-LD detected.",
        ),
        build_rule(
            id="schema_supported_types",
            pillar=PILLAR,
            title="Supported schema types (Article/FAQ/HowTo/Dataset)",
            max=8,
            score=8 if has_supported else 0,
            passed=has_supported,
            finding_id="jsonld_missing",
            evidence=f"{signals.supported_schema_count} supported block(s).",
        ),
        build_rule(
            id="schema_rich_properties",
            pillar=PILLAR,
            title="Non-trivial properties (author/dates/publisher/mainEntity)",
            max=6,
            score=6 if signals.schema_has_rich_properties else 0,
            passed=signals.schema_has_rich_properties,
            finding_id="schema_properties_sparse",
        ),
    ]
