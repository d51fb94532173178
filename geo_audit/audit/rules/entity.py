"""Entity Clarity rules."""
from __future__ import annotations

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule

PILLAR = PillarName.ENTITY


def evaluate_entity_clarity(signals: AuditSignals) -> list[RuleEvaluation]:
    both_entities = signals.organization_schema and signals.person_or_product_schema
    if both_entities:
        entity_score = 4
    elif signals.organization_schema:
        entity_score = 2
    else:
        entity_score = 1

    if signals.same_as_count >= 2:
        same_as_score = 3
    elif signals.same_as_count > 0:
        same_as_score = 1
    else:
        same_as_score = 0

    return [
        build_rule(
            id="entity_schema_pairs",
            pillar=PILLAR,
            title="Organization + Person/Product schema",
            max=4,
            score=entity_score,
            passed=both_entities,
            finding_id="entity_schema_missing",
        ),
        build_rule(
            id="entity_name_consistency",
            pillar=PILLAR,
            title="Consistent H1/title naming",
            max=3,
            score=3 if signals.title_matches_heading else 1,
            passed=signals.title_matches_heading,
            finding_id="name_inconsistent",
        ),
        build_rule(
            id="entity_sameas",
            pillar=PILLAR,
            title="`sameAs` authority links",
            max=3,
            score=same_as_score,
            passed=signals.same_as_count >= 2,
            finding_id="sameas_missing",
            evidence=f"{signals.same_as_count} sameAs link(s).",
        ),
    ]
