"""Evidence Packaging rules."""
from __future__ import annotations

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule, clamp_score

PILLAR = PillarName.EVIDENCE

# Every five reference citations count as one outbound link, up to three
CITATIONS_PER_LINK_UNIT = 5
MAX_CITATION_UNITS = 3


def evaluate_evidence(signals: AuditSignals) -> list[RuleEvaluation]:
    has_dates = signals.inline_date_count > 0

    boost_units = min(
        MAX_CITATION_UNITS, signals.reference_citation_count // CITATIONS_PER_LINK_UNIT
    )
    outbound_ok = signals.external_link_count >= 2 or boost_units >= 2

    alt_ok = not signals.has_images or signals.alt_coverage >= 0.8
    if alt_ok:
        alt_score = 4
    elif signals.alt_coverage >= 0.5:
        alt_score = 3
    else:
        alt_score = 2

    has_data = signals.table_count > 0 or signals.dataset_hint_count > 0

    return [
        build_rule(
            id="evidence_inline_dates",
            pillar=PILLAR,
            title="Inline “Updated on” or factual dates",
            max=3,
            score=3 if has_dates else 0,
            passed=has_dates,
            finding_id="inline_dates_missing",
        ),
        build_rule(
            id="evidence_outbound",
            pillar=PILLAR,
            title="Primary-source outbound links",
            max=5,
            score=clamp_score((signals.external_link_count + boost_units) * 2, 5),
            passed=outbound_ok,
            finding_id="outbound_links_missing",
            evidence=(
                f"{signals.external_link_count} external link(s), "
                f"{signals.reference_citation_count} citation reference(s)."
            ),
        ),
        build_rule(
            id="evidence_alt_text",
            pillar=PILLAR,
            title="Descriptive alt text",
            max=4,
            score=alt_score,
            passed=alt_ok,
            finding_id="alt_text_missing",
            evidence=(
                f"alt coverage {signals.alt_coverage * 100:.0f}%"
                if signals.has_images
                else "No images"
            ),
        ),
        build_rule(
            id="evidence_data_table",
            pillar=PILLAR,
            title="Tables or downloadable datasets",
            max=3,
            score=3 if has_data else 0,
            passed=has_data,
            finding_id="table_missing",
        ),
    ]
