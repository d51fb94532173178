"""Answer Readiness: can an answer engine lift a direct answer from the page?"""
from __future__ import annotations

from geo_audit.audit.base import PillarName, RuleEvaluation
from geo_audit.audit.models import AuditSignals
from geo_audit.audit.rules.helpers import build_rule, clamp_score

PILLAR = PillarName.ANSWER_READINESS


def evaluate_answer_readiness(signals: AuditSignals) -> list[RuleEvaluation]:
    faq_visible = signals.faq_heading_count > 0
    claim_evidence_ok = signals.claim_evidence_blocks >= 2
    claim_citation_ok = signals.claim_citation_pairs >= 2

    return [
        build_rule(
            id="answer_faq_visible",
            pillar=PILLAR,
            title="FAQ/Q&A sections visible",
            max=6,
            score=6 if faq_visible else 0,
            passed=faq_visible,
            finding_id="faq_missing",
            evidence=(
                f"{signals.faq_heading_count} FAQ headings found."
                if faq_visible
                else "No FAQ headings detected."
            ),
        ),
        build_rule(
            id="answer_tldr",
            pillar=PILLAR,
            title="TL;DR or key takeaway near top",
            max=6,
            score=6 if signals.tldr_near_top else 0,
            passed=signals.tldr_near_top,
            finding_id="tldr_missing",
        ),
        build_rule(
            id="answer_claim_evidence",
            pillar=PILLAR,
            title="Claim → evidence blocks",
            max=7,
            score=clamp_score(signals.claim_evidence_blocks * 3.5, 7),
            passed=claim_evidence_ok,
            finding_id="claim_evidence_gap",
            evidence=f"{signals.claim_evidence_blocks} block(s) detected.",
        ),
        build_rule(
            id="answer_claim_citation",
            pillar=PILLAR,
            title="Claim + citation proximity",
            max=6,
            score=clamp_score(signals.claim_citation_pairs * 2, 6),
            passed=claim_citation_ok,
            finding_id="claim_no_citation",
            evidence=f"{signals.claim_citation_pairs} paragraphs with citations.",
        ),
    ]
