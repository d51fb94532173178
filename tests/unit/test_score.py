"""Unit tests for score aggregation."""
from __future__ import annotations

from dataclasses import replace

import pytest

from geo_audit.audit.base import PILLAR_MAX, PillarName, RuleEvaluation
from geo_audit.audit.score import (
    collect_finding_ids,
    compute_geo_score,
    fold_pillar_totals,
    score_audit_context,
)


def _row(pillar, score, max=10, passed=True, finding_id=None, evidence=None, id="rule"):
    return RuleEvaluation(
        id=id,
        pillar=pillar,
        title=id,
        score=score,
        max=max,
        passed=passed,
        finding_id=finding_id,
        evidence=evidence,
    )


class TestFold:
    """Tests for per-pillar folding."""

    def test_clamped_after_each_addition(self):
        """A negative row cannot drive a pillar below zero before later rows add."""
        totals = fold_pillar_totals([
            _row(PillarName.ENTITY, -3),
            _row(PillarName.ENTITY, 4),
        ])
        assert totals[PillarName.ENTITY] == 4

    def test_clamped_to_pillar_max(self):
        """Totals never exceed the pillar maximum."""
        totals = fold_pillar_totals([_row(PillarName.ENTITY, 8), _row(PillarName.ENTITY, 8)])
        assert totals[PillarName.ENTITY] == PILLAR_MAX[PillarName.ENTITY]

    def test_all_pillars_present(self):
        """Pillars without rows start at zero."""
        assert fold_pillar_totals([]) == {pillar: 0.0 for pillar in PILLAR_MAX}


class TestGeoScore:
    """Tests for the overall score."""

    def test_full_marks(self):
        """All pillars at maximum give 100."""
        assert compute_geo_score(dict(PILLAR_MAX), 0) == 100

    def test_penalty_subtracted(self):
        """The applied penalty is subtracted from the normalized score."""
        assert compute_geo_score(dict(PILLAR_MAX), 20) == 80

    def test_floor_at_zero(self):
        """The score never goes negative."""
        assert compute_geo_score({pillar: 0 for pillar in PILLAR_MAX}, 20) == 0

    def test_rounded(self):
        """Scores are rounded to two decimals."""
        totals = {pillar: 0 for pillar in PILLAR_MAX}
        totals[PillarName.ENTITY] = 1
        assert compute_geo_score(totals, 0) == 1.11


class TestFindingIds:
    """Tests for finding collection."""

    def test_dedupe_first_seen_order(self):
        """Each finding id appears once, in first-seen order, with the first evidence."""
        rows = [
            _row(PillarName.SCHEMA, 0, passed=False, finding_id="jsonld_missing", evidence="first"),
            _row(PillarName.ENTITY, 0, passed=False, finding_id="sameas_missing"),
            _row(PillarName.SCHEMA, 0, passed=False, finding_id="jsonld_missing", evidence="second"),
            _row(PillarName.SCHEMA, 6, passed=True),
        ]
        assert collect_finding_ids(rows) == [("jsonld_missing", "first"), ("sameas_missing", None)]


class TestScoreAuditContext:
    """Tests for the end-to-end scoring of a context."""

    def test_article_page(self, make_context, article_html):
        """The article fixture scores 85 of 90 raw points."""
        outcome = score_audit_context(make_context(article_html))

        assert outcome.geo_score == 94.44
        assert [pillar.score for pillar in outcome.pillars] == [23, 20, 20, 14, 8]
        assert [finding.id for finding in outcome.findings] == ["entity_schema_missing"]
        assert [fix.id for fix in outcome.top_fixes] == ["entity_schema_missing"]
        assert outcome.applied_penalty == 0

    def test_no_json_ld_with_server_text(self, make_context, thin_html):
        """A page with server-rendered text but no JSON-LD fails schema but passes rendering."""
        ctx = make_context(thin_html)
        ctx = replace(ctx, artifacts=replace(ctx.artifacts, text_ratio_no_js=0.95))

        outcome = score_audit_context(ctx)
        rows = {row.id: row for row in outcome.score_trace}
        finding_ids = [finding.id for finding in outcome.findings]

        assert rows["schema_jsonld"].passed is False
        assert rows["answer_faq_visible"].passed is False
        assert all(row.passed for row in outcome.score_trace if row.id.startswith("render_"))
        assert finding_ids.count("jsonld_missing") == 1
        assert outcome.evidence.text_ratio_no_js == 0.95

    def test_client_rendered_page_penalized(self, make_context, shell_html, hydrated_html):
        """An empty shell is penalized and the penalty row closes the trace."""
        outcome = score_audit_context(make_context(shell_html, hydrated_html))

        assert outcome.applied_penalty == 10
        assert outcome.score_trace[-1].id == "penalty_text_ratio"
        assert [finding.id for finding in outcome.findings].count("text_ratio_low") == 1
        rendering = next(p for p in outcome.pillars if p.name == PillarName.RENDERING)
        assert rendering.score == 8

    def test_render_unavailable(self, make_context, article_html):
        """A failed JS render still produces a complete score."""
        outcome = score_audit_context(make_context(article_html, js_unavailable=True))

        assert outcome.evidence.rendering_mode == "single"
        assert outcome.evidence.text_ratio_no_js == 1.0
        assert outcome.evidence.missing_headings == ()
        assert outcome.geo_score == 94.44

    def test_deterministic(self, make_context, article_html):
        """Identical inputs give identical outcomes."""
        first = score_audit_context(make_context(article_html))
        second = score_audit_context(make_context(article_html))
        assert first == second

    @pytest.mark.parametrize("fixture", ["article_html", "thin_html", "shell_html"])
    def test_bounds(self, make_context, request, fixture):
        """Pillar scores and the GEO score stay within bounds."""
        outcome = score_audit_context(make_context(request.getfixturevalue(fixture)))

        assert 0 <= outcome.geo_score <= 100
        for pillar in outcome.pillars:
            assert 0 <= pillar.score <= pillar.max
        assert len(outcome.top_fixes) <= 5
        assert [fix.id for fix in outcome.top_fixes] == [f.id for f in outcome.findings[:5]]

    def test_evidence(self, make_context, article_html):
        """Evidence carries headings, screenshots and transfer metrics."""
        evidence = score_audit_context(make_context(article_html)).evidence

        assert evidence.js_headings[0] == "GEO Audit Guide"
        assert evidence.json_ld_types == ("Article", "Organization")
        assert evidence.screenshots.base == "artifacts/run-base.png"
        assert evidence.sitemap_lastmod == "2026-09-01"
        assert evidence.robots == "https://example.com/robots.txt"
        assert evidence.ttfb_ms == 42.0
