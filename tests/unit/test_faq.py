"""Unit tests for FAQ page synthesis."""
from __future__ import annotations

import json

import pytest

from geo_audit.audit.faq import (
    PLACEHOLDER_ANSWER,
    build_qa_pairs,
    maybe_generate_faq_artifact,
    normalize_question,
    recommended_faq_path,
    truncate_words,
)

QUESTIONS_ONLY = """<html><head><title>Help</title></head><body>
<h2>When should I audit</h2><h2>Where do scores come from</h2><h2>How do I fix issues</h2>
</body></html>"""


class TestArtifact:
    """Tests for artifact generation."""

    def test_generated_from_question_headings(self, make_context, article_html):
        """Three question headings produce an artifact."""
        artifact = maybe_generate_faq_artifact(make_context(article_html))

        assert artifact is not None
        data = json.loads(artifact.jsonld)
        assert data["@type"] == "FAQPage"
        assert [item["name"] for item in data["mainEntity"]] == [
            "What is a GEO audit?",
            "How is the score computed?",
            "Why do dates matter?",
        ]
        assert data["dateModified"] == "2026-10-18"
        assert data["publisher"]["name"] == "example.com"
        assert data["mainEntityOfPage"] == "https://example.com/guides/geo-audit"

    def test_provenance_and_path(self, make_context, article_html):
        """Provenance names the source URL and run date."""
        artifact = maybe_generate_faq_artifact(make_context(article_html))

        assert artifact.recommended_path == "/geo-audit/faq"
        assert artifact.provenance == (
            "Generated from https://example.com/guides/geo-audit on October 18, 2026."
        )
        assert artifact.provenance in artifact.html

    def test_answers_paired_by_position(self, make_context, article_html):
        """The n-th question takes the n-th paragraph."""
        pairs = build_qa_pairs(make_context(article_html))
        assert pairs[0].answer.startswith("TL;DR")
        assert pairs[1].answer.startswith("According to")

    def test_too_few_questions(self, make_context, hydrated_html):
        """Two question headings are not enough."""
        assert maybe_generate_faq_artifact(make_context(hydrated_html)) is None

    def test_placeholder_answers(self, make_context):
        """Headings without paragraphs get a placeholder answer."""
        pairs = build_qa_pairs(make_context(QUESTIONS_ONLY))
        assert len(pairs) == 3
        assert all(pair.answer == PLACEHOLDER_ANSWER for pair in pairs)
        assert pairs[0].question == "When should I audit?"

    def test_question_cap(self, make_context):
        """At most eight questions are used."""
        headings = "".join(f"<h2>How do I do step {i}</h2>" for i in range(12))
        pairs = build_qa_pairs(make_context(f"<html><body>{headings}</body></html>"))
        assert len(pairs) == 8

    def test_html_escaped(self, make_context):
        """Question text is escaped in the HTML but kept verbatim in JSON-LD."""
        html = (
            "<html><body><h2>What is &lt;script&gt;?</h2><h2>How it works</h2>"
            "<h2>Why bother</h2></body></html>"
        )
        artifact = maybe_generate_faq_artifact(make_context(html))

        assert "What is &lt;script&gt;?" in artifact.html
        assert "<script>" not in artifact.html
        assert json.loads(artifact.jsonld)["mainEntity"][0]["name"] == "What is <script>?"


class TestHelpers:
    """Tests for FAQ helpers."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/", "/geo-audit/faq"),
            ("https://example.com", "/geo-audit/faq"),
            ("https://example.com/blog/post/", "/post/faq"),
            ("https://example.com/pricing?plan=team", "/pricing/faq"),
        ],
    )
    def test_recommended_path(self, url, expected):
        """The last path segment becomes the FAQ slug."""
        assert recommended_faq_path(url) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("  How  does it work ", "How does it work?"),
            ("Why?", "Why?"),
            ("", ""),
        ],
    )
    def test_normalize_question(self, text, expected):
        """Whitespace collapses and a question mark is appended once."""
        assert normalize_question(text) == expected

    def test_truncate_words(self):
        """Answers longer than 120 words are cut with an ellipsis."""
        truncated = truncate_words(" ".join(["word"] * 150))
        assert len(truncated.split()) == 120
        assert truncated.endswith("word…")

    def test_short_answer_untouched(self):
        """Short answers are returned unchanged."""
        assert truncate_words("Short answer.") == "Short answer."
