"""Unit tests for HTML content extraction."""
from __future__ import annotations

import pytest

from geo_audit.audit.models import ImageRef
from geo_audit.parser.content_parser import (
    MAX_PARAGRAPHS,
    extract_json_ld,
    extract_snapshot,
)

URL = "https://example.com/guides/geo-audit"


def _page(body: str, head: str = "") -> str:
    return f"<html><head>{head}</head><body>{body}</body></html>"


class TestArticleSnapshot:
    """Tests against the well-structured article fixture."""

    @pytest.fixture
    def snapshot(self, article_html):
        return extract_snapshot(article_html, URL)

    def test_title_and_description(self, snapshot):
        """Title and meta description are extracted."""
        assert snapshot.title == "GEO Audit Guide"
        assert snapshot.description == "How to audit pages for answer engines."

    def test_headings_in_document_order(self, snapshot):
        """h1-h3 text is kept in order."""
        assert snapshot.headings == (
            "GEO Audit Guide",
            "What is a GEO audit?",
            "How is the score computed?",
            "Why do dates matter?",
        )

    def test_paragraph_citations(self, snapshot):
        """Paragraphs with absolute links are flagged as cited."""
        assert len(snapshot.paragraphs) == 4
        assert snapshot.paragraph_has_citation == (False, True, True, False)
        assert snapshot.claim_citation_pairs == 2
        assert snapshot.claim_evidence_blocks == 2

    def test_tldr_detected(self, snapshot):
        """A TL;DR marker in the opening paragraphs is found."""
        assert snapshot.tldr_near_top is True

    def test_inline_dates(self, snapshot):
        """Years and month dates are collected without duplicates."""
        assert snapshot.inline_dates == ("2025", "March 3, 2026")

    def test_updated_on_snippet(self, snapshot):
        """The paragraph carrying 'Updated on' is reported."""
        assert snapshot.updated_on_snippet.endswith("Updated on March 3, 2026.")

    def test_canonical_images_tables(self, snapshot):
        """Canonical, images, tables and captions are extracted."""
        assert snapshot.canonical_url == "https://example.com/guides/geo-audit"
        assert snapshot.images == (ImageRef(src="/img/chart.png", alt="Chart of scores"),)
        assert snapshot.tables == 1
        assert snapshot.dataset_hints == ("Score by pillar",)

    def test_outbound_links(self, snapshot):
        """Both citation links are external."""
        assert [link.href for link in snapshot.outbound_links] == [
            "https://research.example.org/geo",
            "https://data.example.net/report",
        ]
        assert all(link.is_external for link in snapshot.outbound_links)

    def test_scripts_excluded_from_text(self, snapshot):
        """JSON-LD script content does not count as visible text."""
        assert snapshot.has_robots_noindex is False
        assert snapshot.visible_text_length > 0
        assert snapshot.total_word_count < 120


class TestParagraphLimits:
    """Tests for paragraph truncation and caps."""

    def test_long_paragraph_truncated(self):
        """Paragraphs over 320 characters are cut with an ellipsis."""
        snapshot = extract_snapshot(_page(f"<p>{'word ' * 80}</p>"), URL)
        assert len(snapshot.paragraphs[0]) == 321
        assert snapshot.paragraphs[0].endswith("…")

    def test_paragraph_cap(self):
        """At most 80 paragraphs are kept."""
        body = "".join(f"<p>Paragraph {i}</p>" for i in range(90))
        snapshot = extract_snapshot(_page(body), URL)
        assert len(snapshot.paragraphs) == MAX_PARAGRAPHS
        assert len(snapshot.paragraph_has_citation) == MAX_PARAGRAPHS

    def test_empty_paragraphs_skipped(self):
        """Whitespace-only paragraphs are ignored."""
        snapshot = extract_snapshot(_page("<p>   </p><p>Real text</p>"), URL)
        assert snapshot.paragraphs == ("Real text",)
        assert snapshot.first_paragraph_word_count == 2


class TestMetadata:
    """Tests for title, robots and canonical extraction."""

    def test_title_falls_back_to_h1(self):
        """Without <title>, the first h1 is used."""
        snapshot = extract_snapshot(_page("<h1>Fallback Title</h1>"), URL)
        assert snapshot.title == "Fallback Title"

    def test_noindex_case_insensitive(self):
        """Meta robots matching is case-insensitive."""
        html = _page("<p>x</p>", head='<meta name="ROBOTS" content="NoIndex, follow">')
        assert extract_snapshot(html, URL).has_robots_noindex is True

    def test_missing_canonical(self):
        """No canonical link yields None."""
        assert extract_snapshot(_page("<p>x</p>"), URL).canonical_url is None

    def test_microdata_types(self):
        """itemtype values on itemscope elements are collected."""
        html = _page('<div itemscope itemtype="https://schema.org/Product"><p>x</p></div>')
        assert extract_snapshot(html, URL).microdata_types == ("https://schema.org/Product",)

    def test_updated_from_time_tag(self):
        """A <time> element is preferred for the updated snippet."""
        html = _page('<time datetime="2026-01-01">Updated: Jan 1, 2026</time><p>Body</p>')
        assert extract_snapshot(html, URL).updated_on_snippet == "Updated: Jan 1, 2026"

    def test_updated_word_alone_not_matched(self):
        """'updated' without 'on' or a colon is not a freshness marker."""
        html = _page("<p>We updated our pricing page.</p>")
        assert extract_snapshot(html, URL).updated_on_snippet is None


class TestCitations:
    """Tests for citation and link detection."""

    def test_reference_markers(self):
        """Wiki-style reference markers count as citations."""
        html = _page('<p>Claim <sup class="reference"><a href="#cite_note-1">[1]</a></sup></p>')
        snapshot = extract_snapshot(html, URL)
        assert snapshot.paragraph_has_citation == (True,)
        assert snapshot.reference_citation_count == 2

    def test_relative_link_not_a_citation(self):
        """Relative links do not cite a source."""
        snapshot = extract_snapshot(_page('<p>See <a href="/about">about</a>.</p>'), URL)
        assert snapshot.paragraph_has_citation == (False,)

    def test_outbound_link_filtering(self):
        """Fragment, mailto, javascript and tel links are skipped."""
        body = (
            '<a href="#top">top</a><a href="mailto:a@example.com">mail</a>'
            '<a href="javascript:void(0)">js</a><a href="tel:+1555">call</a>'
            '<a href="/about">About</a><a href="//cdn.other.com/x">CDN</a>'
        )
        links = extract_snapshot(_page(body), URL).outbound_links
        assert [(link.href, link.is_external) for link in links] == [
            ("https://example.com/about", False),
            ("https://cdn.other.com/x", True),
        ]

    def test_tldr_from_short_first_paragraph(self):
        """A short opening paragraph counts as a summary."""
        assert extract_snapshot(_page("<p>Five words in this paragraph.</p>"), URL).tldr_near_top is True

    def test_long_first_paragraph_is_not_tldr(self):
        """A long opening paragraph without a marker is not a summary."""
        snapshot = extract_snapshot(_page(f"<p>{'lorem ' * 100}</p>"), URL)
        assert snapshot.tldr_near_top is False


class TestJsonLd:
    """Tests for JSON-LD extraction."""

    def test_objects_and_arrays(self):
        """Objects are kept and arrays are flattened."""
        html = _page(
            '<script type="application/ld+json">{"@type": "Article"}</script>'
            '<script type="application/ld+json">[{"@type": "WebSite"}, {"@type": "FAQPage"}]</script>'
        )
        assert [obj["@type"] for obj in extract_json_ld(html)] == ["Article", "WebSite", "FAQPage"]

    def test_malformed_block_skipped(self):
        """Invalid JSON is ignored and valid blocks survive."""
        html = _page(
            '<script type="application/ld+json">{"@type": </script>'
            '<script type="application/ld+json">{"@type": "Organization"}</script>'
        )
        assert extract_json_ld(html) == [{"@type": "Organization"}]

    def test_graph_kept_as_one_object(self):
        """@graph containers are returned whole."""
        html = _page(
            '<script type="application/ld+json">'
            '{"@context": "https://schema.org", "@graph": [{"@type": "WebSite"}]}'
            "</script>"
        )
        objects = extract_json_ld(html)
        assert len(objects) == 1
        assert "@graph" in objects[0]

    def test_no_scripts(self):
        """Pages without JSON-LD yield an empty list."""
        assert extract_json_ld(_page("<p>x</p>")) == []
