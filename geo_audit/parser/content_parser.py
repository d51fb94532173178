"""Content extraction: HTML -> RenderSnapshot."""
from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from geo_audit.audit.models import ImageRef, OutboundLink, RenderSnapshot

logger = logging.getLogger(__name__)

MAX_PARAGRAPHS = 80
MAX_PARAGRAPH_CHARS = 320
MAX_INLINE_DATES = 10
MAX_IMAGES = 30
MAX_DATASET_HINTS = 5
MAX_OUTBOUND_LINKS = 40
MAX_LINK_TEXT = 80
TLDR_MAX_WORDS = 80

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|Jun(?:e)?|Jul(?:y)?"
    r"|Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
DATE_PATTERN = re.compile(rf"\b{_MONTHS}(?:\s+\d{{1,2}},\s+\d{{4}})?\b|\b\d{{4}}\b")
CLAIM_VOCABULARY = re.compile(
    r"\b(?:claim|evidence|according to|source|study|report|research|analysis|survey|data shows)\b",
    re.IGNORECASE,
)
TLDR_PATTERN = re.compile(r"tl;dr|key takeaways|summary", re.IGNORECASE)
UPDATED_PATTERN = re.compile(r"\bupdated(?:\s+on\b|\s*:)", re.IGNORECASE)
ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
JSON_LD_TYPE = re.compile(r"application/ld\+json", re.IGNORECASE)

_SKIPPED_HREF_PREFIXES = ("#", "mailto:", "javascript:", "tel:")


def _clean_text(text: str) -> str:
    return " ".join(text.replace(" ", " ").split())


def _word_count(text: str) -> int:
    return len(text.split()) if text else 0


def _truncate(text: str, limit: int = MAX_PARAGRAPH_CHARS) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…"


def _unique(items):
    return list(dict.fromkeys(items))


def _is_citation_anchor(href: str) -> bool:
    return href.startswith(("#cite", "#ref")) or "cite_note" in href


def _has_citation(paragraph: Tag) -> bool:
    for anchor in paragraph.find_all("a", href=True):
        href = anchor.get("href", "").strip()
        if ABSOLUTE_URL.match(href) or _is_citation_anchor(href):
            return True
    return paragraph.select_one("sup.reference") is not None


def _reference_citation_count(soup: BeautifulSoup) -> int:
    references = {id(sup) for sup in soup.select("sup.reference")}
    anchors = {
        id(anchor)
        for anchor in soup.find_all("a", href=True)
        if anchor["href"].startswith("#cite") or "cite_note" in anchor["href"]
    }
    return len(references) + len(anchors)


def _outbound_links(soup: BeautifulSoup, url: str) -> list[OutboundLink]:
    parsed = urlparse(url)
    origin = f"{parsed.scheme}://{parsed.netloc}/"
    base_host = parsed.hostname

    links = []
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href", "").strip()
        if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
            continue
        try:
            resolved = urljoin(origin, href)
            host = urlparse(resolved).hostname
        except ValueError:
            continue
        links.append(
            OutboundLink(
                href=resolved,
                text=_clean_text(anchor.get_text())[:MAX_LINK_TEXT],
                is_external=host != base_host,
            )
        )
        if len(links) >= MAX_OUTBOUND_LINKS:
            break
    return links


def _images(soup: BeautifulSoup) -> list[ImageRef]:
    images = []
    for img in soup.find_all("img"):
        src = (img.get("src") or "").strip()
        if not src:
            continue
        images.append(ImageRef(src=src, alt=_clean_text(img.get("alt") or "")))
        if len(images) >= MAX_IMAGES:
            break
    return images


def _microdata_types(soup: BeautifulSoup) -> list[str]:
    types = []
    for element in soup.find_all(attrs={"itemscope": True, "itemtype": True}):
        types.extend(element.get("itemtype", "").split())
    return types


def _meta_content(soup: BeautifulSoup, name: str) -> str:
    meta = soup.find("meta", attrs={"name": lambda value: value and value.lower() == name})
    return meta.get("content", "") if meta else ""


def _canonical(soup: BeautifulSoup) -> str | None:
    tag = soup.find("link", attrs={"rel": lambda val: val and "canonical" in val})
    href = (tag.get("href") or "").strip() if tag else ""
    return href or None


def _updated_on(soup: BeautifulSoup, paragraphs: list[str]) -> str | None:
    for time_tag in soup.find_all("time"):
        text = _clean_text(time_tag.get_text())
        if UPDATED_PATTERN.search(text):
            return text
    return next((text for text in paragraphs if UPDATED_PATTERN.search(text)), None)


def extract_snapshot(html: str, url: str) -> RenderSnapshot:
    """Parse one HTML render into a normalized RenderSnapshot."""
    soup = BeautifulSoup(html or "", "lxml")
    for tag in soup.find_all(["script", "style", "noscript"]):
        tag.decompose()

    first_h1 = soup.find("h1")
    title = _clean_text(soup.title.get_text()) if soup.title else ""
    if not title and first_h1:
        title = _clean_text(first_h1.get_text())

    headings = [
        text
        for text in (_clean_text(el.get_text()) for el in soup.find_all(["h1", "h2", "h3"]))
        if text
    ]

    paragraph_nodes: list[tuple[Tag, str]] = []
    for element in soup.find_all("p"):
        text = _clean_text(element.get_text())
        if text:
            paragraph_nodes.append((element, text))
    raw_paragraphs = [text for _, text in paragraph_nodes]
    capped = paragraph_nodes[:MAX_PARAGRAPHS]

    paragraphs = [_truncate(text) for _, text in capped]
    word_counts = [_word_count(text) for text in paragraphs]
    citation_flags = [_has_citation(element) for element, _ in capped]

    # Both counts draw on the same citation-bearing paragraphs; they are kept
    # as separate metrics.
    claim_citation_pairs = sum(citation_flags)
    claim_evidence_blocks = sum(
        1
        for (_, text), has_citation in zip(capped, citation_flags)
        if has_citation and CLAIM_VOCABULARY.search(text)
    )

    inline_dates = _unique(
        match.group(0).strip() for match in DATE_PATTERN.finditer(" ".join(raw_paragraphs))
    )[:MAX_INLINE_DATES]

    dataset_hints = [
        _truncate(_clean_text(caption.get_text()))
        for caption in soup.select("table caption")
    ][:MAX_DATASET_HINTS]

    body = soup.body or soup
    visible_text = _clean_text(body.get_text(" "))

    first_word_count = word_counts[0] if word_counts else 0
    tldr_near_top = any(TLDR_PATTERN.search(text) for text in raw_paragraphs[:3]) or (
        0 < first_word_count <= TLDR_MAX_WORDS
    )

    return RenderSnapshot(
        title=title,
        description=_clean_text(_meta_content(soup, "description")),
        headings=tuple(headings),
        paragraphs=tuple(paragraphs),
        paragraph_word_counts=tuple(word_counts),
        paragraph_has_citation=tuple(citation_flags),
        tldr_near_top=tldr_near_top,
        claim_evidence_blocks=claim_evidence_blocks,
        claim_citation_pairs=claim_citation_pairs,
        microdata_types=tuple(_microdata_types(soup)),
        first_paragraph_word_count=first_word_count,
        reference_citation_count=_reference_citation_count(soup),
        visible_text_length=len(visible_text),
        total_word_count=_word_count(visible_text),
        inline_dates=tuple(inline_dates),
        canonical_url=_canonical(soup),
        images=tuple(_images(soup)),
        tables=len(soup.find_all("table")),
        dataset_hints=tuple(dataset_hints),
        outbound_links=tuple(_outbound_links(soup, url)),
        updated_on_snippet=_updated_on(soup, raw_paragraphs),
        has_robots_noindex="noindex" in _meta_content(soup, "robots").lower(),
    )


def extract_json_ld(html: str) -> list[dict[str, Any]]:
    """Collect JSON-LD objects from every ld+json script; invalid blocks are skipped."""
    soup = BeautifulSoup(html or "", "lxml")
    objects: list[dict[str, Any]] = []
    for script in soup.find_all("script", attrs={"type": JSON_LD_TYPE}):
        payload = script.get_text().strip()
        if not payload:
            continue
        try:
            data = json.loads(payload, strict=False)
        except ValueError:
            logger.debug("Skipping malformed JSON-LD block (%d chars)", len(payload))
            continue
        if isinstance(data, list):
            objects.extend(item for item in data if isinstance(item, dict))
        elif isinstance(data, dict):
            objects.append(data)
    return objects
