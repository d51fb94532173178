"""Derive flat audit signals from the reconciled renders."""
from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any
from urllib.parse import urljoin, urlparse

from geo_audit.audit.models import AuditContext, AuditSignals

SUPPORTED_TYPES = frozenset({"Article", "BlogPosting", "FAQPage", "HowTo", "Dataset"})
ORGANIZATION_TYPES = frozenset({"Organization", "WebSite"})
PERSON_PRODUCT_TYPES = frozenset({"Person", "Product"})
RICH_PROPERTIES = ("author", "datePublished", "publisher", "mainEntityOfPage")

FAQ_HEADING = re.compile(r"\b(faq|questions?|how|why|what)\b", re.IGNORECASE)


def _types_of(node: dict[str, Any]) -> list[str]:
    value = node.get("@type")
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    if isinstance(value, str):
        return [value]
    return []


def _flatten_graph(nodes: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Top-level nodes plus the entries of their @graph, one level deep."""
    flattened = []
    for node in nodes:
        if _types_of(node):
            flattened.append(node)
        graph = node.get("@graph")
        if isinstance(graph, list):
            flattened.extend(entry for entry in graph if isinstance(entry, dict))
    return flattened


def _short_type(itemtype: str) -> str:
    """'https://schema.org/Article' -> 'Article'."""
    return re.split(r"[/#]", itemtype.rstrip("/"))[-1]


def _same_as_count(node: dict[str, Any]) -> int:
    value = node.get("sameAs")
    if isinstance(value, list):
        return sum(1 for item in value if isinstance(item, str))
    return 0


def _canonical(candidate: str | None, page_url: str) -> tuple[str | None, bool]:
    """Resolve the canonical against the page and compare hosts."""
    if not candidate:
        return None, False
    try:
        resolved = urljoin(page_url, candidate)
        return resolved, urlparse(resolved).hostname == urlparse(page_url).hostname
    except ValueError:
        return candidate, False


def compute_signals(ctx: AuditContext) -> AuditSignals:
    artifacts = ctx.artifacts
    base = artifacts.base.snapshot
    js = artifacts.js.snapshot

    nodes = _flatten_graph(artifacts.json_ld)
    supported_nodes = [node for node in nodes if SUPPORTED_TYPES.intersection(_types_of(node))]
    organization_nodes = [node for node in nodes if ORGANIZATION_TYPES.intersection(_types_of(node))]
    person_or_product = any(PERSON_PRODUCT_TYPES.intersection(_types_of(node)) for node in nodes)

    micro_types = {_short_type(itemtype) for itemtype in js.microdata_types}
    microdata_supported = sum(
        1 for itemtype in js.microdata_types if _short_type(itemtype) in SUPPORTED_TYPES
    )

    rich_properties = microdata_supported > 0 or any(
        all(node.get(prop) for prop in RICH_PROPERTIES) for node in supported_nodes
    )

    canonical, canonical_matches_host = _canonical(js.canonical_url, ctx.url)

    images = js.images
    alt_coverage = (
        sum(1 for image in images if image.alt.strip()) / len(images) if images else 1.0
    )

    first_heading = js.headings[0] if js.headings else ""
    title_matches_heading = bool(js.title and first_heading) and (
        js.title.strip().lower() == first_heading.strip().lower()
    )

    robots = artifacts.robots
    sitemap = artifacts.sitemap

    return AuditSignals(
        url=ctx.url,
        faq_heading_count=sum(1 for heading in js.headings if FAQ_HEADING.search(heading)),
        tldr_near_top=js.tldr_near_top,
        claim_evidence_blocks=js.claim_evidence_blocks,
        claim_citation_pairs=js.claim_citation_pairs,
        text_ratio_no_js=artifacts.text_ratio_no_js,
        canonical=canonical,
        canonical_exists=canonical is not None,
        canonical_matches_host=canonical_matches_host,
        sitemap_url=sitemap.url if sitemap else None,
        sitemap_fresh_within_365=sitemap.within_365_days if sitemap else False,
        robots_allow=robots.allow if robots else True,
        robots_url=robots.url if robots else None,
        meta_noindex=js.has_robots_noindex,
        inline_date_count=len(js.inline_dates),
        external_link_count=sum(1 for link in js.outbound_links if link.is_external),
        reference_citation_count=js.reference_citation_count,
        has_images=bool(images),
        alt_coverage=alt_coverage,
        table_count=js.tables,
        dataset_hint_count=len(js.dataset_hints),
        json_ld_count=len(artifacts.json_ld),
        supported_schema_count=len(supported_nodes) + microdata_supported,
        schema_has_rich_properties=rich_properties,
        organization_schema=bool(organization_nodes) or bool(ORGANIZATION_TYPES & micro_types),
        person_or_product_schema=person_or_product or bool(PERSON_PRODUCT_TYPES & micro_types),
        same_as_count=sum(_same_as_count(node) for node in organization_nodes),
        updated_on_snippet=js.updated_on_snippet,
        title_matches_heading=title_matches_heading,
        base_heading_count=len(base.headings),
        json_ld_types=tuple(type_name for node in nodes for type_name in _types_of(node)),
    )
