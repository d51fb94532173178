"""Sitemap discovery and freshness."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from geo_audit.config.settings import settings
from geo_audit.errors import BlockedHost, FetchFailed, SitemapUnresolvable, TooLarge, ValidationFailed
from geo_audit.fetcher.html_fetcher import open_guarded, read_limited
from geo_audit.fetcher.network_guard import guard_url
from geo_audit.fetcher.robots import origin_of

logger = logging.getLogger(__name__)

FRESHNESS_DAYS = 365
SITEMAP_ACCEPT = "application/xml,text/xml;q=0.9,*/*;q=0.5"


@dataclass(frozen=True)
class SitemapMeta:
    url: str | None = None
    lastmod: str | None = None
    within_365_days: bool = False


def parse_lastmod(value: str) -> datetime | None:
    """Parse a W3C datetime lastmod value; naive values are taken as UTC."""
    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def first_entry_lastmod(xml: str | bytes) -> str | None:
    """Return the first <url>/<sitemap> entry's <lastmod> text.

    Raises SitemapUnresolvable when the document is not a urlset or sitemapindex.
    """
    soup = BeautifulSoup(xml, "xml")
    root = soup.find("urlset") or soup.find("sitemapindex")
    if root is None:
        raise SitemapUnresolvable("Document is not a urlset or sitemapindex")
    entry = root.find("url") or root.find("sitemap")
    if entry is None:
        raise SitemapUnresolvable("Sitemap has no entries")
    lastmod = entry.find("lastmod")
    return lastmod.get_text(strip=True) if lastmod else None


def _fetch_sitemap(url: str) -> bytes:
    """Fetch one candidate through the guard, redirect checks and size cap."""
    cfg = settings.fetcher
    try:
        guard_url(url)
        response, _, _ = open_guarded(url, cfg.request_timeout, SITEMAP_ACCEPT)
    except (BlockedHost, ValidationFailed, FetchFailed) as exc:
        raise SitemapUnresolvable(str(exc)) from exc
    except requests.RequestException as exc:
        raise SitemapUnresolvable(f"Request failed: {exc}") from exc

    try:
        if not 200 <= response.status_code < 300:
            raise SitemapUnresolvable(f"HTTP {response.status_code}")
        return read_limited(response, cfg.max_html_bytes)
    except TooLarge as exc:
        raise SitemapUnresolvable(f"Sitemap too large: {exc}") from exc
    except requests.RequestException as exc:
        raise SitemapUnresolvable(f"Request failed: {exc}") from exc
    finally:
        response.close()


def candidate_urls(url: str, robots_sitemaps: tuple[str, ...] | list[str] = ()) -> list[str]:
    """Robots-declared sitemaps resolved against the page, then the default location."""
    candidates: list[str] = []
    for declared in robots_sitemaps:
        try:
            candidate = urljoin(url, declared.strip())
        except ValueError:
            logger.info("Skipping malformed sitemap declaration %r", declared)
            continue
        if candidate not in candidates:
            candidates.append(candidate)

    default_url = f"{origin_of(url)}/sitemap.xml"
    if default_url not in candidates:
        candidates.append(default_url)
    return candidates


def resolve_sitemap_meta(
    url: str,
    robots_sitemaps: tuple[str, ...] | list[str] = (),
    now: datetime | None = None,
) -> SitemapMeta:
    """Find the first parseable sitemap among robots-declared and default locations."""
    now = now or datetime.now(UTC)

    for candidate in candidate_urls(url, robots_sitemaps):
        try:
            lastmod = first_entry_lastmod(_fetch_sitemap(candidate))
        except SitemapUnresolvable as exc:
            logger.info("Sitemap candidate %s skipped: %s", candidate, exc)
            continue

        date = parse_lastmod(lastmod) if lastmod else None
        if date is None:
            return SitemapMeta(url=candidate, within_365_days=False)
        return SitemapMeta(
            url=candidate,
            lastmod=lastmod,
            within_365_days=(now - date).days <= FRESHNESS_DAYS,
        )

    return SitemapMeta()
