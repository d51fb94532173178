"""Reconcile the raw (no-JS) render with the JavaScript render."""
from __future__ import annotations

import hashlib
import logging

from geo_audit.audit.models import (
    BaseRender,
    DualRenderArtifacts,
    JsRender,
    RenderSnapshot,
    Screenshots,
)
from geo_audit.fetcher.html_fetcher import FetchResult
from geo_audit.fetcher.js_render_fetcher import RenderedPage, RenderOutcome
from geo_audit.fetcher.robots import RobotsInfo
from geo_audit.fetcher.sitemap import SitemapMeta
from geo_audit.parser.content_parser import extract_json_ld, extract_snapshot

logger = logging.getLogger(__name__)


def _fold(text: str) -> str:
    return " ".join(text.lower().split())


def text_ratio(no_js_length: int, js_length: int) -> float:
    """Share of the JS-rendered text already present without JavaScript."""
    if no_js_length == js_length:
        return 1.0
    return round(no_js_length / max(js_length, 1), 2)


def diff_headings(no_js: tuple[str, ...], js: tuple[str, ...]) -> list[str]:
    """JS headings absent from the raw HTML, each tagged with a short fingerprint.

    The fingerprint keeps repeated headings distinguishable in the evidence list.
    """
    seen = {_fold(heading) for heading in no_js}
    missing = [heading for heading in js if _fold(heading) not in seen]
    return [
        f"{heading}#{hashlib.sha1(f'{heading}-{idx}'.encode()).hexdigest()[:12]}"
        for idx, heading in enumerate(missing)
    ]


def reconcile(
    url: str,
    fetch_result: FetchResult,
    js_outcome: RenderOutcome,
    base_screenshot: str | None,
    robots: RobotsInfo | None,
    sitemap: SitemapMeta | None,
) -> DualRenderArtifacts:
    """Build DualRenderArtifacts from both renders.

    When the JS render is unavailable the no-JS snapshot stands in for it,
    which yields a ratio of 1.0 and no missing headings.
    """
    base_snapshot = extract_snapshot(fetch_result.html, url)
    degraded: list[str] = []

    if isinstance(js_outcome, RenderedPage):
        js_snapshot: RenderSnapshot = extract_snapshot(js_outcome.html, url)
        js_render = JsRender(snapshot=js_snapshot, console_errors=js_outcome.console_errors)
        json_ld = extract_json_ld(js_outcome.html)
        js_screenshot = js_outcome.screenshot_path
        mode = "dual"
    else:
        logger.warning("JS render unavailable for %s (%s); using raw HTML only", url, js_outcome.reason)
        js_snapshot = base_snapshot
        js_render = JsRender(snapshot=base_snapshot)
        json_ld = extract_json_ld(fetch_result.html)
        js_screenshot = None
        mode = "single"
        degraded.append(f"rendering unavailable: {js_outcome.reason}")

    if base_screenshot is None:
        degraded.append("no-JS screenshot unavailable")
    if sitemap is not None and sitemap.url is None:
        degraded.append("sitemap unresolvable")

    return DualRenderArtifacts(
        base=BaseRender(
            snapshot=base_snapshot,
            bytes=fetch_result.bytes,
            ttfb_ms=fetch_result.ttfb_ms,
        ),
        js=js_render,
        screenshots=Screenshots(base=base_screenshot, js=js_screenshot),
        json_ld=tuple(json_ld),
        robots=robots,
        sitemap=sitemap,
        text_ratio_no_js=text_ratio(
            base_snapshot.visible_text_length, js_snapshot.visible_text_length
        ),
        missing_headings=tuple(diff_headings(base_snapshot.headings, js_snapshot.headings)),
        rendering_mode=mode,
        degraded=tuple(degraded),
    )
