"""Coordinate the concurrent fetch, render and discovery work for one URL."""
from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import UTC, datetime

from geo_audit.audit.models import AuditContext, DualRenderArtifacts
from geo_audit.audit.reconciler import reconcile
from geo_audit.errors import RobotsDisallowed
from geo_audit.fetcher.html_fetcher import fetch_html
from geo_audit.fetcher.js_render_fetcher import capture_html_only_screenshot, render_with_js
from geo_audit.fetcher.network_guard import guard_url, validate_target_url
from geo_audit.fetcher.robots import RobotsInfo, fetch_robots_info
from geo_audit.fetcher.sitemap import SitemapMeta, resolve_sitemap_meta

logger = logging.getLogger(__name__)

FAN_OUT_WORKERS = 4


def _discover(url: str) -> tuple[RobotsInfo, SitemapMeta]:
    robots = fetch_robots_info(url)
    return robots, resolve_sitemap_meta(url, robots.sitemap_urls)


def _cancel(futures: list[Future]) -> None:
    for future in futures:
        future.cancel()


def build_dual_render_artifacts(url: str, run_id: str) -> DualRenderArtifacts:
    """Fetch, render and discover concurrently, then reconcile.

    Raises:
        ValidationFailed: URL is malformed
        BlockedHost: URL resolves to a forbidden address
        RobotsDisallowed: robots.txt forbids the audit agent
        FetchFailed: raw HTML could not be retrieved
    """
    url = validate_target_url(url)
    guard_url(url)

    executor = ThreadPoolExecutor(max_workers=FAN_OUT_WORKERS, thread_name_prefix="geo-audit")
    try:
        fetch_future = executor.submit(fetch_html, url)
        render_future = executor.submit(render_with_js, url, run_id)
        screenshot_future = executor.submit(capture_html_only_screenshot, url, run_id)
        discover_future = executor.submit(_discover, url)
        pending = [fetch_future, render_future, screenshot_future, discover_future]

        robots, sitemap = discover_future.result()
        if not robots.allow:
            _cancel(pending)
            raise RobotsDisallowed(f"robots.txt at {robots.url} disallows {url}")

        try:
            fetch_result = fetch_future.result()
        except Exception:
            _cancel(pending)
            raise

        js_outcome = render_future.result()
        base_screenshot = screenshot_future.result()
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    return reconcile(url, fetch_result, js_outcome, base_screenshot, robots, sitemap)


def build_audit_context(url: str, run_id: str) -> AuditContext:
    """Gather artifacts for a URL and stamp the context with the current UTC time."""
    url = validate_target_url(url)
    artifacts = build_dual_render_artifacts(url, run_id)
    return AuditContext(
        url=url,
        artifacts=artifacts,
        timestamp=datetime.now(UTC).isoformat(),
    )
