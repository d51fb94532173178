"""JS-rendered snapshots using Playwright with concurrency control.

Rendering is best-effort: every failure is returned as RenderUnavailable so
the pipeline can fall back to the raw HTML instead of aborting the audit.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from geo_audit.config.settings import settings
from geo_audit.errors import RenderingUnavailable

logger = logging.getLogger(__name__)

# Limit simultaneous browser instances to keep memory bounded
_browser_semaphore = threading.BoundedSemaphore(settings.playwright.max_concurrent_browsers)


@dataclass(frozen=True)
class RenderedPage:
    """JavaScript-executed DOM snapshot."""
    html: str
    console_errors: tuple[str, ...] = ()
    screenshot_path: str | None = None


@dataclass(frozen=True)
class RenderUnavailable:
    """The headless render could not be produced."""
    reason: str = field(default="rendering unavailable")


RenderOutcome = RenderedPage | RenderUnavailable


def _screenshot_path(run_id: str, suffix: str) -> Path:
    directory = settings.playwright.artifacts_dir
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{run_id}-{suffix}.png"


class _BrowserSlot:
    """Context manager holding one semaphore slot for a browser launch."""

    def __enter__(self):
        acquired = _browser_semaphore.acquire(timeout=settings.playwright.semaphore_timeout)
        if not acquired:
            raise RenderingUnavailable("Too many concurrent rendering requests")
        return self

    def __exit__(self, *exc_info):
        _browser_semaphore.release()


def _render_once(url: str, run_id: str) -> RenderedPage:
    cfg = settings.playwright
    with _BrowserSlot(), sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True)
        try:
            context = browser.new_context(
                user_agent=settings.fetcher.user_agent,
                viewport={"width": cfg.viewport_width, "height": cfg.viewport_height},
                device_scale_factor=1,
            )
            page = context.new_page()

            console_errors: list[str] = []

            def _on_console(message) -> None:
                if message.type == "error":
                    console_errors.append(message.text)

            page.on("console", _on_console)

            page.goto(url, wait_until="networkidle", timeout=cfg.render_timeout_ms)
            html = page.content()

            screenshot = _screenshot_path(run_id, "js")
            page.screenshot(path=str(screenshot), full_page=True)
            context.close()
        finally:
            browser.close()

    return RenderedPage(
        html=html,
        console_errors=tuple(console_errors),
        screenshot_path=str(screenshot),
    )


def render_with_js(url: str, run_id: str) -> RenderOutcome:
    """Render a page with JavaScript enabled and capture a full-page screenshot."""
    try:
        return _render_once(url, run_id)
    except (PlaywrightError, RenderingUnavailable, OSError) as exc:
        logger.warning("Playwright render failed for %s: %s", url, exc)
        return RenderUnavailable(reason=f"{type(exc).__name__}: {exc}")
    except Exception as exc:
        logger.exception("Unexpected error rendering %s", url)
        return RenderUnavailable(reason=f"{type(exc).__name__}: {exc}")


def capture_html_only_screenshot(url: str, run_id: str) -> str | None:
    """Screenshot the page with JavaScript disabled. Returns the file path or None."""
    cfg = settings.playwright
    try:
        with _BrowserSlot(), sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=True)
            try:
                context = browser.new_context(
                    java_script_enabled=False,
                    user_agent=settings.fetcher.user_agent,
                    viewport={"width": cfg.viewport_width, "height": cfg.viewport_height},
                )
                page = context.new_page()
                page.goto(url, wait_until="domcontentloaded", timeout=cfg.render_timeout_ms)
                screenshot = _screenshot_path(run_id, "base")
                page.screenshot(path=str(screenshot), full_page=True)
                context.close()
            finally:
                browser.close()
        return str(screenshot)
    except (PlaywrightError, RenderingUnavailable, OSError) as exc:
        logger.warning("Playwright base screenshot failed for %s: %s", url, exc)
        return None
    except Exception:
        logger.exception("Unexpected error capturing base screenshot for %s", url)
        return None
