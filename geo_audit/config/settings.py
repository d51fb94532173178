"""Centralized configuration settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

USER_AGENT = "GEOAuditBot/1.0 (+https://geo-audit.example/bot)"


@dataclass(frozen=True)
class FetcherSettings:
    """Settings for the raw HTML fetcher and robots/sitemap requests."""
    request_timeout: float = 12.0  # seconds
    retries: int = 2
    backoff: float = 0.6  # seconds, multiplied by attempt number
    max_html_bytes: int = 2_000_000
    max_redirects: int = 5
    accept: str = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"
    user_agent: str = USER_AGENT


@dataclass(frozen=True)
class PlaywrightSettings:
    """Settings for Playwright JS rendering."""
    max_concurrent_browsers: int = 2
    render_timeout_ms: int = 15000
    semaphore_timeout: int = 60  # seconds
    viewport_width: int = 1280
    viewport_height: int = 720
    artifacts_dir: Path = Path(".geo-artifacts")


@dataclass(frozen=True)
class StoreSettings:
    """Settings for the run store."""
    runs_dir: Path = Path(".geo-artifacts/runs")


@dataclass(frozen=True)
class APISettings:
    """API-specific settings."""
    cors_origins: tuple[str, ...] = ("*",)


@dataclass(frozen=True)
class Settings:
    """Main application settings container."""
    fetcher: FetcherSettings = field(default_factory=FetcherSettings)
    playwright: PlaywrightSettings = field(default_factory=PlaywrightSettings)
    store: StoreSettings = field(default_factory=StoreSettings)
    api: APISettings = field(default_factory=APISettings)

    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings, overriding defaults with GEO_AUDIT_* environment variables."""
        env = os.environ
        fetcher = FetcherSettings()
        playwright = PlaywrightSettings()
        store = StoreSettings()
        api = APISettings()

        # Fetcher overrides
        if timeout := env.get("GEO_AUDIT_REQUEST_TIMEOUT"):
            fetcher = replace(fetcher, request_timeout=float(timeout))
        if retries := env.get("GEO_AUDIT_FETCH_RETRIES"):
            fetcher = replace(fetcher, retries=int(retries))
        if max_bytes := env.get("GEO_AUDIT_MAX_HTML_BYTES"):
            fetcher = replace(fetcher, max_html_bytes=int(max_bytes))

        # Playwright overrides
        if render_timeout := env.get("GEO_AUDIT_RENDER_TIMEOUT_MS"):
            playwright = replace(playwright, render_timeout_ms=int(render_timeout))
        if max_browsers := env.get("GEO_AUDIT_MAX_BROWSERS"):
            playwright = replace(playwright, max_concurrent_browsers=int(max_browsers))
        if artifacts_dir := env.get("GEO_AUDIT_ARTIFACTS_DIR"):
            playwright = replace(playwright, artifacts_dir=Path(artifacts_dir))
            store = replace(store, runs_dir=Path(artifacts_dir) / "runs")

        if runs_dir := env.get("GEO_AUDIT_RUNS_DIR"):
            store = replace(store, runs_dir=Path(runs_dir))

        if cors := env.get("GEO_AUDIT_CORS_ORIGINS"):
            api = replace(api, cors_origins=tuple(o.strip() for o in cors.split(",") if o.strip()))

        return cls(
            fetcher=fetcher,
            playwright=playwright,
            store=store,
            api=api,
            debug=env.get("GEO_AUDIT_DEBUG", "").lower() in ("true", "1", "yes"),
            log_level=env.get("GEO_AUDIT_LOG_LEVEL", "INFO").upper(),
        )


# Global settings instance, read once at import
settings = Settings.from_env()
