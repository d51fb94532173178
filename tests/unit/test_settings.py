"""Unit tests for configuration loading."""
from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from geo_audit.config.settings import Settings


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self, monkeypatch):
        """Defaults apply when no environment variables are set."""
        for name in (
            "GEO_AUDIT_REQUEST_TIMEOUT",
            "GEO_AUDIT_FETCH_RETRIES",
            "GEO_AUDIT_ARTIFACTS_DIR",
            "GEO_AUDIT_RUNS_DIR",
            "GEO_AUDIT_LOG_LEVEL",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Settings.from_env()

        assert config.fetcher.request_timeout == 12.0
        assert config.fetcher.retries == 2
        assert config.fetcher.backoff == 0.6
        assert config.fetcher.max_html_bytes == 2_000_000
        assert config.fetcher.user_agent.startswith("GEOAuditBot/")
        assert config.store.runs_dir == Path(".geo-artifacts/runs")
        assert config.log_level == "INFO"

    def test_overrides(self, monkeypatch):
        """GEO_AUDIT_* variables override defaults."""
        monkeypatch.setenv("GEO_AUDIT_REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("GEO_AUDIT_FETCH_RETRIES", "0")
        monkeypatch.setenv("GEO_AUDIT_MAX_BROWSERS", "4")
        monkeypatch.setenv("GEO_AUDIT_CORS_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("GEO_AUDIT_DEBUG", "true")
        monkeypatch.setenv("GEO_AUDIT_LOG_LEVEL", "debug")

        config = Settings.from_env()

        assert config.fetcher.request_timeout == 5.0
        assert config.fetcher.retries == 0
        assert config.playwright.max_concurrent_browsers == 4
        assert config.api.cors_origins == ("https://a.example", "https://b.example")
        assert config.debug is True
        assert config.log_level == "DEBUG"

    def test_artifacts_dir_moves_runs(self, monkeypatch, tmp_path):
        """The artifacts directory also relocates the runs directory."""
        monkeypatch.delenv("GEO_AUDIT_RUNS_DIR", raising=False)
        monkeypatch.setenv("GEO_AUDIT_ARTIFACTS_DIR", str(tmp_path))

        config = Settings.from_env()

        assert config.playwright.artifacts_dir == tmp_path
        assert config.store.runs_dir == tmp_path / "runs"

    def test_frozen(self):
        """Settings cannot be mutated after construction."""
        config = Settings()
        with pytest.raises(FrozenInstanceError):
            config.debug = True
