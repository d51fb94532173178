"""Health check endpoint."""
from __future__ import annotations

import os
import shutil
from datetime import UTC, datetime

from fastapi import APIRouter

from app.api.models.responses import HealthResponse
from geo_audit import __version__
from geo_audit.config.settings import settings

router = APIRouter(tags=["Health"])


def _runs_dir_writable() -> bool:
    runs_dir = settings.store.runs_dir
    try:
        runs_dir.mkdir(parents=True, exist_ok=True)
    except OSError:
        return False
    return os.access(runs_dir, os.W_OK)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check API health and service status.",
)
def health_check() -> HealthResponse:
    """Return API health status."""
    checks = {
        "run_store": _runs_dir_writable(),
        # Without the playwright CLI, JS renders degrade to single mode
        "playwright_driver": shutil.which("playwright") is not None,
    }
    return HealthResponse(
        status="healthy" if all(checks.values()) else "degraded",
        version=__version__,
        timestamp=datetime.now(UTC),
        checks=checks,
    )
