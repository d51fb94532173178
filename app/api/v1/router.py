"""API v1 router aggregation."""
from __future__ import annotations

from fastapi import APIRouter

from app.api.v1.endpoints import analyze, faq, health, runs

router = APIRouter()

router.include_router(analyze.router)
router.include_router(faq.router)
router.include_router(runs.router)
router.include_router(health.router)
