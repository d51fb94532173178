"""Logging configuration shared by the CLI and the API."""
from __future__ import annotations

import logging

from geo_audit.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request at INFO
_NOISY_LOGGERS = ("urllib3", "asyncio", "uvicorn.access", "playwright")


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    resolved = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
