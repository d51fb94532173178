"""Write-once JSON documents keyed by run id."""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from geo_audit.audit.models import AuditResult
from geo_audit.config.settings import settings

logger = logging.getLogger(__name__)

RUN_ID_PATTERN = re.compile(r"^[a-f0-9]{32}$")


def is_valid_run_id(run_id: str) -> bool:
    """Run ids are uuid4 hex strings (32 hex chars)."""
    return bool(RUN_ID_PATTERN.match(run_id))


class RunStore:
    """File-backed store: one ``{run_id}.json`` document per audit run."""

    def __init__(self, runs_dir: Path | str | None = None):
        self.runs_dir = Path(runs_dir) if runs_dir is not None else settings.store.runs_dir

    def _safe_path(self, run_id: str) -> Path | None:
        """Get the document path with path traversal protection."""
        if not is_valid_run_id(run_id):
            return None
        path = (self.runs_dir / f"{run_id}.json").resolve()
        try:
            path.relative_to(self.runs_dir.resolve())
        except ValueError:
            return None
        return path

    def put(self, result: AuditResult) -> Path:
        """Persist a result, overwriting any earlier document for the same id."""
        path = self._safe_path(result.id)
        if path is None:
            raise ValueError(f"Invalid run id: {result.id!r}")
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(result.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        logger.debug("Stored run %s at %s", result.id, path)
        return path

    def get(self, run_id: str) -> dict | None:
        """Return the stored document, or None for unknown or malformed ids."""
        path = self._safe_path(run_id)
        if path is None or not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))
