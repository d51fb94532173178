"""API request models."""
from __future__ import annotations

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request body for a full audit or FAQ generation.

    Scheme and host checks happen in the audit pipeline so that malformed URLs
    map to a 400 response rather than a schema error.
    """

    url: str = Field(
        ...,
        min_length=1,
        max_length=2048,
        description="Absolute http(s) URL of the page to audit",
        examples=["https://example.com/article"],
    )
