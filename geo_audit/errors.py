"""Error taxonomy for the audit pipeline.

Fatal errors (ValidationFailed, BlockedHost, RobotsDisallowed, FetchFailed and its
subclasses) abort a run and reach the caller unchanged. RenderingUnavailable and
SitemapUnresolvable are raised internally and absorbed at their component boundary.
"""
from __future__ import annotations


class AuditError(Exception):
    """Base class for every error raised by the audit pipeline."""


class ValidationFailed(AuditError):
    """Raised when the input URL is malformed, before any network access."""


class BlockedHost(AuditError):
    """Raised when a URL points at a private, loopback or link-local address."""


class RobotsDisallowed(AuditError):
    """Raised when robots.txt forbids the audit agent from fetching the path."""


class FetchFailed(AuditError):
    """Raised when the raw HTML could not be retrieved."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TooLarge(FetchFailed):
    """Raised when the response body exceeds the configured byte limit."""


class NotHtml(FetchFailed):
    """Raised when the response is not an HTML document."""


class RenderingUnavailable(AuditError):
    """Raised when the headless browser cannot produce a render."""


class SitemapUnresolvable(AuditError):
    """Raised when a sitemap candidate cannot be fetched or parsed."""
