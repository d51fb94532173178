"""Raw HTML fetching with size limits, retries and SSRF-checked redirects."""
from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from urllib.parse import urljoin

import requests
from bs4.dammit import EncodingDetector

from geo_audit.config.settings import settings
from geo_audit.errors import FetchFailed, NotHtml, TooLarge
from geo_audit.fetcher.network_guard import guard_url

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")
RETRYABLE_STATUS = {408, 429}

_CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.IGNORECASE)


@dataclass(frozen=True)
class FetchResult:
    """A successfully fetched HTML document."""
    html: str
    bytes: int
    ttfb_ms: float
    content_type: str
    final_url: str


def _is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in RETRYABLE_STATUS


def _request_headers(accept: str) -> dict[str, str]:
    return {
        "User-Agent": settings.fetcher.user_agent,
        "Accept": accept,
        "Accept-Language": "en-US,en;q=0.9",
    }


def open_guarded(url: str, timeout: float, accept: str) -> tuple[requests.Response, float, str]:
    """Issue a streamed GET, following redirects manually so each hop is guarded.

    Returns the final response (headers received, body not yet read), the
    time-to-first-byte in milliseconds and the final URL. The caller guards
    the first URL.

    Raises:
        BlockedHost: a redirect points into an internal network
        ValidationFailed: a redirect target is not a usable URL
        FetchFailed: the redirect chain exceeds max_redirects or a Location is malformed
    """
    start = time.perf_counter()
    response = requests.get(
        url,
        headers=_request_headers(accept),
        timeout=timeout,
        allow_redirects=False,  # Each redirect target is re-validated below
        stream=True,
    )
    ttfb_ms = (time.perf_counter() - start) * 1000

    redirect_count = 0
    while response.is_redirect:
        if redirect_count >= settings.fetcher.max_redirects:
            response.close()
            raise FetchFailed(
                f"Too many redirects (max {settings.fetcher.max_redirects})",
                status_code=response.status_code,
            )
        redirect_count += 1
        location = response.headers["Location"]
        response.close()
        try:
            redirect_url = urljoin(url, location)
        except ValueError as exc:
            raise FetchFailed(
                f"Invalid redirect location {location!r}: {exc}",
                status_code=response.status_code,
            ) from exc

        # Prevents redirects into internal networks
        guard_url(redirect_url)

        response = requests.get(
            redirect_url,
            headers=_request_headers(accept),
            timeout=timeout,
            allow_redirects=False,
            stream=True,
        )
        url = redirect_url

    return response, ttfb_ms, url


def read_limited(response: requests.Response, max_bytes: int) -> bytes:
    """Read a streamed body, raising TooLarge as soon as it exceeds max_bytes."""
    content_length = response.headers.get("Content-Length")
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        response.close()
        raise TooLarge(f"Response too large: {int(content_length)} bytes (max {max_bytes})")

    chunks = []
    total_size = 0
    for chunk in response.iter_content(chunk_size=8192):
        total_size += len(chunk)
        if total_size > max_bytes:
            response.close()
            raise TooLarge(f"Response too large: exceeded {max_bytes} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


def decode_body(content: bytes, content_type: str, is_html: bool = True) -> str:
    """Decode with the header charset, then the in-document declaration, then UTF-8.

    requests reports ISO-8859-1 for text/* responses without a charset, so
    its guessed encoding is never used.
    """
    candidates = []
    match = _CHARSET_RE.search(content_type or "")
    if match:
        candidates.append(match.group(1))
    declared = EncodingDetector.find_declared_encoding(content, is_html=is_html)
    if declared:
        candidates.append(declared)

    for encoding in candidates:
        try:
            return content.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    return content.decode("utf-8", errors="replace")


def _fetch_once(url: str, timeout: float, max_bytes: int, accept: str) -> FetchResult:
    response, ttfb_ms, final_url = open_guarded(url, timeout, accept)

    if response.status_code >= 400:
        response.close()
        raise FetchFailed(
            f"Fetch failed with status {response.status_code}",
            status_code=response.status_code,
        )

    content_type = response.headers.get("Content-Type", "")
    if not any(kind in content_type.lower() for kind in HTML_CONTENT_TYPES):
        response.close()
        raise NotHtml(f"URL did not return HTML (Content-Type: {content_type or 'missing'})")

    body = read_limited(response, max_bytes)
    return FetchResult(
        html=decode_body(body, content_type),
        bytes=len(body),
        ttfb_ms=round(ttfb_ms, 2),
        content_type=content_type,
        final_url=final_url,
    )


def fetch_html(
    url: str,
    *,
    timeout: float | None = None,
    retries: int | None = None,
    backoff: float | None = None,
    max_bytes: int | None = None,
    accept: str | None = None,
) -> FetchResult:
    """Fetch raw (no-JS) HTML for a URL.

    Retries 5xx, 408, 429 and transport errors with linear backoff
    (backoff * attempt number). Other 4xx responses, non-HTML content and
    oversized bodies fail immediately. The caller is expected to have run
    the network guard on the URL already; redirect hops are guarded here.
    """
    cfg = settings.fetcher
    timeout = cfg.request_timeout if timeout is None else timeout
    retries = cfg.retries if retries is None else retries
    backoff = cfg.backoff if backoff is None else backoff
    max_bytes = cfg.max_html_bytes if max_bytes is None else max_bytes
    accept = accept or cfg.accept

    last_error: FetchFailed | None = None
    for attempt in range(retries + 1):
        try:
            return _fetch_once(url, timeout, max_bytes, accept)
        except (TooLarge, NotHtml):
            raise
        except FetchFailed as exc:
            if exc.status_code is not None and not _is_retryable_status(exc.status_code):
                raise
            last_error = exc
        except requests.RequestException as exc:
            last_error = FetchFailed(f"Request failed: {type(exc).__name__}: {exc}")
            last_error.__cause__ = exc

        if attempt < retries:
            delay = backoff * (attempt + 1)
            logger.info(
                "Fetch attempt %d/%d for %s failed (%s); retrying in %.1fs",
                attempt + 1, retries + 1, url, last_error, delay,
            )
            time.sleep(delay)

    if last_error is None:
        raise FetchFailed(f"No fetch attempt made for {url} (retries={retries})")
    raise last_error
