"""SSRF protection for every outbound request the audit issues."""
from __future__ import annotations

import logging
import socket
from ipaddress import IPv4Address, IPv6Address, ip_address
from urllib.parse import urlparse

from geo_audit.errors import BlockedHost, ValidationFailed

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    parsed = urlparse(source)
    return parsed.scheme in {"http", "https"}


def validate_target_url(url: str) -> str:
    """Reject anything that is not an absolute http(s) URL with a hostname."""
    if not isinstance(url, str) or not url.strip():
        raise ValidationFailed("URL is required")
    url = url.strip()
    if not _is_url(url):
        raise ValidationFailed("Only http and https URLs are allowed")
    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise ValidationFailed(f"Invalid URL: {exc}") from exc
    if not hostname:
        raise ValidationFailed("Invalid URL: hostname not found")
    return url


def _is_forbidden_ip(ip: IPv4Address | IPv6Address) -> bool:
    if isinstance(ip, IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_unspecified
    )


def _validate_ip(ip_str: str) -> tuple[bool, str]:
    """Check if an IP address is safe (not private/internal)."""
    try:
        ip = ip_address(ip_str.split("%", 1)[0])
    except ValueError:
        return False, f"Invalid IP address: {ip_str}"
    if _is_forbidden_ip(ip):
        return False, f"Access to private/internal IP addresses is forbidden: {ip_str}"
    return True, ""


def _resolve(hostname: str, family: int) -> list[str]:
    """Resolve one address family; resolution failures yield no addresses."""
    try:
        infos = socket.getaddrinfo(hostname, None, family, socket.SOCK_STREAM)
    except (socket.gaierror, UnicodeError, OSError) as exc:
        logger.debug("DNS lookup (family=%s) failed for %s: %s", family, hostname, exc)
        return []
    return [info[4][0] for info in infos]


def guard_url(url: str) -> None:
    """Raise BlockedHost if the URL targets a private, loopback or link-local address.

    Literal IP hosts are checked directly. Hostnames are resolved for A and AAAA
    records independently; when DNS yields nothing the host is allowed and the
    fetch layer reports the failure.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError as exc:
        raise ValidationFailed(f"Invalid URL: {exc}") from exc
    if not hostname:
        raise ValidationFailed("Invalid URL: hostname not found")

    try:
        ip_address(hostname)
    except ValueError:
        pass
    else:
        is_safe, error_msg = _validate_ip(hostname)
        if not is_safe:
            raise BlockedHost(error_msg)
        return

    addresses = _resolve(hostname, socket.AF_INET) + _resolve(hostname, socket.AF_INET6)
    for address in addresses:
        is_safe, error_msg = _validate_ip(address)
        if not is_safe:
            raise BlockedHost(f"{hostname} resolves to a blocked address. {error_msg}")
