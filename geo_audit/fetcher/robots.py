"""robots.txt retrieval and evaluation for the audit agent."""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import urlparse

import requests

from geo_audit.config.settings import settings
from geo_audit.errors import AuditError
from geo_audit.fetcher.html_fetcher import decode_body, open_guarded, read_limited

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RobotsInfo:
    """Crawl permission for the audited path plus declared sitemaps."""
    url: str
    allow: bool
    sitemap_urls: tuple[str, ...] = ()
    disallow_reason: str | None = None


@dataclass
class _RobotsGroup:
    agents: list[str]
    rules: list[tuple[str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedRobots:
    groups: list[_RobotsGroup]
    sitemaps: list[str]


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def agent_token(user_agent: str) -> str:
    """Product token used for group matching: 'GEOAuditBot/1.0 (...)' -> 'geoauditbot'."""
    return user_agent.split("/", 1)[0].split()[0].strip().lower()


def parse_robots_txt(text: str) -> ParsedRobots:
    groups: list[_RobotsGroup] = []
    sitemaps: list[str] = []
    current_agents: list[str] = []
    current_rules: list[tuple[str, str]] = []

    def _flush():
        if current_agents or current_rules:
            groups.append(_RobotsGroup(current_agents[:], current_rules[:]))
            current_agents.clear()
            current_rules.clear()

    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, value = [part.strip() for part in line.split(":", 1)]
        key_lower = key.lower()
        if key_lower == "user-agent":
            if current_rules:
                _flush()
            current_agents.append(value.lower())
        elif key_lower in {"allow", "disallow"}:
            current_rules.append((key_lower, value))
        elif key_lower == "sitemap" and value:
            # Sitemap lines are global, not tied to the current group
            if value not in sitemaps:
                sitemaps.append(value)
    _flush()
    return ParsedRobots(groups=groups, sitemaps=sitemaps)


def _select_group(groups: Iterable[_RobotsGroup], agent: str) -> list[_RobotsGroup]:
    agent = agent.lower()
    matched = [group for group in groups if agent in group.agents]
    if matched:
        return matched
    return [group for group in groups if "*" in group.agents]


def _rule_pattern(rule_path: str) -> re.Pattern[str]:
    anchored = rule_path.endswith("$")
    body = rule_path[:-1] if anchored else rule_path
    pattern = ".*".join(re.escape(part) for part in body.split("*"))
    return re.compile(pattern + ("$" if anchored else ""))


def _evaluate_group(groups: Iterable[_RobotsGroup], path: str) -> str:
    """Longest matching rule wins; allow wins ties."""
    best_rule = None
    best_length = -1
    for group in groups:
        for rule_type, rule_path in group.rules:
            if rule_path == "":
                # Empty Disallow allows everything
                continue
            if _rule_pattern(rule_path).match(path):
                rule_length = len(rule_path)
                if rule_length > best_length:
                    best_length = rule_length
                    best_rule = rule_type
                elif rule_length == best_length and rule_type == "allow":
                    best_rule = rule_type
    if best_rule == "disallow":
        return "disallow"
    if best_rule == "allow":
        return "allow"
    return "unspecified"


def is_allowed(parsed: ParsedRobots, url: str, user_agent: str) -> bool:
    target = urlparse(url)
    path = target.path or "/"
    if target.query:
        path = f"{path}?{target.query}"
    groups = _select_group(parsed.groups, agent_token(user_agent))
    if not groups:
        return True
    return _evaluate_group(groups, path) != "disallow"


def fetch_robots_info(url: str) -> RobotsInfo:
    """Fetch {origin}/robots.txt and decide whether the audit agent may fetch the URL.

    Any failure (network error, non-2xx, blocked redirect, oversized body)
    allows the audit with no sitemaps.
    """
    cfg = settings.fetcher
    robots_url = f"{origin_of(url)}/robots.txt"
    try:
        response, _, _ = open_guarded(robots_url, cfg.request_timeout, "text/plain")
        try:
            if not 200 <= response.status_code < 300:
                logger.info(
                    "robots.txt returned HTTP %s at %s; allowing audit",
                    response.status_code, robots_url,
                )
                return RobotsInfo(url=robots_url, allow=True)
            body = read_limited(response, cfg.max_html_bytes)
            content_type = response.headers.get("Content-Type", "")
        finally:
            response.close()
    except (requests.RequestException, AuditError) as exc:
        logger.warning("robots.txt unreachable at %s (%s); allowing audit", robots_url, exc)
        return RobotsInfo(url=robots_url, allow=True)

    parsed = parse_robots_txt(decode_body(body, content_type, is_html=False))
    allowed = is_allowed(parsed, url, cfg.user_agent)
    return RobotsInfo(
        url=robots_url,
        allow=allowed,
        sitemap_urls=tuple(parsed.sitemaps),
        disallow_reason=None if allowed else "robots disallow",
    )
