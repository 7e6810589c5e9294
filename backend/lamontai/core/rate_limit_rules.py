"""Rate Limit Rules — pure selection of the request budget for a path.

Invariants:
    - Every path maps to exactly one rule ("auth", "generate" or "default")
    - Auth endpoints get the tightest budget after generation endpoints
    - client_key is stable for (ip, path) pairs

Design Decisions:
    - Substring matching on the path: route prefixes are stable and few
    - Rules are plain dataclasses built from Settings in the shell (no config import here)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitRule:
    name: str
    limit: int
    window_seconds: int


@dataclass(frozen=True)
class RateLimitRules:
    default: RateLimitRule
    auth: RateLimitRule
    generate: RateLimitRule


_GENERATION_MARKERS = ("/generate", "/content/", "/keywords", "/analyze")


def select_rule(path: str, rules: RateLimitRules) -> RateLimitRule:
    """Pick the budget that applies to a request path."""
    if "/auth/" in path:
        return rules.auth
    if any(marker in path for marker in _GENERATION_MARKERS):
        return rules.generate
    return rules.default


def client_key(ip: str, path: str) -> str:
    return f"rate-limit:{ip}:{path}"


def client_ip(forwarded_for: str | None, peer: str | None) -> str:
    """First hop of X-Forwarded-For, else the socket peer, else 'unknown'."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer or "unknown"
