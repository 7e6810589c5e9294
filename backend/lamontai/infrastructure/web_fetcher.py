"""Web Fetcher — outbound HTTP GET for sitemaps and pages, behind circuit breakers.

Invariants:
    - Non-2xx responses and transport errors raise UpstreamFetchError (never return None)
    - Every call goes through the breaker named after its purpose ("sitemap", "page")
    - An open breaker surfaces as ServiceUnavailableError

Design Decisions:
    - One short-lived httpx.AsyncClient per call: fetches are rare and hosts vary
    - Breaker options come from settings on first use of each name
"""

import logging

import httpx

from lamontai.config import get_settings
from lamontai.core.errors import UpstreamFetchError
from lamontai.infrastructure.circuit_breaker import CircuitBreaker, get_breaker

logger = logging.getLogger(__name__)

XML_ACCEPT = "application/xml,text/xml;q=0.9,*/*;q=0.8"
HTML_ACCEPT = "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8"


def _breaker(name: str, timeout: float) -> CircuitBreaker:
    settings = get_settings()
    return get_breaker(
        name,
        failure_threshold=settings.breaker_failure_threshold,
        reset_timeout=settings.breaker_reset_timeout_seconds,
        half_open_success_threshold=settings.breaker_half_open_successes,
        # breaker deadline slightly above the HTTP timeout so httpx reports first
        timeout=timeout + 1,
    )


async def _get(url: str, timeout: float, accept: str, user_agent: str) -> str:
    headers = {"User-Agent": user_agent, "Accept": accept}
    try:
        async with httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=headers,
        ) as client:
            response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"Fetch failed: {e}", extra={"url": url})
        raise UpstreamFetchError(f"Failed to fetch {url}", url) from e

    if response.status_code >= 400:
        logger.warning(
            f"Fetch returned HTTP {response.status_code}",
            extra={"url": url, "status_code": response.status_code},
        )
        raise UpstreamFetchError(
            f"Failed to fetch {url}: HTTP {response.status_code}", url,
        )
    return response.text


async def fetch_text(
    url: str,
    timeout: float | None = None,
    accept: str = HTML_ACCEPT,
    breaker: str = "page",
) -> str:
    """Body of url as text."""
    settings = get_settings()
    timeout = timeout if timeout is not None else settings.page_fetch_timeout_seconds
    return await _breaker(breaker, timeout).call(
        _get, url, timeout, accept, settings.http_user_agent,
    )


async def fetch_sitemap_xml(url: str) -> str:
    settings = get_settings()
    return await fetch_text(
        url, settings.sitemap_fetch_timeout_seconds, XML_ACCEPT, breaker="sitemap",
    )


async def fetch_page_html(url: str) -> str:
    settings = get_settings()
    return await fetch_text(
        url, settings.page_fetch_timeout_seconds, HTML_ACCEPT, breaker="page",
    )
