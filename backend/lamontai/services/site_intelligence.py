"""Site Intelligence — sitemap retrieval, internal-link suggestions and page analysis.

Invariants:
    - Sitemap index files are followed exactly one level deep
    - At most CHILD_FETCH_CONCURRENCY child sitemaps are fetched at once
    - A failing child sitemap is skipped; a failing root sitemap raises
    - initialize_user_sitemap never raises (it runs as a background task)
    - analyze_url never raises on fetch failure: it returns an empty analysis
    - Writing-style analysis looks at no more than MAX_STYLE_ARTICLES pages

Design Decisions:
    - Every result cached under a stable key with a per-kind TTL
      (sitemap 12 h, page analysis 24 h, link suggestions 1 h)
    - Parsing and ranking are pure (core/sitemap.py, core/page_analysis.py); this
      module only does IO and caching (ADR: functional core)
"""

import asyncio
import logging
import uuid

from sqlalchemy import select

from lamontai.core.errors import LamontError
from lamontai.core.page_analysis import (
    PageAnalysis, analyze_html, summarize_writing_style,
)
from lamontai.core.sitemap import (
    SitemapData, SitemapParseError, find_relevant_links, parse_sitemap_xml, recent_urls,
)
from lamontai.infrastructure import database, web_fetcher
from lamontai.infrastructure.cache import CacheBackend
from lamontai.models.user_settings import UserSettings

logger = logging.getLogger(__name__)

SITEMAP_TTL = 12 * 60 * 60
URL_ANALYSIS_TTL = 24 * 60 * 60
RELEVANT_LINKS_TTL = 60 * 60
CHILD_FETCH_CONCURRENCY = 5
MAX_STYLE_ARTICLES = 10


async def fetch_and_parse_sitemap(url: str) -> SitemapData:
    """Fetch a sitemap and, for an index, the URLs of its child sitemaps."""
    root = parse_sitemap_xml(await web_fetcher.fetch_sitemap_xml(url))
    if not root.is_index:
        return root

    semaphore = asyncio.Semaphore(CHILD_FETCH_CONCURRENCY)

    async def fetch_child(child_url: str) -> list:
        async with semaphore:
            try:
                child = parse_sitemap_xml(
                    await web_fetcher.fetch_sitemap_xml(child_url),
                )
            except (LamontError, SitemapParseError) as e:
                logger.warning(
                    f"Skipping child sitemap: {e}", extra={"url": child_url},
                )
                return []
            # nested indexes are not followed
            return child.urls

    batches = await asyncio.gather(
        *(fetch_child(c) for c in root.child_sitemaps),
    )
    return SitemapData(
        urls=[u for batch in batches for u in batch],
        is_index=True,
        child_sitemaps=root.child_sitemaps,
    )


async def get_sitemap(cache: CacheBackend, url: str) -> SitemapData:
    async def load() -> dict:
        return (await fetch_and_parse_sitemap(url)).to_dict()

    data = await cache.get_or_set(f"sitemap:{url}", load, ttl=SITEMAP_TTL)
    return SitemapData.from_dict(data)


async def relevant_links(
    cache: CacheBackend, sitemap_url: str, topic: str, max_results: int = 5,
) -> list[str]:
    """Internal links from the user's sitemap that match topic."""
    sitemap = await get_sitemap(cache, sitemap_url)
    key = f"relevant_links:{sitemap_url}:{topic}:{max_results}:{len(sitemap.urls)}"
    cached = await cache.get(key)
    if cached is not None:
        return cached
    links = find_relevant_links(sitemap, topic, max_results)
    await cache.set(key, links, ttl=RELEVANT_LINKS_TTL)
    return links


async def analyze_url(cache: CacheBackend, url: str) -> dict:
    """Title, headings and frequent terms of a page; empty on fetch failure."""
    key = f"url_analysis:{url}"
    cached = await cache.get(key)
    if cached is not None:
        return cached
    try:
        html = await web_fetcher.fetch_page_html(url)
    except LamontError as e:
        logger.warning(f"Page analysis failed: {e.message}", extra={"url": url})
        return PageAnalysis(url=url).to_dict()
    analysis = analyze_html(url, html).to_dict()
    await cache.set(key, analysis, ttl=URL_ANALYSIS_TTL)
    return analysis


async def analyze_writing_style(
    cache: CacheBackend, sitemap_url: str, max_articles: int = 5,
) -> dict:
    """Style summary of the most recently modified pages of a sitemap."""
    sitemap = await get_sitemap(cache, sitemap_url)
    targets = recent_urls(sitemap, min(max_articles, MAX_STYLE_ARTICLES))
    details = await asyncio.gather(*(analyze_url(cache, u.loc) for u in targets))
    logger.info(
        f"Analyzed {len(details)} articles for writing style", extra={"url": sitemap_url},
    )
    return {
        "writing_style": summarize_writing_style(
            [PageAnalysis.from_dict(d) for d in details],
        ),
        "analysis_details": list(details),
    }


async def initialize_user_sitemap(
    cache: CacheBackend, user_id: uuid.UUID, sitemap_url: str,
) -> bool:
    """Background task: fetch the user's sitemap and record its size."""
    try:
        sitemap = await fetch_and_parse_sitemap(sitemap_url)
        await cache.set(f"sitemap:{sitemap_url}", sitemap.to_dict(), ttl=SITEMAP_TTL)
        await cache.set(
            f"user_sitemap:{user_id}",
            {"url": sitemap_url, "url_count": len(sitemap.urls)},
            ttl=0,
        )
        async with database.db_manager.session() as db:
            result = await db.execute(
                select(UserSettings).where(UserSettings.user_id == user_id),
            )
            settings = result.scalar_one_or_none()
            if settings is not None and settings.sitemap_url == sitemap_url:
                settings.sitemap_url_count = len(sitemap.urls)
                await db.commit()
        logger.info(
            f"Initialized sitemap with {len(sitemap.urls)} URLs",
            extra={"user_id": str(user_id), "url": sitemap_url},
        )
        return True
    except Exception as e:
        logger.error(
            f"Sitemap initialization failed: {e}",
            extra={"user_id": str(user_id), "url": sitemap_url},
        )
        return False
