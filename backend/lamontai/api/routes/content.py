"""Content Routes — internal-link suggestions from the user's sitemap, page analysis.

Invariants:
    - relevant-links answers 400 when the user has no sitemap configured
    - analyze-url never fails on an unreachable page (empty analysis instead)
    - analyze-writing-style answers 404 when the user has no sitemap configured
"""

import logging

from fastapi import APIRouter, Depends, Query

from lamontai.api.deps import get_current_user
from lamontai.core.errors import (
    BusinessRuleError, ResourceNotFoundError, UpstreamFetchError,
)
from lamontai.core.sitemap import SitemapParseError
from lamontai.infrastructure.cache import CacheBackend, get_cache
from lamontai.models.user import User
from lamontai.schemas.content import (
    AnalyzeUrlRequest,
    PageAnalysisOut,
    RelevantLinksRequest,
    RelevantLinksResponse,
    WritingStyleResponse,
)
from lamontai.services import site_intelligence

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content", tags=["content"])


@router.post("/relevant-links", response_model=RelevantLinksResponse)
async def relevant_links(
    body: RelevantLinksRequest,
    user: User = Depends(get_current_user),
    cache: CacheBackend = Depends(get_cache),
):
    sitemap_url = user.settings.sitemap_url if user.settings else None
    if not sitemap_url:
        raise BusinessRuleError(
            "No sitemap configured. Add one in onboarding first.", "SITEMAP_NOT_CONFIGURED",
        )
    try:
        links = await site_intelligence.relevant_links(
            cache, sitemap_url, body.topic, body.max_results,
        )
    except SitemapParseError as e:
        raise UpstreamFetchError(str(e), sitemap_url)
    return RelevantLinksResponse(links=links)


@router.post("/analyze-url", response_model=PageAnalysisOut)
async def analyze_url(
    body: AnalyzeUrlRequest,
    _: User = Depends(get_current_user),
    cache: CacheBackend = Depends(get_cache),
):
    return await site_intelligence.analyze_url(cache, body.url)


@router.get("/analyze-writing-style", response_model=WritingStyleResponse)
async def analyze_writing_style(
    max_articles: int = Query(5, ge=1, le=10),
    user: User = Depends(get_current_user),
    cache: CacheBackend = Depends(get_cache),
):
    sitemap_url = user.settings.sitemap_url if user.settings else None
    if not sitemap_url:
        raise ResourceNotFoundError("Sitemap", str(user.id))
    try:
        data = await site_intelligence.analyze_writing_style(
            cache, sitemap_url, max_articles,
        )
    except SitemapParseError as e:
        raise UpstreamFetchError(str(e), sitemap_url)
    return WritingStyleResponse(data=data)
