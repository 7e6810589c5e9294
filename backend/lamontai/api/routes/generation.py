"""Generation Routes — article writing, keyword research and SEO analysis.

Invariants:
    - Credits and plan allowance are checked before any model call
    - One credit is spent (atomically) only after the model call succeeded
    - Every successful generation writes one ContentGeneration row
    - Responses are {success, data, credits[, article_id]}
    - /keywords and /analyze are aliases of /generate/keywords and /generate/analyze

Design Decisions:
    - Internal links and business context come from the user's onboarding data;
      failures fetching links degrade to "no links", never fail the generation
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lamontai.api.deps import get_current_user
from lamontai.core.domain_types import GenerationKind, plan_article_limit
from lamontai.core.errors import LamontError
from lamontai.core.sitemap import SitemapParseError
from lamontai.core.text_metrics import strip_html
from lamontai.infrastructure import web_fetcher
from lamontai.infrastructure.anthropic_client import ResilientAnthropicClient, get_llm_client
from lamontai.infrastructure.cache import CacheBackend, get_cache
from lamontai.infrastructure.database import get_db
from lamontai.models.content_generation import ContentGeneration
from lamontai.models.user import User
from lamontai.schemas.generation import (
    ArticleGenerationRequest,
    ContentAnalysisRequest,
    GenerationResponse,
    KeywordResearchRequest,
)
from lamontai.services import article_store, seo_writer, site_intelligence, usage_quota
from lamontai.services.seo_writer import ArticleOptions, GenerationResult

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["generation"])

INTERNAL_LINK_COUNT = 5


def _record(
    db: AsyncSession,
    user: User,
    kind: GenerationKind,
    topic: str,
    keywords: list[str],
    result: GenerationResult,
) -> None:
    db.add(ContentGeneration(
        user_id=user.id,
        kind=kind.value,
        topic=topic[:500],
        keywords=keywords,
        input_tokens=result.input_tokens,
        output_tokens=result.output_tokens,
    ))


async def _internal_links(cache: CacheBackend, user: User, topic: str) -> list[str]:
    settings = user.settings
    if settings is None or not settings.sitemap_url:
        return []
    try:
        return await site_intelligence.relevant_links(
            cache, settings.sitemap_url, topic, INTERNAL_LINK_COUNT,
        )
    except (LamontError, SitemapParseError) as e:
        logger.warning(
            f"Internal links unavailable: {e}", extra={"user_id": str(user.id)},
        )
        return []


@router.post("/generate/article", response_model=GenerationResponse)
async def generate_article(
    body: ArticleGenerationRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient = Depends(get_llm_client),
    cache: CacheBackend = Depends(get_cache),
):
    usage_quota.ensure_can_generate_article(user)
    links = (
        await _internal_links(cache, user, body.topic)
        if body.include_internal_links else []
    )
    business_context = user.settings.business_description if user.settings else None

    result = await seo_writer.generate_article(
        llm,
        body.topic,
        body.keywords,
        ArticleOptions(tone=body.tone, style=body.style, length=body.length),
        business_context=business_context,
        internal_links=links,
    )
    credits = await usage_quota.consume(
        db, user.id, "articles_generated", "generate content",
        article_limit=plan_article_limit(user.plan),
    )
    _record(db, user, GenerationKind.ARTICLE, body.topic, body.keywords, result)

    article_id = None
    if body.save:
        article = await article_store.create_article(
            db,
            user.id,
            title=result.data["title"],
            content=result.data["content"],
            keywords=result.data["keywords"],
            snippet=result.data["snippet"] or None,
        )
        article_id = article.id
    await db.commit()
    return GenerationResponse(data=result.data, credits=credits, article_id=article_id)


@router.post("/generate/keywords", response_model=GenerationResponse)
@router.post("/keywords", response_model=GenerationResponse)
async def research_keywords(
    body: KeywordResearchRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient = Depends(get_llm_client),
):
    usage_quota.ensure_has_credits(user, "research keywords")
    result = await seo_writer.research_keywords(
        llm, body.query, body.limit, body.country, body.language,
    )
    credits = await usage_quota.consume(
        db, user.id, "keywords_researched", "research keywords",
    )
    _record(db, user, GenerationKind.KEYWORDS, body.query, [], result)
    await db.commit()
    return GenerationResponse(data=result.data, credits=credits)


@router.post("/generate/analyze", response_model=GenerationResponse)
@router.post("/analyze", response_model=GenerationResponse)
async def analyze_content(
    body: ContentAnalysisRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    llm: ResilientAnthropicClient = Depends(get_llm_client),
):
    usage_quota.ensure_has_credits(user, "analyze content")
    content = body.content
    if not (content and content.strip()):
        content = strip_html(await web_fetcher.fetch_page_html(body.url))

    result = await seo_writer.analyze_content(llm, content, body.keywords, body.url)
    credits = await usage_quota.consume(db, user.id, None, "analyze content")
    _record(
        db, user, GenerationKind.ANALYSIS, body.url or content[:100],
        body.keywords, result,
    )
    await db.commit()
    return GenerationResponse(data=result.data, credits=credits)
