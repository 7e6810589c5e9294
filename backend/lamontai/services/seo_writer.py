"""SEO Writer — article generation, keyword research and content analysis via the LLM.

Invariants:
    - Article generation makes exactly three model calls: body, title, meta description
    - Structured results (keywords, analysis) always carry every documented key;
      missing fields are filled with neutral defaults
    - Unparseable JSON from the model raises LLMAPIError("invalid_response")
    - Token usage of every call is summed into the returned GenerationResult

Design Decisions:
    - Prompts live in core/generation_prompts.py; this module only sequences calls
    - Long-form body on the article model, short copy (title, meta) on the cheaper model
    - readability_score computed locally from the generated HTML, not asked of the model
"""

import logging
from dataclasses import dataclass, field

from lamontai.config import get_settings
from lamontai.core import generation_prompts as prompts
from lamontai.core.domain_types import DEFAULT_SEARCH_INTENT, ArticleLength
from lamontai.core.errors import LLMAPIError
from lamontai.core.text_metrics import (
    clean_generated_line, count_words, readability_score, strip_html,
)
from lamontai.infrastructure.anthropic_client import Completion, ResilientAnthropicClient

logger = logging.getLogger(__name__)

ESTIMATED_RANK = "Top 20 potential"

ARTICLE_MAX_TOKENS = {
    ArticleLength.SHORT: 2500,
    ArticleLength.MEDIUM: 4000,
    ArticleLength.LONG: 6000,
}


@dataclass
class ArticleOptions:
    tone: str = "professional"
    style: str = "informative"
    length: ArticleLength = ArticleLength.MEDIUM


@dataclass
class GenerationResult:
    """Structured generation output plus the tokens it cost."""
    data: dict
    input_tokens: int = 0
    output_tokens: int = 0
    calls: list[str] = field(default_factory=list)

    def add(self, name: str, completion: Completion) -> None:
        self.calls.append(name)
        self.input_tokens += completion.input_tokens
        self.output_tokens += completion.output_tokens


def _parse(text: str, what: str) -> dict:
    try:
        return prompts.parse_json_payload(text)
    except ValueError as e:
        logger.warning(f"Unparseable {what} response: {e}")
        raise LLMAPIError(f"Could not parse {what} response", "invalid_response")


def _pick(data: dict, camel: str, snake: str, default):
    """Field from model output under either naming style, else default."""
    for key in (camel, snake):
        value = data.get(key)
        if value not in (None, "", [], {}):
            return value
    return default


async def generate_article(
    llm: ResilientAnthropicClient,
    topic: str,
    keywords: list[str],
    options: ArticleOptions | None = None,
    business_context: str | None = None,
    internal_links: list[str] | None = None,
) -> GenerationResult:
    """Full article: HTML body, SEO title and meta description."""
    options = options or ArticleOptions()
    settings = get_settings()
    result = GenerationResult(data={})

    body = await llm.complete(
        model=settings.article_model,
        system=prompts.ARTICLE_SYSTEM,
        prompt=prompts.article_prompt(
            topic, keywords, options.tone, options.style, options.length,
            business_context, internal_links,
        ),
        max_tokens=ARTICLE_MAX_TOKENS[options.length],
        temperature=0.7,
    )
    result.add("body", body)
    content = body.text

    title_completion = await llm.complete(
        model=settings.copy_model,
        system=prompts.TITLE_SYSTEM,
        prompt=prompts.title_prompt(topic, keywords),
        max_tokens=60,
        temperature=0.7,
    )
    result.add("title", title_completion)
    title = clean_generated_line(title_completion.text) or topic

    snippet_completion = await llm.complete(
        model=settings.copy_model,
        system=prompts.SNIPPET_SYSTEM,
        prompt=prompts.snippet_prompt(title, keywords),
        max_tokens=200,
        temperature=0.7,
    )
    result.add("snippet", snippet_completion)

    plain = strip_html(content)
    result.data = {
        "title": title[:200],
        "content": content,
        "snippet": clean_generated_line(snippet_completion.text)[:300],
        "keywords": keywords,
        "word_count": count_words(plain),
        "readability_score": readability_score(plain),
        "estimated_rank": ESTIMATED_RANK,
    }
    logger.info(
        "Article generated",
        extra={
            "input_tokens": result.input_tokens,
            "output_tokens": result.output_tokens,
        },
    )
    return result


async def research_keywords(
    llm: ResilientAnthropicClient,
    query: str,
    limit: int = 10,
    country: str = "us",
    language: str = "en",
) -> GenerationResult:
    settings = get_settings()
    completion = await llm.complete(
        model=settings.article_model,
        system=prompts.KEYWORD_SYSTEM,
        prompt=prompts.keyword_research_prompt(query, limit, country, language),
        max_tokens=2000,
        temperature=0.5,
    )
    payload = _parse(completion.text, "keyword research")
    result = GenerationResult(data={
        "main_keyword": query,
        "related_keywords": _pick(payload, "keywords", "related_keywords", []),
        "search_intent": _pick(
            payload, "searchIntent", "search_intent", dict(DEFAULT_SEARCH_INTENT),
        ),
        "competitor_keywords": _pick(
            payload, "competitorKeywords", "competitor_keywords", [],
        ),
    })
    result.add("keywords", completion)
    return result


async def analyze_content(
    llm: ResilientAnthropicClient,
    content: str,
    keywords: list[str],
    url: str | None = None,
) -> GenerationResult:
    settings = get_settings()
    completion = await llm.complete(
        model=settings.article_model,
        system=prompts.ANALYSIS_SYSTEM,
        prompt=prompts.content_analysis_prompt(content, keywords, url),
        max_tokens=2000,
        temperature=0.3,
    )
    payload = _parse(completion.text, "content analysis")
    result = GenerationResult(data={
        "seo_score": _pick(payload, "seoScore", "seo_score", 0),
        "readability_score": _pick(
            payload, "readabilityScore", "readability_score", 0,
        ),
        "keyword_density": _pick(
            payload, "keywordDensity", "keyword_density",
            {"primary": 0, "secondary": 0},
        ),
        "content_length": _pick(
            payload, "contentLength", "content_length",
            {"words": 0, "characters": 0, "paragraphs": 0},
        ),
        "suggestions": _pick(payload, "suggestions", "suggestions", []),
        "heading_structure": _pick(
            payload, "headingStructure", "heading_structure",
            {"h1": 0, "h2": 0, "h3": 0, "h4": 0},
        ),
        "keyword_usage": _pick(
            payload, "keywordUsage", "keyword_usage",
            {
                "title": False,
                "meta_description": False,
                "first_paragraph": False,
                "headings": False,
                "image_alt": False,
            },
        ),
        "competitors": _pick(payload, "competitors", "competitors", []),
        "technical_issues": _pick(
            payload, "technicalIssues", "technical_issues", [],
        ),
    })
    result.add("analysis", completion)
    return result
