"""Generation Prompts — pure builders for every language-model request the API makes.

Invariants:
    - Builders are pure string functions; no client, no settings
    - JSON-producing prompts always say "Respond with JSON only"
    - Content sent for analysis is truncated to ANALYSIS_CONTENT_LIMIT characters
    - parse_json_payload either returns a dict or raises ValueError

Design Decisions:
    - System prompts as module constants: one place to tune voice (ADR: prompt locality)
    - Optional business context and internal links appended only when present, so
      users who skipped onboarding still get a usable prompt
"""

import json
import re

from lamontai.core.domain_types import ARTICLE_WORD_RANGES, ArticleLength

ANALYSIS_CONTENT_LIMIT = 7000

ARTICLE_SYSTEM = (
    "You are an expert SEO content writer who creates high-quality, engaging, "
    "and SEO-optimized articles."
)
TITLE_SYSTEM = "You are an expert at creating SEO-optimized titles for articles."
SNIPPET_SYSTEM = "You are an expert at creating compelling meta descriptions for SEO."
KEYWORD_SYSTEM = (
    "You are an expert SEO keyword researcher with access to the latest search "
    "volume data. Your responses are always valid JSON."
)
ANALYSIS_SYSTEM = (
    "You are an expert SEO content analyzer. Your responses are always valid JSON."
)

_FENCED = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)


def article_prompt(
    topic: str,
    keywords: list[str],
    tone: str = "professional",
    style: str = "informative",
    length: ArticleLength = ArticleLength.MEDIUM,
    business_context: str | None = None,
    internal_links: list[str] | None = None,
) -> str:
    """User prompt for the article body."""
    lines = [
        f'Write a {tone}, {style} article about "{topic}" that is optimized for SEO.',
        f"The article should be approximately {ARTICLE_WORD_RANGES[length]} words.",
        f"Include the following keywords naturally in the article: {', '.join(keywords)}.",
        "Format the article with proper headings (H2, H3) and include an "
        "introduction and conclusion.",
        "The structure should be web-friendly with short paragraphs and engaging content.",
    ]
    if business_context:
        lines.append(f"The article is published by this business: {business_context}")
    if internal_links:
        lines.append(
            "Where relevant, link to these pages from the same site: "
            + ", ".join(internal_links),
        )
    lines.append("Format the output as clean HTML.")
    return "\n".join(lines)


def title_prompt(topic: str, keywords: list[str]) -> str:
    return (
        f'Create a compelling, SEO-optimized title for an article about "{topic}" '
        f"that includes one of these keywords if possible: {', '.join(keywords)}. "
        "The title should be no more than 60 characters. "
        "Return only the title, nothing else."
    )


def snippet_prompt(title: str, keywords: list[str]) -> str:
    return (
        f'Create a compelling meta description for an article with the title "{title}". '
        "The description should be under 160 characters and include one of these "
        f"keywords if possible: {', '.join(keywords)}. "
        "Return only the description, nothing else."
    )


def keyword_research_prompt(
    query: str, limit: int = 10, country: str = "us", language: str = "en",
) -> str:
    return (
        f'Generate a list of {limit} SEO keyword ideas related to "{query}" for the '
        f"country {country} and language {language}.\n"
        "For each keyword, provide an estimated monthly search volume (volume), "
        "keyword difficulty score 0-100 (difficulty), cost per click in USD (cpc), "
        "and whether it is primarily informational, transactional, or navigational "
        "(intent).\n"
        'Return an object with keys "keywords" (list), "searchIntent" (percentages '
        'by intent) and "competitorKeywords" (list).\n'
        "Respond with JSON only."
    )


def content_analysis_prompt(
    content: str, keywords: list[str], url: str | None = None,
) -> str:
    body = content[:ANALYSIS_CONTENT_LIMIT]
    if len(content) > ANALYSIS_CONTENT_LIMIT:
        body += "... (trimmed for brevity)"
    parts = [
        "Analyze the following content for SEO optimization:",
        f"CONTENT: {body}",
        f"TARGET KEYWORDS: {', '.join(keywords)}",
    ]
    if url:
        parts.append(f"URL: {url}")
    parts.append(
        "Provide a detailed analysis including:\n"
        "1. Overall SEO score 0-100 (seoScore)\n"
        "2. Readability score 0-100 (readabilityScore)\n"
        "3. Keyword density for primary and secondary keywords (keywordDensity)\n"
        "4. Content length statistics: words, characters, paragraphs (contentLength)\n"
        "5. Specific improvement suggestions (suggestions)\n"
        "6. Heading structure counts h1-h4 (headingStructure)\n"
        "7. Keyword usage in title, metaDescription, firstParagraph, headings, "
        "imageAlt (keywordUsage)\n"
        "8. Competitor comparison (competitors)\n"
        "9. Technical issues (technicalIssues)\n"
        "Respond with JSON only."
    )
    return "\n\n".join(parts)


def parse_json_payload(text: str) -> dict:
    """First JSON object in model output, fenced or bare."""
    fenced = _FENCED.search(text)
    candidate = fenced.group(1) if fenced else None
    if candidate is None:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object found in model output")
        candidate = text[start : end + 1]
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Model output is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ValueError("Model output JSON is not an object")
    return payload
