"""Generation Prompts — prompt builders and model-output JSON parsing.

Invariants:
    - Optional business context and internal links appear only when given
    - Analysis content is truncated with a marker past the limit
    - parse_json_payload returns a dict or raises ValueError
"""

import pytest

from lamontai.core.domain_types import ArticleLength
from lamontai.core.generation_prompts import (
    ANALYSIS_CONTENT_LIMIT,
    article_prompt,
    content_analysis_prompt,
    keyword_research_prompt,
    parse_json_payload,
)


def test_article_prompt_has_word_range_and_keywords():
    prompt = article_prompt("coffee", ["beans", "roast"], length=ArticleLength.LONG)
    assert "2500-3000 words" in prompt
    assert "beans, roast" in prompt
    assert "published by this business" not in prompt
    assert "link to these pages" not in prompt


def test_article_prompt_includes_optional_context():
    prompt = article_prompt(
        "coffee", ["beans"],
        business_context="Roastery in Lisbon",
        internal_links=["https://ex.com/a", "https://ex.com/b"],
    )
    assert "Roastery in Lisbon" in prompt
    assert "https://ex.com/a, https://ex.com/b" in prompt


def test_keyword_prompt_asks_for_json():
    prompt = keyword_research_prompt("coffee", limit=5, country="pt", language="pt")
    assert "5 SEO keyword ideas" in prompt
    assert prompt.endswith("Respond with JSON only.")


def test_analysis_prompt_truncates_long_content():
    prompt = content_analysis_prompt("x" * (ANALYSIS_CONTENT_LIMIT + 1000), ["seo"])
    assert "x" * ANALYSIS_CONTENT_LIMIT + "... (trimmed for brevity)" in prompt
    assert "x" * (ANALYSIS_CONTENT_LIMIT + 1) not in prompt


def test_analysis_prompt_mentions_url_only_when_given():
    assert "URL:" not in content_analysis_prompt("text", ["seo"])
    assert "URL: https://ex.com" in content_analysis_prompt("text", ["seo"], "https://ex.com")


def test_parse_fenced_json():
    text = 'Here you go:\n```json\n{"keywords": []}\n```'
    assert parse_json_payload(text) == {"keywords": []}


def test_parse_bare_json_surrounded_by_prose():
    assert parse_json_payload('Sure! {"seoScore": 80} Hope it helps.') == {"seoScore": 80}


@pytest.mark.parametrize("text", [
    "no json here",
    "{not json}",
    "[1, 2, 3]",
])
def test_parse_rejects_non_objects(text):
    with pytest.raises(ValueError):
        parse_json_payload(text)
