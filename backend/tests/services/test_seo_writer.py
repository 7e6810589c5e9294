"""SEO Writer — call sequencing, token accounting and output normalisation."""

import pytest

from lamontai.core.domain_types import ArticleLength
from lamontai.core.errors import LLMAPIError
from lamontai.services import seo_writer
from lamontai.services.seo_writer import ArticleOptions


async def test_generate_article_sums_tokens_over_three_calls(fake_llm):
    fake_llm.queue("<p>Body text here.</p>", "Title", "Meta")
    result = await seo_writer.generate_article(
        fake_llm, "topic", ["kw"], ArticleOptions(length=ArticleLength.LONG),
    )
    assert result.calls == ["body", "title", "snippet"]
    assert (result.input_tokens, result.output_tokens) == (30, 60)
    assert fake_llm.calls[0]["max_tokens"] == seo_writer.ARTICLE_MAX_TOKENS[ArticleLength.LONG]
    assert result.data["title"] == "Title"
    assert result.data["word_count"] == 3


async def test_blank_title_falls_back_to_topic(fake_llm):
    fake_llm.queue("<p>Body</p>", '""', "Meta")
    result = await seo_writer.generate_article(fake_llm, "coffee topic", ["kw"])
    assert result.data["title"] == "coffee topic"
    assert "coffee topic" in fake_llm.calls[2]["prompt"]


async def test_snake_case_fields_are_accepted(fake_llm):
    fake_llm.queue('{"seo_score": 40, "technical_issues": ["slow"]}')
    result = await seo_writer.analyze_content(fake_llm, "text", ["kw"])
    assert result.data["seo_score"] == 40
    assert result.data["technical_issues"] == ["slow"]
    assert result.data["keyword_usage"]["title"] is False


async def test_invalid_json_raises_invalid_response(fake_llm):
    fake_llm.queue("not json")
    with pytest.raises(LLMAPIError) as exc:
        await seo_writer.research_keywords(fake_llm, "coffee")
    assert exc.value.api_error_type == "invalid_response"
