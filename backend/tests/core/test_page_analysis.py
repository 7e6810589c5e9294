"""Page Analysis — title, headings and frequent-term extraction from HTML."""

from lamontai.core.page_analysis import (
    PageAnalysis, analyze_html, summarize_writing_style,
)

HTML = (
    "<html><head><title>Best Coffee Beans</title></head><body>"
    "<h1>Coffee Guide</h1><h2>Roasting beans</h2>"
    "<p>Coffee beans coffee beans coffee roasting.</p>"
    "</body></html>"
)


def test_extracts_title_and_headings_in_order():
    result = analyze_html("https://ex.com", HTML)
    assert result.title == "Best Coffee Beans"
    assert result.headings == ["Coffee Guide", "Roasting beans"]


def test_keywords_ranked_by_frequency_ties_by_first_appearance():
    result = analyze_html("https://ex.com", HTML)
    assert result.keywords == ["coffee", "beans", "roasting", "best", "guide"]


def test_word_count_only_counts_words_longer_than_three_chars():
    result = analyze_html("https://ex.com", HTML)
    assert result.word_count == 13


def test_missing_title_is_none():
    result = analyze_html("https://ex.com", "<p>Nothing here</p>")
    assert result.title is None
    assert result.headings == []


def test_round_trips_through_dict():
    result = analyze_html("https://ex.com", HTML)
    assert PageAnalysis.from_dict(result.to_dict()) == result


def test_writing_style_aggregates_across_pages():
    pages = [
        PageAnalysis(url="a", headings=["Intro"], keywords=["coffee", "beans"], word_count=100),
        PageAnalysis(url="b", headings=["Tea", "Milk"], keywords=["milk", "coffee"], word_count=300),
    ]
    style = summarize_writing_style(pages)
    assert style["top_keywords"] == ["coffee", "beans", "milk"]
    assert style["average_word_count"] == 200
    assert style["heading_count"] == 3
    assert style["analyzed_articles"] == 2
    assert style["sample_headings"] == ["Intro", "Tea", "Milk"]


def test_writing_style_of_no_pages_is_empty():
    style = summarize_writing_style([])
    assert style["average_word_count"] == 0
    assert style["top_keywords"] == []
