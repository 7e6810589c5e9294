"""Page Analysis — pure extraction of title, headings and frequent terms from HTML.

Invariants:
    - No IO: callers fetch the HTML and cache the result
    - keywords holds at most 10 entries, most frequent first, ties by first appearance
    - word_count counts only the words considered for keywords (length > 3)
    - summarize_writing_style of no pages reports zero averages, never divides by zero

Design Decisions:
    - Regex extraction over a full HTML parser: the result feeds a dashboard hint,
      not a renderer (ADR: mirror the lightweight crawler the product shipped with)
"""

import re
from collections import Counter
from dataclasses import dataclass, field, asdict

from lamontai.core.text_metrics import strip_html, readability_score

_TITLE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_HEADING = re.compile(r"<h[1-6][^>]*>(.*?)</h[1-6]>", re.IGNORECASE | re.DOTALL)
_NON_WORD = re.compile(r"\W+")

MAX_KEYWORDS = 10


@dataclass
class PageAnalysis:
    """Summary of one crawled page."""
    url: str
    title: str | None = None
    headings: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    word_count: int = 0
    readability_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PageAnalysis":
        return cls(**{k: data[k] for k in cls.__dataclass_fields__ if k in data})


def analyze_html(url: str, html: str) -> PageAnalysis:
    """Analyze raw HTML of a page. Pure, no IO."""
    title_match = _TITLE.search(html)
    title = strip_html(title_match.group(1)) if title_match else None

    headings = [
        text for text in (strip_html(h) for h in _HEADING.findall(html)) if text
    ]

    visible = strip_html(html)
    words = [w for w in _NON_WORD.split(visible.lower()) if len(w) > 3]
    counts = Counter(words)
    # Counter.most_common keeps insertion order for ties
    keywords = [word for word, _ in counts.most_common(MAX_KEYWORDS)]

    return PageAnalysis(
        url=url,
        title=title or None,
        headings=headings,
        keywords=keywords,
        word_count=len(words),
        readability_score=readability_score(visible),
    )


TOP_STYLE_KEYWORDS = 20
SAMPLE_HEADINGS = 10


def summarize_writing_style(analyses: list[PageAnalysis]) -> dict:
    """Aggregate keyword frequency, length and headings across analyzed pages."""
    frequency = Counter(k for a in analyses for k in a.keywords)
    headings = [h for a in analyses for h in a.headings]
    total_words = sum(a.word_count for a in analyses)
    return {
        "top_keywords": [k for k, _ in frequency.most_common(TOP_STYLE_KEYWORDS)],
        "average_word_count": total_words / len(analyses) if analyses else 0.0,
        "heading_count": len(headings),
        "analyzed_articles": len(analyses),
        "sample_headings": headings[:SAMPLE_HEADINGS],
    }
