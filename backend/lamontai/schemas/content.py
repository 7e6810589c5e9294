"""Content Schemas — internal-link suggestions, single-page and writing-style analysis."""

from pydantic import BaseModel, Field

from lamontai.schemas.common import HttpUrlStr


class RelevantLinksRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)
    max_results: int = Field(5, ge=1, le=20)


class RelevantLinksResponse(BaseModel):
    success: bool = True
    links: list[str]


class AnalyzeUrlRequest(BaseModel):
    url: HttpUrlStr


class PageAnalysisOut(BaseModel):
    url: str
    title: str | None = None
    headings: list[str]
    keywords: list[str]
    word_count: int
    readability_score: int


class WritingStyleOut(BaseModel):
    top_keywords: list[str]
    average_word_count: float
    heading_count: int
    analyzed_articles: int
    sample_headings: list[str]


class WritingStyleData(BaseModel):
    writing_style: WritingStyleOut
    analysis_details: list[PageAnalysisOut]


class WritingStyleResponse(BaseModel):
    success: bool = True
    data: WritingStyleData
