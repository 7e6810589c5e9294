"""Sitemap Parsing — pure XML parsing plus link selection by topic or by recency.

Invariants:
    - parse_sitemap_xml is namespace-agnostic (<urlset> and <sitemapindex>, any xmlns)
    - Entries without <loc> are skipped, never raised on
    - Malformed or hostile XML raises SitemapParseError (never returns partial data)
    - find_relevant_links returns at most max_results locs
    - recent_urls orders by <lastmod> descending; undated or unparseable entries go last

Design Decisions:
    - defusedxml over xml.etree: sitemaps are untrusted third-party documents
      (entity expansion / external entity attacks)
    - Child sitemaps are returned, not fetched: following them is IO and belongs
      to services/site_intelligence.py (ADR: functional core)
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from functools import cmp_to_key
from urllib.parse import urlparse
from xml.etree.ElementTree import ParseError

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import fromstring


class SitemapParseError(ValueError):
    """Sitemap document could not be parsed."""


@dataclass
class SitemapUrl:
    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: str | None = None


@dataclass
class SitemapData:
    """Parsed sitemap — child_sitemaps populated only for index documents."""
    urls: list[SitemapUrl] = field(default_factory=list)
    is_index: bool = False
    child_sitemaps: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SitemapData":
        return cls(
            urls=[SitemapUrl(**u) for u in data.get("urls", [])],
            is_index=bool(data.get("is_index", False)),
            child_sitemaps=list(data.get("child_sitemaps", [])),
        )


def _local(tag: str) -> str:
    """Tag name without its {namespace} prefix, lower-cased."""
    return tag.rsplit("}", 1)[-1].lower()


def _child_text(element, name: str) -> str | None:
    for child in element:
        if _local(child.tag) == name:
            text = (child.text or "").strip()
            return text or None
    return None


def parse_sitemap_xml(xml: str | bytes) -> SitemapData:
    """Parse a sitemap or sitemap index document. Pure, no IO."""
    try:
        root = fromstring(xml)
    except (ParseError, DefusedXmlException) as e:
        raise SitemapParseError(f"Failed to parse sitemap XML: {e}") from e

    kind = _local(root.tag)
    if kind == "sitemapindex":
        children = [
            loc for loc in (
                _child_text(s, "loc") for s in root if _local(s.tag) == "sitemap"
            ) if loc
        ]
        return SitemapData(urls=[], is_index=True, child_sitemaps=children)

    if kind != "urlset":
        raise SitemapParseError(f"Unexpected sitemap root element <{kind}>")

    urls = []
    for entry in root:
        if _local(entry.tag) != "url":
            continue
        loc = _child_text(entry, "loc")
        if not loc:
            continue
        urls.append(SitemapUrl(
            loc=loc,
            lastmod=_child_text(entry, "lastmod"),
            changefreq=_child_text(entry, "changefreq"),
            priority=_child_text(entry, "priority"),
        ))
    return SitemapData(urls=urls, is_index=False)


def _path(loc: str) -> str:
    return urlparse(loc).path


def _priority(url: SitemapUrl) -> float | None:
    try:
        return float(url.priority) if url.priority is not None else None
    except ValueError:
        return None


def _compare(a: SitemapUrl, b: SitemapUrl) -> int:
    pa, pb = _priority(a), _priority(b)
    if pa is not None and pb is not None:
        # higher priority first
        return (pb > pa) - (pb < pa)
    return len(_path(a.loc)) - len(_path(b.loc))


def find_relevant_links(
    sitemap: SitemapData, topic: str, max_results: int = 5,
) -> list[str]:
    """Sitemap locs whose path mentions the topic, best candidates first."""
    lowered = topic.strip().lower()
    if not lowered:
        return []
    needles = {
        lowered,
        "-".join(lowered.split()),
        "_".join(lowered.split()),
    }
    matches = [
        url for url in sitemap.urls
        if any(n in _path(url.loc).lower() for n in needles)
    ]
    matches.sort(key=cmp_to_key(_compare))
    return [url.loc for url in matches[:max_results]]


def _lastmod(url: SitemapUrl) -> datetime | None:
    if not url.lastmod:
        return None
    try:
        parsed = datetime.fromisoformat(url.lastmod)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def recent_urls(sitemap: SitemapData, limit: int) -> list[SitemapUrl]:
    """Most recently modified entries first; undated entries keep sitemap order after them."""
    dated = [(u, _lastmod(u)) for u in sitemap.urls]
    with_date = sorted(
        (pair for pair in dated if pair[1] is not None),
        key=lambda pair: pair[1],
        reverse=True,
    )
    undated = [u for u, stamp in dated if stamp is None]
    return ([u for u, _ in with_date] + undated)[:limit]
