"""Text Metrics — pure helpers for slugs, word counts, snippets and readability.

Invariants:
    - All functions are pure and deterministic (no IO, no randomness)
    - readability_score always returns a value in [0, 100]
    - make_snippet never returns more than `limit` characters

Design Decisions:
    - Flesch reading ease with a vowel-group syllable heuristic: good enough for a
      dashboard score, no NLP dependency
    - strip_html is regex based: input is our own LLM output or a page we only mine
      for counts, never re-rendered
"""

import re

_SLUG_DROP = re.compile(r"[^\w ]+")
_SPACES = re.compile(r" +")
_WHITESPACE = re.compile(r"\s+")
_SCRIPT_STYLE = re.compile(r"<(script|style)\b[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_SENTENCE_END = re.compile(r"[.!?]+")
_WORD = re.compile(r"[A-Za-z]+")
_VOWEL_GROUP = re.compile(r"[aeiouy]+")


def slugify(title: str) -> str:
    """Lower-case, drop non-word characters, join words with hyphens."""
    cleaned = _SLUG_DROP.sub("", title.strip().lower())
    return _SPACES.sub("-", cleaned.strip())


def count_words(text: str) -> int:
    return len(text.split())


def strip_html(html: str) -> str:
    """Visible text of an HTML fragment with whitespace collapsed."""
    text = _SCRIPT_STYLE.sub(" ", html)
    text = _TAG.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def make_snippet(content: str, limit: int = 300) -> str:
    """Plain-text preview of content, cut on a word boundary."""
    text = strip_html(content)
    if len(text) <= limit:
        return text
    cut = text[: limit - 3]
    if " " in cut:
        cut = cut[: cut.rfind(" ")]
    return cut.rstrip(" ,;:") + "..."


def _syllables(word: str) -> int:
    word = word.lower()
    groups = len(_VOWEL_GROUP.findall(word))
    if word.endswith("e") and groups > 1 and not word.endswith("le"):
        groups -= 1
    return max(1, groups)


def readability_score(text: str) -> int:
    """Flesch reading ease of plain text, clamped to 0–100."""
    words = _WORD.findall(text)
    if not words:
        return 0
    sentences = max(1, len([s for s in _SENTENCE_END.split(text) if s.strip()]))
    syllables = sum(_syllables(w) for w in words)
    score = (
        206.835
        - 1.015 * (len(words) / sentences)
        - 84.6 * (syllables / len(words))
    )
    return int(round(min(100.0, max(0.0, score))))


def clean_generated_line(text: str) -> str:
    """Single-line LLM output (title, meta description) without quotes."""
    return text.replace('"', "").strip()
