"""Highlight extraction for search results.

Title and description each contribute at most one fixed-width window around
the first query token found; body content contributes whole sentences that
mention a query token.

Smart Defaults (overridable through Settings):
- 20 characters of context on each side of a field match
- Up to 3 body sentences per result
- Sentences end at ``.``, ``!``, ``?`` and the full-width ``。``, ``！``, ``？``
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import re

from knowledge_search.domain.search import SearchResult
from knowledge_search.search.analyzers import PortalAnalyzer, tokenize


# Sentence-ending punctuation, ASCII and Japanese full-width
SENTENCE_END_PATTERN = re.compile(r"[.!?。！？]")

DEFAULT_WINDOW = 20
DEFAULT_MAX_SENTENCES = 3


def extract_window(text: str, tokens: Sequence[str], window: int = DEFAULT_WINDOW) -> str | None:
    """Return the text around the first query token present in ``text``.

    Tokens are tried in query order; the first one that occurs anywhere
    (case-insensitive) wins, and the excerpt is clamped to the text bounds.

    Examples:
        >>> extract_window("React入門ガイド", ["react"], window=2)
        'React入門'
        >>> extract_window("TypeScript", ["react"]) is None
        True
    """
    if not text:
        return None
    lowered = text.lower()
    for token in tokens:
        if not token:
            continue
        index = lowered.find(token)
        if index != -1:
            start = max(0, index - window)
            end = min(len(text), index + len(token) + window)
            return text[start:end]
    return None


def split_sentences(text: str) -> list[str]:
    """Split on sentence-ending punctuation; pieces are not trimmed."""
    if not text:
        return []
    return SENTENCE_END_PATTERN.split(text)


def extract_sentence_highlights(
    content: str,
    tokens: Sequence[str],
    max_highlights: int = DEFAULT_MAX_SENTENCES,
) -> list[str]:
    """Collect up to ``max_highlights`` trimmed sentences mentioning a token."""
    highlights: list[str] = []
    if max_highlights <= 0:
        return highlights
    for sentence in split_sentences(content):
        lowered = sentence.lower()
        if any(token and token in lowered for token in tokens):
            highlights.append(sentence.strip())
            if len(highlights) >= max_highlights:
                break
    return highlights


def build_highlights(
    result: SearchResult,
    tokens: Sequence[str],
    *,
    window: int = DEFAULT_WINDOW,
    max_sentences: int = DEFAULT_MAX_SENTENCES,
) -> list[str]:
    """Return [title excerpt?, description excerpt?, *content sentences]."""
    highlights: list[str] = []
    for field_text in (result.title, result.description):
        excerpt = extract_window(field_text, tokens, window)
        if excerpt:
            highlights.append(excerpt)
    highlights.extend(extract_sentence_highlights(result.content, tokens, max_sentences))
    return highlights


def generate_highlights(
    results: Iterable[SearchResult],
    query: str,
    *,
    analyzer: PortalAnalyzer | None = None,
    window: int = DEFAULT_WINDOW,
    max_sentences: int = DEFAULT_MAX_SENTENCES,
) -> list[SearchResult]:
    """Return copies of ``results`` with highlights for the raw ``query``.

    The query is re-tokenized here rather than reusing the match tokens, so
    highlights always reflect what the user typed.
    """
    tokens = analyzer.terms(query) if analyzer is not None else tokenize(query)
    return [
        result.model_copy(
            update={"highlights": build_highlights(result, tokens, window=window, max_sentences=max_sentences)}
        )
        for result in results
    ]
