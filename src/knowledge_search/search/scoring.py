"""Weighted multi-field relevance scoring.

The raw score is a weighted sum of query-token occurrence counts over the
result's fields, normalized by ``len(tokens) * 10`` and clamped to 1.0.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from knowledge_search.domain.search import SearchResult


TITLE_WEIGHT = 3.0
DESCRIPTION_WEIGHT = 2.0
CONTENT_WEIGHT = 1.0
TAG_WEIGHT = 2.0
CATEGORY_WEIGHT = 1.5

# Upper bound of the per-token weight used for normalization.
MAX_TOKEN_WEIGHT = 10


def count_occurrences(text: str, tokens: Sequence[str]) -> int:
    """Count non-overlapping occurrences of each token in ``text``, summed.

    Tokens that are substrings of one another are counted separately, so
    ``["react", "rea"]`` against ``"react"`` yields 2.

    Examples:
        >>> count_occurrences("React and react", ["react"])
        2
        >>> count_occurrences("aaa", ["aa"])
        1
    """
    if not text:
        return 0
    lowered = text.lower()
    return sum(lowered.count(token) for token in tokens if token)


def raw_score(result: SearchResult, tokens: Sequence[str]) -> float:
    score = count_occurrences(result.title, tokens) * TITLE_WEIGHT
    score += count_occurrences(result.description, tokens) * DESCRIPTION_WEIGHT
    score += count_occurrences(result.content, tokens) * CONTENT_WEIGHT
    score += sum(count_occurrences(tag, tokens) for tag in result.tags) * TAG_WEIGHT
    score += sum(count_occurrences(category, tokens) for category in result.categories) * CATEGORY_WEIGHT
    return score


def normalize_score(score: float, token_count: int) -> float:
    if token_count <= 0:
        return 0.0
    return min(score / (token_count * MAX_TOKEN_WEIGHT), 1.0)


def calculate_scores(results: Iterable[SearchResult], tokens: Sequence[str]) -> list[SearchResult]:
    """Return copies of ``results`` carrying a relevance score in [0, 1]."""
    return [
        result.model_copy(update={"score": normalize_score(raw_score(result, tokens), len(tokens))})
        for result in results
    ]
