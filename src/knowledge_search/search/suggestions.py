"""Type-ahead suggestions scored on raw title/description containment.

Unlike the main search path this works on the untokenized query, so a
partially typed phrase still finds the document it came from.
"""

from __future__ import annotations

from collections.abc import Iterable

from knowledge_search.domain.search import IndexedDocument, Suggestion


EXACT_TITLE_SCORE = 100
TITLE_CONTAINS_SCORE = 50
DESCRIPTION_CONTAINS_SCORE = 20
TITLE_WORD_SCORE = 10
DESCRIPTION_WORD_SCORE = 5


def suggestion_score(title: str, description: str, query: str) -> int:
    """Score a title/description pair against a typed query.

    Examples:
        >>> suggestion_score("React入門ガイド", "", "react入門ガイド")
        110
        >>> suggestion_score("Intro to React", "Learn React", "react")
        85
    """
    query_lower = query.lower()
    title_lower = title.lower()
    description_lower = description.lower()

    score = 0
    if title_lower == query_lower:
        score += EXACT_TITLE_SCORE
    elif query_lower in title_lower:
        score += TITLE_CONTAINS_SCORE

    if query_lower in description_lower:
        score += DESCRIPTION_CONTAINS_SCORE

    title_words = title_lower.split()
    description_words = description_lower.split()
    for word in query_lower.split():
        if word in title_words:
            score += TITLE_WORD_SCORE
        if word in description_words:
            score += DESCRIPTION_WORD_SCORE
    return score


def build_suggestions(
    documents: Iterable[IndexedDocument],
    query: str,
    *,
    limit: int = 5,
    min_query_length: int = 2,
) -> list[Suggestion]:
    """Return up to ``limit`` suggestions, best score first."""
    needle = query.strip()
    if len(needle) < min_query_length:
        return []

    needle_lower = needle.lower()
    suggestions = [
        Suggestion(
            id=document.id,
            content_id=document.content_id,
            title=document.title,
            description=document.description,
            category=document.categories[0] if document.categories else None,
            difficulty=_optional_str(document.metadata.get("difficulty")),
            score=suggestion_score(document.title, document.description, needle),
        )
        for document in documents
        if needle_lower in document.title.lower() or needle_lower in document.description.lower()
    ]
    suggestions.sort(key=lambda suggestion: suggestion.score, reverse=True)
    return suggestions[:limit]


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)
