"""Structured filters over search results.

A result passes when it satisfies every provided filter field, and within a
field matches at least one of the listed values. Empty lists impose no
constraint; missing metadata never matches.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from knowledge_search.domain.search import DateRange, SearchFilters, SearchResult


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO-8601 value into an aware UTC datetime.

    Returns None for missing or unparseable values. Naive datetimes are
    taken to be UTC; a trailing ``Z`` is accepted.

    Examples:
        >>> parse_date("2024-01-01T00:00:00Z").isoformat()
        '2024-01-01T00:00:00+00:00'
        >>> parse_date("not a date") is None
        True
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def document_date(metadata: Mapping[str, Any]) -> datetime | None:
    """Return ``createdAt``, falling back to ``updatedAt``."""
    return parse_date(metadata.get("createdAt") or metadata.get("updatedAt"))


def _intersects(values: Iterable[str], wanted: Sequence[str]) -> bool:
    return any(value in wanted for value in values)


def _in_date_range(metadata: Mapping[str, Any], date_range: DateRange) -> bool:
    start = parse_date(date_range.start)
    end = parse_date(date_range.end)
    when = document_date(metadata)
    if start is None or end is None or when is None:
        return False
    return start <= when <= end


def matches_filters(result: SearchResult, filters: SearchFilters) -> bool:
    if filters.categories and not _intersects(result.categories, filters.categories):
        return False
    if filters.tags and not _intersects(result.tags, filters.tags):
        return False
    if filters.date_range is not None and not _in_date_range(result.metadata, filters.date_range):
        return False
    if filters.difficulty and result.metadata.get("difficulty") not in filters.difficulty:
        return False
    if filters.type and result.metadata.get("type") not in filters.type:
        return False
    return not (filters.author and result.metadata.get("author") not in filters.author)


def apply_filters(results: Iterable[SearchResult], filters: SearchFilters | None) -> list[SearchResult]:
    """Return the results that satisfy ``filters``, preserving order."""
    if filters is None:
        return list(results)
    return [result for result in results if matches_filters(result, filters)]
