"""Sorting and pagination of search results."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
import logging
import math
from typing import Any
import unicodedata

from knowledge_search.domain.search import SearchResult
from knowledge_search.search.filters import document_date


logger = logging.getLogger(__name__)

_EPOCH_FLOOR = datetime.min.replace(tzinfo=timezone.utc)


def _relevance_key(result: SearchResult) -> Any:
    return result.score


def _date_key(result: SearchResult) -> Any:
    return document_date(result.metadata) or _EPOCH_FLOOR


def _title_key(result: SearchResult) -> Any:
    return (unicodedata.normalize("NFKC", result.title).casefold(), result.title)


def _popularity_key(result: SearchResult) -> Any:
    views = result.metadata.get("views") or 0
    try:
        views = float(views)
    except (TypeError, ValueError):
        return 0.0
    return views if math.isfinite(views) else 0.0


_SORT_KEYS: dict[str, Callable[[SearchResult], Any]] = {
    "relevance": _relevance_key,
    "date": _date_key,
    "title": _title_key,
    "popularity": _popularity_key,
}


def sort_results(
    results: Sequence[SearchResult], sort_by: str = "relevance", sort_order: str = "desc"
) -> list[SearchResult]:
    """Sort results by the requested key; ties keep their incoming order.

    Unknown sort keys fall back to relevance. Documents without a usable
    date sort as the oldest.
    """
    key = _SORT_KEYS.get(sort_by)
    if key is None:
        logger.debug("Unknown sort key %r, falling back to relevance", sort_by)
        key = _relevance_key
    return sorted(results, key=key, reverse=sort_order != "asc")


def paginate(results: Sequence[SearchResult], limit: int, offset: int = 0) -> list[SearchResult]:
    offset = max(offset, 0)
    return list(results[offset : offset + max(limit, 0)])
