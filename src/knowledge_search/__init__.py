"""In-memory content search for the knowledge portal."""

from knowledge_search.config import Settings
from knowledge_search.content_search_engine import ContentSearchEngine
from knowledge_search.domain.search import (
    DateRange,
    IndexedDocument,
    IndexSnapshot,
    IndexStats,
    SearchFilters,
    SearchOptions,
    SearchResult,
    Suggestion,
)
from knowledge_search.errors import InvalidIndexSnapshotError, KnowledgeSearchError, ResourceLimitError
from knowledge_search.service_layer.search_service import SearchService


__all__ = [
    "ContentSearchEngine",
    "DateRange",
    "IndexSnapshot",
    "IndexStats",
    "IndexedDocument",
    "InvalidIndexSnapshotError",
    "KnowledgeSearchError",
    "ResourceLimitError",
    "SearchFilters",
    "SearchOptions",
    "SearchResult",
    "SearchService",
    "Settings",
    "Suggestion",
]
