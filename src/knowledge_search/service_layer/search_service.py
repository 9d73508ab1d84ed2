"""Search service orchestration layer.

Wraps a caller-owned ``ContentSearchEngine`` with the concerns the engine
deliberately leaves out: mutual exclusion for multi-threaded callers,
metrics, tracing, logging and a recent-query history for the portal's
search box.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Generator, Iterable, Mapping
from contextlib import contextmanager
import logging
import threading
from typing import Any

from knowledge_search.content_search_engine import ContentSearchEngine
from knowledge_search.domain.search import (
    IndexedDocument,
    IndexSnapshot,
    IndexStats,
    SearchOptions,
    SearchResult,
    Suggestion,
)
from knowledge_search.observability.metrics import INDEX_DOC_COUNT, OPERATION_LATENCY, REQUEST_COUNT, track_latency
from knowledge_search.observability.tracing import create_span


logger = logging.getLogger(__name__)


class SearchService:
    """High-level search service shared across request handlers.

    Every engine call runs under a single re-entrant lock, so add/remove can
    never interleave with a search. Several services may wrap separate
    engines (one per tenant) in the same process.
    """

    def __init__(self, engine: ContentSearchEngine):
        """Initialize search service with the engine it owns.

        Args:
            engine: Explicitly constructed engine; the service never creates
                a global one.
        """
        self.engine = engine
        self._lock = threading.RLock()
        self._history: deque[str] = deque(maxlen=engine.settings.history_size)

    def index(self, documents: Iterable[IndexedDocument | Mapping[str, Any]]) -> int:
        """Add or replace documents; returns the number indexed."""
        with self._lock, _track_operation("index"):
            count = self.engine.add_many(documents)
            self._refresh_gauge()
        logger.info("Indexed %d documents", count)
        return count

    def update(self, document: IndexedDocument | Mapping[str, Any]) -> None:
        with self._lock, _track_operation("update"):
            self.engine.update_content(document)
            self._refresh_gauge()

    def remove(self, content_id: str) -> bool:
        with self._lock, _track_operation("remove"):
            removed = self.engine.remove_content(content_id)
            self._refresh_gauge()
        if not removed:
            logger.debug("Remove ignored for unknown content %s", content_id)
        return removed

    def search(self, options: SearchOptions | Mapping[str, Any]) -> list[SearchResult]:
        """Run a search and remember the query in the recent history."""
        options = options if isinstance(options, SearchOptions) else SearchOptions.model_validate(options)
        attributes = {
            "search.fuzzy": options.fuzzy,
            "search.exact_match": options.exact_match,
            "search.sort_by": options.sort_by,
        }
        with create_span("knowledge_search.search", attributes=attributes) as span, self._lock:
            with _track_operation("search"):
                results = self.engine.search(options)
            self._remember(options.query)
            span.set_attribute("search.result_count", len(results))

        logger.debug("Search completed: %d results", len(results))
        return results

    def suggest(self, query: str, limit: int | None = None) -> list[Suggestion]:
        with self._lock, _track_operation("suggest"):
            return self.engine.suggest(query, limit)

    def stats(self) -> IndexStats:
        with self._lock:
            return self.engine.get_index_stats()

    def clear(self) -> None:
        with self._lock, _track_operation("clear"):
            self.engine.clear_index()
            self._refresh_gauge()

    def export_snapshot(self) -> dict[str, Any]:
        """Export the index in its camelCase wire shape."""
        with self._lock, _track_operation("export"):
            return self.engine.export_index().model_dump(by_alias=True)

    def import_snapshot(self, data: IndexSnapshot | Mapping[str, Any]) -> None:
        with self._lock, _track_operation("import"):
            self.engine.import_index(data)
            self._refresh_gauge()

    def recent_queries(self) -> list[str]:
        """Return recent non-blank queries, most recent first."""
        with self._lock:
            return list(self._history)

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def _remember(self, query: str) -> None:
        query = query.strip()
        if not query or self._history.maxlen == 0:
            return
        if query in self._history:
            self._history.remove(query)
        self._history.appendleft(query)

    def _refresh_gauge(self) -> None:
        INDEX_DOC_COUNT.set(len(self.engine))


@contextmanager
def _track_operation(operation: str) -> Generator[None, None, None]:
    """Count an operation as ok/error and record its latency."""
    status = "ok"
    try:
        with track_latency(OPERATION_LATENCY, operation=operation):
            yield
    except Exception:
        status = "error"
        raise
    finally:
        REQUEST_COUNT.labels(operation=operation, status=status).inc()
