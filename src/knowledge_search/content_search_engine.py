"""Content Search Engine - deep module for in-memory portal search.

Owns the index store (document id -> IndexedDocument) and the inverted
index, and runs the search pipeline behind a small interface:

    match -> filter -> score -> sort -> paginate -> highlight

Every mutation updates the inverted index synchronously; there is no
background or batched reindexing. The engine holds no locks and performs no
I/O, so one instance must be driven by a single caller at a time (wrap it in
``SearchService`` for shared use). Separate instances share nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging
from typing import Any

from pydantic import ValidationError

from knowledge_search.config import Settings
from knowledge_search.domain.search import (
    IndexedDocument,
    IndexSnapshot,
    IndexStats,
    SearchFilters,
    SearchOptions,
    SearchResult,
    Suggestion,
)
from knowledge_search.errors import InvalidIndexSnapshotError, ResourceLimitError
from knowledge_search.search.analyzers import PortalAnalyzer
from knowledge_search.search.filters import apply_filters
from knowledge_search.search.inverted_index import InvertedIndex, document_terms
from knowledge_search.search.matcher import TokenMatcher
from knowledge_search.search.ordering import paginate, sort_results
from knowledge_search.search.scoring import calculate_scores
from knowledge_search.search.snippet import generate_highlights
from knowledge_search.search.suggestions import build_suggestions


logger = logging.getLogger(__name__)


class ContentSearchEngine:
    """In-memory inverted-index search over portal content.

    Interface Methods:
    - add_content / update_content / remove_content: maintain the index
    - search(options) -> list[SearchResult]
    - suggest(query) -> list[Suggestion]
    - get_index_stats / clear_index / export_index / import_index
    """

    def __init__(self, settings: Settings | None = None, *, analyzer: PortalAnalyzer | None = None) -> None:
        self.settings = settings or Settings()
        self._analyzer = analyzer or PortalAnalyzer()
        self._documents: dict[str, IndexedDocument] = {}
        self._index = InvertedIndex()
        self._matcher = TokenMatcher(self._index, distance_ratio=self.settings.fuzzy_distance_ratio)

    # ------------------------------------------------------------------
    # Index store
    # ------------------------------------------------------------------

    def add_content(self, document: IndexedDocument | Mapping[str, Any]) -> None:
        """Insert a document, fully replacing any entry with the same id.

        Raises:
            ResourceLimitError: the document is larger than ``max_document_chars``
                or yields a term longer than ``max_token_length``. The index is
                left unchanged.
        """
        document = _coerce_document(document)
        terms = document_terms(document, self._analyzer)
        self._check_limits(document, terms)

        replaced = document.id in self._documents
        if replaced:
            self._index.remove(document.id)
        self._documents[document.id] = document
        self._index.add(document.id, terms)
        logger.debug("%s content %s (%d terms)", "Replaced" if replaced else "Indexed", document.id, len(terms))

    def add_many(self, documents: Iterable[IndexedDocument | Mapping[str, Any]]) -> int:
        """Add documents in order; returns how many were added."""
        count = 0
        for document in documents:
            self.add_content(document)
            count += 1
        return count

    def update_content(self, document: IndexedDocument | Mapping[str, Any]) -> None:
        """Remove the existing entry for ``document.id`` (if any) and add the new one."""
        document = _coerce_document(document)
        terms = document_terms(document, self._analyzer)
        self._check_limits(document, terms)
        self.remove_content(document.id)
        self.add_content(document)

    def remove_content(self, content_id: str) -> bool:
        """Delete a document and its postings; unknown ids are a no-op."""
        if self._documents.pop(content_id, None) is None:
            return False
        dropped = self._index.remove(content_id)
        logger.debug("Removed content %s (%d terms dropped)", content_id, dropped)
        return True

    def get_content(self, content_id: str) -> IndexedDocument | None:
        return self._documents.get(content_id)

    def get_index_stats(self) -> IndexStats:
        total_content = len(self._documents)
        total_tokens = len(self._index)
        return IndexStats(
            total_content=total_content,
            total_tokens=total_tokens,
            average_tokens_per_content=total_tokens / total_content if total_content else 0.0,
        )

    def clear_index(self) -> None:
        self._documents.clear()
        self._index.clear()
        logger.info("Search index cleared")

    def export_index(self) -> IndexSnapshot:
        """Snapshot documents and postings; use ``model_dump(by_alias=True)`` for the wire shape."""
        return IndexSnapshot(
            index=[document.model_copy(deep=True) for document in self._documents.values()],
            inverted_index=self._index.to_dict(),
        )

    def import_index(self, data: IndexSnapshot | Mapping[str, Any]) -> None:
        """Replace all state with a previously exported snapshot.

        The snapshot is validated in full before anything is cleared, so a
        rejected snapshot leaves the current index intact.

        Raises:
            InvalidIndexSnapshotError: wrong shape, duplicate document ids, or
                postings that reference unknown documents.
            ResourceLimitError: a document breaks the same limits ``add_content``
                enforces.
        """
        snapshot = _validate_snapshot(data)
        documents = {document.id: document.model_copy(deep=True) for document in snapshot.index}
        for document in documents.values():
            self._check_limits(document, document_terms(document, self._analyzer))

        self.clear_index()
        self._documents.update(documents)
        self._index.load(snapshot.inverted_index)
        logger.info("Imported index snapshot: %d documents, %d terms", len(self._documents), len(self._index))

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, options: SearchOptions | Mapping[str, Any] | None = None) -> list[SearchResult]:
        """Run a search and return one page of results.

        An empty or whitespace-only query switches to browse mode: every
        document is listed (filtered, sorted, paginated) with score 0 and no
        highlights. A query that analyzes to no tokens (only stop words or
        punctuation) returns an empty list.
        """
        options = _coerce_options(options)
        limit = options.limit if options.limit is not None else self.settings.default_limit

        if not options.query.strip():
            return self._browse(options.filters, options.sort_by, options.sort_order, limit, options.offset)

        tokens = self._analyzer.terms(options.query)
        candidates = self._matcher.match(tokens, fuzzy=options.fuzzy, exact_match=options.exact_match)
        results = [
            SearchResult.from_document(document)
            for doc_id, document in self._documents.items()
            if doc_id in candidates
        ]
        results = apply_filters(results, options.filters)
        results = calculate_scores(results, tokens)
        results = sort_results(results, options.sort_by, options.sort_order)
        results = paginate(results, limit, options.offset)
        results = generate_highlights(
            results,
            options.query,
            analyzer=self._analyzer,
            window=self.settings.highlight_window,
            max_sentences=self.settings.max_content_highlights,
        )
        logger.debug(
            "Search %r: %d tokens, %d candidates, %d returned", options.query, len(tokens), len(candidates), len(results)
        )
        return results

    def suggest(self, query: str, limit: int | None = None) -> list[Suggestion]:
        return build_suggestions(
            self._documents.values(),
            query,
            limit=limit if limit is not None else self.settings.suggestion_limit,
            min_query_length=self.settings.suggestion_min_query_length,
        )

    def _browse(
        self, filters: SearchFilters, sort_by: str, sort_order: str, limit: int, offset: int
    ) -> list[SearchResult]:
        results = [SearchResult.from_document(document) for document in self._documents.values()]
        results = apply_filters(results, filters)
        results = sort_results(results, sort_by, sort_order)
        return paginate(results, limit, offset)

    def _check_limits(self, document: IndexedDocument, terms: list[str]) -> None:
        size = (
            len(document.title)
            + len(document.description)
            + len(document.content)
            + sum(len(tag) for tag in document.tags)
            + sum(len(category) for category in document.categories)
        )
        if size > self.settings.max_document_chars:
            logger.warning("Rejected content %s: %d characters exceeds limit", document.id, size)
            raise ResourceLimitError(
                f"Document {document.id!r} has {size} characters; limit is {self.settings.max_document_chars}",
                limit="max_document_chars",
                actual=size,
                allowed=self.settings.max_document_chars,
            )
        longest = max((len(term) for term in terms), default=0)
        if longest > self.settings.max_token_length:
            logger.warning("Rejected content %s: %d-character token exceeds limit", document.id, longest)
            raise ResourceLimitError(
                f"Document {document.id!r} has a {longest}-character token; limit is {self.settings.max_token_length}",
                limit="max_token_length",
                actual=longest,
                allowed=self.settings.max_token_length,
            )

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, content_id: object) -> bool:
        return content_id in self._documents


def _coerce_document(document: IndexedDocument | Mapping[str, Any]) -> IndexedDocument:
    if isinstance(document, IndexedDocument):
        return document.model_copy(deep=True)
    return IndexedDocument.model_validate(document)


def _coerce_options(options: SearchOptions | Mapping[str, Any] | None) -> SearchOptions:
    if options is None:
        return SearchOptions()
    if isinstance(options, SearchOptions):
        return options
    return SearchOptions.model_validate(options)


def _validate_snapshot(data: IndexSnapshot | Mapping[str, Any]) -> IndexSnapshot:
    if isinstance(data, IndexSnapshot):
        snapshot = data
    else:
        try:
            snapshot = IndexSnapshot.model_validate(data)
        except ValidationError as exc:
            raise InvalidIndexSnapshotError(f"Invalid index snapshot: {exc.error_count()} validation errors") from exc

    seen: set[str] = set()
    for document in snapshot.index:
        if document.id in seen:
            raise InvalidIndexSnapshotError(f"Invalid index snapshot: duplicate document id {document.id!r}")
        seen.add(document.id)

    for term, ids in snapshot.inverted_index.items():
        unknown = sorted(set(ids) - seen)
        if unknown:
            raise InvalidIndexSnapshotError(
                f"Invalid index snapshot: term {term!r} references unknown documents {unknown}"
            )
    return snapshot
