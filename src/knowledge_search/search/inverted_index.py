"""Token to document-id postings kept entirely in memory.

The index also remembers which terms each document contributed, so removal
strips exactly what was added even when the analyzer or the snapshot the
index was restored from disagrees with the stored text.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from knowledge_search.domain.search import IndexedDocument
from knowledge_search.search.analyzers import PortalAnalyzer


def document_terms(document: IndexedDocument, analyzer: PortalAnalyzer) -> list[str]:
    """Return the index terms for a document in field order.

    Free-text fields go through the analyzer; tags and categories are indexed
    whole, lowercased, so ``Next.js`` stays a single term.
    """
    terms = [
        *analyzer.terms(document.title),
        *analyzer.terms(document.description),
        *analyzer.terms(document.content),
    ]
    terms.extend(tag.lower() for tag in document.tags)
    terms.extend(category.lower() for category in document.categories)
    return terms


class InvertedIndex:
    """Mapping from normalized term to the ids of documents containing it.

    A term whose id set becomes empty is dropped immediately.
    """

    def __init__(self) -> None:
        self._postings: dict[str, set[str]] = {}
        self._doc_terms: dict[str, set[str]] = {}

    def add(self, doc_id: str, terms: Iterable[str]) -> None:
        contributed = self._doc_terms.setdefault(doc_id, set())
        for term in terms:
            if not term:
                continue
            self._postings.setdefault(term, set()).add(doc_id)
            contributed.add(term)

    def remove(self, doc_id: str) -> int:
        """Strip every posting for ``doc_id``; returns the number of terms dropped entirely."""
        dropped = 0
        for term in self._doc_terms.pop(doc_id, set()):
            ids = self._postings.get(term)
            if ids is None:
                continue
            ids.discard(doc_id)
            if not ids:
                del self._postings[term]
                dropped += 1
        return dropped

    def postings(self, term: str) -> frozenset[str]:
        return frozenset(self._postings.get(term, ()))

    def terms(self) -> Iterator[str]:
        return iter(self._postings)

    def items(self) -> Iterator[tuple[str, frozenset[str]]]:
        for term, ids in self._postings.items():
            yield term, frozenset(ids)

    def terms_for(self, doc_id: str) -> frozenset[str]:
        return frozenset(self._doc_terms.get(doc_id, ()))

    def clear(self) -> None:
        self._postings.clear()
        self._doc_terms.clear()

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize postings with ids sorted for stable snapshots."""
        return {term: sorted(ids) for term, ids in self._postings.items()}

    def load(self, data: Mapping[str, Iterable[str]]) -> None:
        """Replace all postings with ``data``; terms with no ids are skipped."""
        self.clear()
        for term, ids in data.items():
            for doc_id in ids:
                self.add(doc_id, [term])

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: object) -> bool:
        return term in self._postings
