"""Candidate resolution against the inverted index.

Each query token is resolved independently and the resulting document ids
are unioned: a single token hit is enough to make a document a candidate,
ranking then separates strong matches from weak ones.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from knowledge_search.search.fuzzy import DEFAULT_DISTANCE_RATIO, find_fuzzy_matches, get_max_edit_distance
from knowledge_search.search.inverted_index import InvertedIndex


logger = logging.getLogger(__name__)


class TokenMatcher:
    """Resolve query tokens to candidate document ids."""

    def __init__(self, index: InvertedIndex, *, distance_ratio: float = DEFAULT_DISTANCE_RATIO) -> None:
        self._index = index
        self.distance_ratio = distance_ratio

    def match(self, tokens: Sequence[str], *, fuzzy: bool = False, exact_match: bool = False) -> set[str]:
        """Return ids of documents matching any token.

        ``exact_match`` wins over ``fuzzy``; with neither flag an indexed
        term matches when it contains the query token as a substring.
        """
        candidates: set[str] = set()
        for token in tokens:
            if exact_match:
                candidates |= self.exact_matches(token)
            elif fuzzy:
                candidates |= self.fuzzy_matches(token)
            else:
                candidates |= self.partial_matches(token)
        logger.debug(
            "Resolved %d candidates for %d tokens (fuzzy=%s, exact=%s)",
            len(candidates),
            len(tokens),
            fuzzy,
            exact_match,
        )
        return candidates

    def exact_matches(self, token: str) -> set[str]:
        return set(self._index.postings(token))

    def partial_matches(self, token: str) -> set[str]:
        matches: set[str] = set()
        for term, ids in self._index.items():
            if token in term:
                matches |= ids
        return matches

    def fuzzy_matches(self, token: str) -> set[str]:
        max_distance = get_max_edit_distance(len(token), self.distance_ratio)
        matches: set[str] = set()
        for term, _distance in find_fuzzy_matches(token, self._index.terms(), max_distance):
            matches |= self._index.postings(term)
        return matches
