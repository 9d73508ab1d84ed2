"""Fuzzy matching for typo-tolerant search.

Edit distance calculation and fuzzy term lookup against the indexed
vocabulary. The edit budget grows with the query term: one edit for short
terms, ``floor(len * ratio)`` for longer ones.
"""

from __future__ import annotations

from collections.abc import Iterable
import math


DEFAULT_DISTANCE_RATIO = 0.3


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Uses dynamic programming for O(m*n) time complexity, with optional
    early termination when distance exceeds max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 early when
            distance is guaranteed to exceed this threshold.

    Returns:
        The minimum number of single-character edits (insertions,
        deletions, substitutions) needed to change s1 into s2.
        If max_distance is set and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("react", "reakt")
        1
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = curr_row[0]
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def get_max_edit_distance(term_length: int, ratio: float = DEFAULT_DISTANCE_RATIO) -> int:
    """Get the maximum allowed edit distance for a term based on its length.

    Always at least one edit, so even single-character CJK terms get some
    tolerance.

    Examples:
        >>> get_max_edit_distance(5)
        1
        >>> get_max_edit_distance(10)
        3
    """
    return max(1, math.floor(term_length * ratio))


def find_fuzzy_matches(
    query_term: str,
    vocabulary: Iterable[str],
    max_distance: int | None = None,
) -> list[tuple[str, int]]:
    """Find terms in vocabulary that fuzzy-match the query term.

    Scans the whole vocabulary, so cost is O(vocabulary * len(term)^2).
    Fine for portal-sized indexes; callers needing bounded latency must
    apply their own timeout.

    Args:
        query_term: The term to match (may contain typo).
        vocabulary: Indexed terms to match against (already lowercased).
        max_distance: Maximum edit distance allowed. If None, uses
            ``get_max_edit_distance``.

    Returns:
        List of (matching_term, edit_distance) tuples, sorted by
        edit distance (closest matches first), then alphabetically.
    """
    if not query_term:
        return []

    if max_distance is None:
        max_distance = get_max_edit_distance(len(query_term))

    matches: list[tuple[str, int]] = []
    for term in vocabulary:
        if abs(len(query_term) - len(term)) > max_distance:
            continue

        distance = levenshtein_distance(query_term, term, max_distance)
        if distance <= max_distance:
            matches.append((term, distance))

    matches.sort(key=lambda x: (x[1], x[0]))
    return matches
