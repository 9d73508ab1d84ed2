"""Exceptions raised by the search engine."""


class KnowledgeSearchError(Exception):
    """Base class for search engine errors."""


class InvalidIndexSnapshotError(KnowledgeSearchError, ValueError):
    """Raised when an exported index snapshot cannot be restored."""


class ResourceLimitError(KnowledgeSearchError):
    """Raised when a document exceeds the configured indexing limits."""

    def __init__(self, message: str, *, limit: str, actual: int, allowed: int) -> None:
        super().__init__(message)
        self.limit = limit
        self.actual = actual
        self.allowed = allowed
