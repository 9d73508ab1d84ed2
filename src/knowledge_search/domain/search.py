"""Domain models for content search.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``), so exported snapshots keep the shape the
portal front end already stores.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


SortBy = Literal["relevance", "date", "title", "popularity"]
SortOrder = Literal["asc", "desc"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class IndexedDocument(_CamelModel):
    """A caller-supplied document owned by the index store.

    ``id`` identifies the index entry; ``content_id`` points at the logical
    content item and may differ from it.
    """

    id: str
    content_id: str
    title: str = ""
    description: str = ""
    content: str = ""
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class DateRange(_CamelModel):
    """Inclusive ISO-8601 date bounds."""

    start: str
    end: str


class SearchFilters(_CamelModel):
    """Structured constraints, OR'd within a field and AND'd across fields."""

    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    date_range: DateRange | None = None
    difficulty: list[str] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)
    author: list[str] = Field(default_factory=list)


class SearchOptions(_CamelModel):
    """Per-call search request."""

    query: str = ""
    filters: SearchFilters = Field(default_factory=SearchFilters)
    sort_by: SortBy = "relevance"
    sort_order: SortOrder = "desc"
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)
    fuzzy: bool = False
    exact_match: bool = False


class SearchResult(_CamelModel):
    """Value object for a single search hit.

    Built fresh for every search call and never mutated afterwards; pipeline
    stages derive new instances with ``model_copy``.
    """

    content_id: str
    title: str
    description: str
    content: str
    score: float = 0.0
    highlights: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: IndexedDocument) -> "SearchResult":
        """Create an unscored, unhighlighted result stub for a document."""
        return cls(
            content_id=document.content_id,
            title=document.title,
            description=document.description,
            content=document.content,
            metadata=dict(document.metadata),
            tags=list(document.tags),
            categories=list(document.categories),
        )


class IndexStats(_CamelModel):
    total_content: int
    total_tokens: int
    average_tokens_per_content: float


class IndexSnapshot(_CamelModel):
    """Full engine state for hand-off to an external store."""

    index: list[IndexedDocument] = Field(default_factory=list)
    inverted_index: dict[str, list[str]] = Field(default_factory=dict)


class Suggestion(_CamelModel):
    """Type-ahead suggestion derived from an indexed document."""

    id: str
    content_id: str
    title: str
    description: str
    type: Literal["content"] = "content"
    category: str | None = None
    difficulty: str | None = None
    score: int = 0
