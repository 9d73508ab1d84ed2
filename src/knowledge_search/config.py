"""Centralized configuration for knowledge-search using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    Every field can be overridden with a ``KNOWLEDGE_SEARCH_`` prefixed
    variable (``KNOWLEDGE_SEARCH_DEFAULT_LIMIT=50``) or an entry in ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="KNOWLEDGE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Query settings
    default_limit: int = Field(default=20, ge=1, description="Page size when a search omits its limit")
    fuzzy_distance_ratio: float = Field(
        default=0.3,
        gt=0.0,
        le=1.0,
        description="Edit budget per query token as a fraction of its length (minimum one edit)",
    )

    # Highlight settings
    highlight_window: int = Field(
        default=20, ge=0, description="Characters kept on each side of a title/description match"
    )
    max_content_highlights: int = Field(default=3, ge=0, description="Body sentences collected per result")

    # Resource limits
    max_document_chars: int = Field(
        default=1_000_000, ge=1, description="Maximum combined text length of a single indexed document"
    )
    max_token_length: int = Field(default=1_000, ge=1, description="Maximum length of a single indexed token")

    # Service layer
    history_size: int = Field(default=10, ge=0, description="Recent queries remembered by the search service")
    suggestion_limit: int = Field(default=5, ge=1, description="Maximum suggestions returned per lookup")
    suggestion_min_query_length: int = Field(
        default=2, ge=1, description="Queries shorter than this return no suggestions"
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
