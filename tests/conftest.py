"""Shared test fixtures and configuration."""

import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Strip any KNOWLEDGE_SEARCH_* overrides from the developer's shell
for key in [name for name in os.environ if name.startswith("KNOWLEDGE_SEARCH_")]:
    del os.environ[key]

from knowledge_search.config import Settings
from knowledge_search.content_search_engine import ContentSearchEngine
from knowledge_search.domain.search import IndexedDocument
from tests.fixtures.sample_content import SAMPLE_DOCUMENTS


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def sample_documents() -> list[IndexedDocument]:
    return [IndexedDocument.model_validate(data) for data in SAMPLE_DOCUMENTS]


@pytest.fixture
def engine(settings) -> ContentSearchEngine:
    return ContentSearchEngine(settings)


@pytest.fixture
def populated_engine(engine, sample_documents) -> ContentSearchEngine:
    engine.add_many(sample_documents)
    return engine
