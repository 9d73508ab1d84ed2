"""Unit tests for ContentSearchEngine."""

import pytest

from knowledge_search.config import Settings
from knowledge_search.content_search_engine import ContentSearchEngine
from knowledge_search.domain.search import IndexSnapshot, SearchOptions
from knowledge_search.errors import InvalidIndexSnapshotError, ResourceLimitError
from tests.fixtures.sample_content import make_document


pytestmark = pytest.mark.unit


def _ids(results):
    return [result.content_id for result in results]


class TestIndexStore:
    """Tests for add/update/remove and stats."""

    def test_add_replaces_without_residual_tokens(self, engine):
        engine.add_content(make_document("1", title="angular"))
        engine.add_content(make_document("1", title="svelte"))

        snapshot = engine.export_index()

        assert snapshot.inverted_index == {"svelte": ["1"]}
        assert len(engine) == 1

    def test_update_replaces_content(self, engine):
        engine.add_content(make_document("1", title="angular guide"))
        engine.update_content(make_document("1", title="svelte guide"))

        assert engine.search({"query": "angular"}) == []
        assert _ids(engine.search({"query": "svelte"})) == ["content-1"]

    def test_update_unknown_id_adds(self, engine):
        engine.update_content(make_document("9", title="new"))
        assert "9" in engine

    def test_remove_cleans_inverted_index(self, engine):
        engine.add_content(make_document("1", title="react only"))
        engine.add_content(make_document("2", title="react shared"))

        assert engine.remove_content("1") is True

        inverted = engine.export_index().inverted_index
        assert "only" not in inverted
        assert all("1" not in ids for ids in inverted.values())
        assert inverted["react"] == ["2"]

    def test_remove_unknown_is_noop(self, populated_engine):
        assert populated_engine.remove_content("missing") is False
        assert populated_engine.get_index_stats().total_content == 3

    def test_stats_track_distinct_ids(self, engine):
        engine.add_content(make_document("1", title="alpha beta"))
        engine.add_content(make_document("2", title="beta"))
        engine.add_content(make_document("1", title="gamma"))
        engine.remove_content("2")

        stats = engine.get_index_stats()

        assert stats.total_content == 1
        assert stats.total_tokens == 1
        assert stats.average_tokens_per_content == pytest.approx(1.0)

    def test_stats_on_empty_index(self, engine):
        stats = engine.get_index_stats()
        assert (stats.total_content, stats.total_tokens, stats.average_tokens_per_content) == (0, 0, 0.0)

    def test_stats_serialize_camel_case(self, engine):
        assert engine.get_index_stats().model_dump(by_alias=True) == {
            "totalContent": 0,
            "totalTokens": 0,
            "averageTokensPerContent": 0.0,
        }

    def test_add_accepts_mappings(self, engine):
        engine.add_content({"id": "1", "contentId": "c-1", "title": "React"})
        assert engine.get_content("1").content_id == "c-1"

    def test_clear_index(self, populated_engine):
        populated_engine.clear_index()
        stats = populated_engine.get_index_stats()
        assert stats.total_content == 0
        assert stats.total_tokens == 0

    def test_add_many_returns_count(self, engine, sample_documents):
        assert engine.add_many(sample_documents) == 3

    def test_stored_document_is_detached_from_caller(self, engine):
        document = make_document("1", title="Angular", tags=["Angular"], metadata={"author": "alice"})
        engine.add_content(document)

        document.tags.append("Vue")
        document.metadata["author"] = "mallory"

        assert engine.search({"filters": {"tags": ["Vue"]}}) == []
        assert engine.search({"filters": {"author": ["mallory"]}}) == []
        assert engine.get_content("1").tags == ["Angular"]
        assert engine.search({"query": "vue"}) == []


class TestResourceLimits:
    def test_oversized_document_rejected(self):
        engine = ContentSearchEngine(Settings(_env_file=None, max_document_chars=10))

        with pytest.raises(ResourceLimitError) as excinfo:
            engine.add_content(make_document("1", content="x " * 20))

        assert excinfo.value.limit == "max_document_chars"
        assert len(engine) == 0

    def test_oversized_token_rejected(self):
        engine = ContentSearchEngine(Settings(_env_file=None, max_token_length=5))

        with pytest.raises(ResourceLimitError) as excinfo:
            engine.add_content(make_document("1", title="internationalization"))

        assert excinfo.value.limit == "max_token_length"
        assert excinfo.value.actual == len("internationalization")

    def test_import_enforces_limits(self, populated_engine):
        small = ContentSearchEngine(Settings(_env_file=None, max_token_length=6))
        snapshot = populated_engine.export_index()

        with pytest.raises(ResourceLimitError) as excinfo:
            small.import_index(snapshot)

        assert excinfo.value.limit == "max_token_length"
        assert len(small) == 0

    def test_rejected_import_keeps_previous_state(self):
        engine = ContentSearchEngine(Settings(_env_file=None, max_document_chars=20))
        engine.add_content(make_document("1", title="react"))

        with pytest.raises(ResourceLimitError):
            engine.import_index({"index": [{"id": "2", "contentId": "c2", "content": "x" * 50}], "invertedIndex": {}})

        assert list(engine.export_index().inverted_index) == ["react"]
        assert "2" not in engine

    def test_failed_update_keeps_previous_entry(self):
        engine = ContentSearchEngine(Settings(_env_file=None, max_token_length=6))
        engine.add_content(make_document("1", title="react"))

        with pytest.raises(ResourceLimitError):
            engine.update_content(make_document("1", title="typescript"))

        assert engine.get_content("1").title == "react"
        assert _ids(engine.search({"query": "react"})) == ["content-1"]


class TestSearch:
    """Tests for the search pipeline."""

    def test_react_scenario(self, populated_engine):
        results = populated_engine.search({"query": "React", "sortBy": "relevance", "sortOrder": "desc"})

        assert _ids(results) == ["content-1", "content-2"]
        assert results[0].score >= results[1].score

    def test_scores_are_normalized(self, populated_engine):
        for result in populated_engine.search({"query": "React"}):
            assert 0.0 <= result.score <= 1.0

    def test_results_carry_highlights(self, populated_engine):
        (first, *_) = populated_engine.search({"query": "React"})

        assert first.highlights[0] == "React入門ガイド"
        assert any("JavaScriptライブラリ" in highlight for highlight in first.highlights)

    def test_fuzzy_vs_exact(self, engine):
        engine.add_content(make_document("1", title="react"))

        assert _ids(engine.search({"query": "reakt", "fuzzy": True})) == ["content-1"]
        assert engine.search({"query": "reakt", "exactMatch": True}) == []

    def test_partial_match_is_default(self, populated_engine):
        results = populated_engine.search({"query": "script"})
        assert set(_ids(results)) == {"content-1", "content-3"}

    def test_or_across_tokens(self, populated_engine):
        results = populated_engine.search({"query": "TypeScript Next"})
        assert set(_ids(results)) == {"content-2", "content-3"}

    def test_category_filter(self, populated_engine):
        results = populated_engine.search(
            {"query": "ガイド", "filters": {"categories": ["型システム", "存在しない"]}}
        )
        assert _ids(results) == ["content-3"]

    def test_filters_exclude_everything(self, populated_engine):
        results = populated_engine.search({"query": "React", "filters": {"author": ["nobody"]}})
        assert results == []

    def test_stopword_only_query_returns_nothing(self, populated_engine):
        assert populated_engine.search({"query": "the and の"}) == []

    def test_accepts_search_options(self, populated_engine):
        results = populated_engine.search(SearchOptions(query="TypeScript", exact_match=True))
        assert _ids(results) == ["content-3"]

    def test_default_limit_from_settings(self, sample_documents):
        engine = ContentSearchEngine(Settings(_env_file=None, default_limit=1))
        engine.add_many(sample_documents)

        assert len(engine.search({"query": "ガイド"})) == 1


class TestPagination:
    def test_limit_offset_slices_sorted_list(self, engine):
        for index in range(5):
            engine.add_content(make_document(str(index), title="react " * (index + 1)))

        full = engine.search({"query": "react", "limit": 10})
        page = engine.search({"query": "react", "limit": 2, "offset": 2})

        assert len(full) == 5
        assert _ids(page) == _ids(full[2:4])


class TestBrowseMode:
    def test_empty_query_lists_everything(self, populated_engine):
        results = populated_engine.search({"query": "", "limit": 10})

        assert len(results) == 3
        assert all(result.score == 0 for result in results)
        assert all(result.highlights == [] for result in results)

    def test_whitespace_query_browses(self, populated_engine):
        assert len(populated_engine.search({"query": "   "})) == 3

    def test_browse_applies_filters_and_sort(self, populated_engine):
        results = populated_engine.search(
            {"query": "", "filters": {"difficulty": ["beginner", "advanced"]}, "sortBy": "popularity"}
        )
        assert _ids(results) == ["content-3", "content-1"]

    def test_browse_by_date_ascending(self, populated_engine):
        results = populated_engine.search({"sortBy": "date", "sortOrder": "asc"})
        assert _ids(results) == ["content-1", "content-2", "content-3"]

    def test_browse_date_range(self, populated_engine):
        results = populated_engine.search(
            {"filters": {"dateRange": {"start": "2024-01-04T00:00:00Z", "end": "2024-01-10T00:00:00Z"}}}
        )
        assert set(_ids(results)) == {"content-2", "content-3"}

    def test_browse_by_title(self, populated_engine):
        results = populated_engine.search({"sortBy": "title", "sortOrder": "asc"})
        assert _ids(results) == ["content-2", "content-1", "content-3"]


class TestSnapshot:
    def test_export_wire_shape(self, populated_engine):
        data = populated_engine.export_index().model_dump(by_alias=True)

        assert set(data) == {"index", "invertedIndex"}
        assert data["index"][0]["contentId"] == "content-1"
        assert data["invertedIndex"]["react"] == ["1", "2"]

    def test_round_trip_into_fresh_engine(self, populated_engine, settings):
        data = populated_engine.export_index().model_dump(by_alias=True)
        restored = ContentSearchEngine(settings)

        restored.import_index(data)

        assert restored.get_index_stats() == populated_engine.get_index_stats()
        assert _ids(restored.search({"query": "React"})) == ["content-1", "content-2"]

    def test_import_replaces_existing_state(self, populated_engine):
        populated_engine.import_index(
            {"index": [{"id": "x", "contentId": "cx", "title": "solo"}], "invertedIndex": {"solo": ["x"]}}
        )

        assert len(populated_engine) == 1
        assert populated_engine.search({"query": "react"}) == []

    def test_import_accepts_snapshot_model(self, engine):
        snapshot = IndexSnapshot(index=[make_document("1", title="react")], inverted_index={"react": ["1"]})
        engine.import_index(snapshot)
        assert "1" in engine

    def test_removal_after_import_is_clean(self, populated_engine, settings):
        restored = ContentSearchEngine(settings)
        restored.import_index(populated_engine.export_index())

        restored.remove_content("3")

        assert all("3" not in ids for ids in restored.export_index().inverted_index.values())

    def test_export_is_detached_from_engine(self, populated_engine):
        snapshot = populated_engine.export_index()
        snapshot.index[0].tags.append("mutated")

        assert "mutated" not in populated_engine.get_content("1").tags

    def test_imported_snapshot_is_detached_from_caller(self, engine):
        snapshot = IndexSnapshot(
            index=[make_document("1", title="react", tags=["React"])],
            inverted_index={"react": ["1"]},
        )
        engine.import_index(snapshot)

        snapshot.index[0].tags.append("Vue")

        assert engine.get_content("1").tags == ["React"]
        assert engine.search({"filters": {"tags": ["Vue"]}}) == []

    @pytest.mark.parametrize(
        "data",
        [
            {"index": "not a list", "invertedIndex": {}},
            {"index": [{"title": "missing ids"}], "invertedIndex": {}},
            {"index": [], "invertedIndex": {"react": "1"}},
        ],
    )
    def test_malformed_snapshot_rejected(self, populated_engine, data):
        with pytest.raises(InvalidIndexSnapshotError):
            populated_engine.import_index(data)

        assert len(populated_engine) == 3

    def test_duplicate_ids_rejected(self, engine):
        document = {"id": "1", "contentId": "c1"}
        with pytest.raises(InvalidIndexSnapshotError, match="duplicate"):
            engine.import_index({"index": [document, document], "invertedIndex": {}})

    def test_unknown_posting_ids_rejected(self, populated_engine):
        with pytest.raises(InvalidIndexSnapshotError, match="unknown documents"):
            populated_engine.import_index({"index": [], "invertedIndex": {"react": ["1"]}})

        assert len(populated_engine) == 3


class TestSuggest:
    def test_suggest_uses_settings_limit(self, sample_documents):
        engine = ContentSearchEngine(Settings(_env_file=None, suggestion_limit=1))
        engine.add_many(sample_documents)

        suggestions = engine.suggest("ガイド")

        assert len(suggestions) == 1

    def test_suggest_explicit_limit(self, populated_engine):
        assert len(populated_engine.suggest("ガイド", limit=5)) == 2


def test_engines_are_isolated(settings):
    first = ContentSearchEngine(settings)
    second = ContentSearchEngine(settings)

    first.add_content(make_document("1", title="react"))

    assert len(second) == 0
