"""
Tests for the tool search service.

Tests:
- Free-text search (ranking, limits, thresholds)
- Neural toggle falling back to TF-IDF
- Category filter, category list, statistics
- Lazy catalog loading, degraded empty catalog, reset
- Module-level default service functions
"""

import json

import pytest

from conftest import warnings_in
from tool_search import service as service_module
from tool_search.catalog.models import SearchOptions, ToolEmbedding, ToolSearchResult
from tool_search.service import ToolSearchService


class TestSearchTools:
    """Test suite for free-text search."""

    def test_list_posts_ranks_posts_tool_first(self, search_service):
        results = search_service.search_tools("list posts")
        assert results
        assert isinstance(results[0], ToolSearchResult)
        assert results[0].name == "wpnav_list_posts"

    def test_result_carries_catalog_fields(self, search_service):
        top = search_service.search_tools("activate plugin")[0]
        assert top.name == "wpnav_activate_plugin"
        assert top.description == "Activate an installed plugin"
        assert top.category == "plugins"
        assert 0 < top.score <= 1.0

    def test_results_sorted_by_score(self, search_service):
        results = search_service.search_tools("installed plugins pages")
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_limit(self, search_service):
        assert len(search_service.search_tools("list posts pages plugins users", limit=2)) == 2
        assert search_service.search_tools("list posts", limit=0) == []

    def test_min_score_filters(self, search_service):
        assert search_service.search_tools("list posts", min_score=0.99) == []
        everything = search_service.search_tools("list posts", min_score=0.0)
        default = search_service.search_tools("list posts")
        assert len(everything) >= len(default)
        assert all(r.score >= 0.1 for r in default)

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_empty_query(self, search_service, query):
        assert search_service.search_tools(query) == []

    def test_unknown_terms(self, search_service):
        assert search_service.search_tools("xyzzy frobnicate") == []

    def test_search_with_options(self, search_service):
        results = search_service.search("list posts", SearchOptions(limit=1, min_score=0.0))
        assert [r.name for r in results] == ["wpnav_list_posts"]

    def test_empty_catalog(self):
        service = ToolSearchService(tools=[])
        assert service.search_tools("list posts") == []


class TestEmbeddingToggle:
    """Neural search requested: always resolves to TF-IDF scoring."""

    def test_without_vectors_falls_back_to_tfidf(self, search_service, log_records):
        expected = search_service.search_tools("list posts")
        assert search_service.search_tools("list posts", use_embeddings=True) == expected

    def test_missing_vectors_warned_once(self, search_service, log_records):
        search_service.search_tools("list posts", use_embeddings=True)
        search_service.search_tools("create draft", use_embeddings=True)
        assert len(warnings_in(log_records)) == 1

    def test_with_vectors_still_scores_tfidf(self, sample_tools, log_records):
        for i, tool in enumerate(sample_tools):
            tool.vector = [float(i), 1.0]
        service = ToolSearchService(tools=sample_tools)

        expected = service.search_tools("list posts")
        assert service.search_tools("list posts", use_embeddings=True) == expected
        assert warnings_in(log_records) == []


class TestCategoriesAndStats:
    """Test suite for category filter, category list and statistics."""

    def test_search_by_category_case_insensitive(self, search_service):
        results = search_service.search_by_category("PLUGINS")
        assert [r.name for r in results] == ["wpnav_list_plugins", "wpnav_activate_plugin"]
        assert all(r.score == 1.0 for r in results)

    def test_search_by_unknown_category(self, search_service):
        assert search_service.search_by_category("nope") == []

    def test_get_categories_sorted(self, search_service):
        assert search_service.get_categories() == ["content", "plugins", "users"]

    def test_get_stats(self, search_service):
        assert search_service.get_stats() == {
            "total": 6,
            "by_category": {"content": 3, "plugins": 2, "users": 1},
        }


class TestCatalogLifecycle:
    """Test suite for lazy loading, degraded catalogs and reset."""

    def test_lazy_load_from_file(self, catalog_file):
        service = ToolSearchService(catalog_path=catalog_file)
        assert service.index is None
        assert service.is_vectors_loaded() is False

        results = service.search_tools("list posts")

        assert results[0].name == "wpnav_list_posts"
        assert service.index is not None
        assert service.index.document_count == 6
        assert service.is_vectors_loaded() is True

    def test_catalog_read_once(self, catalog_file, monkeypatch):
        calls = []
        real_load = service_module.load_catalog

        def counting_load(path):
            calls.append(path)
            return real_load(path)

        monkeypatch.setattr(service_module, "load_catalog", counting_load)
        service = ToolSearchService(catalog_path=catalog_file)

        service.search_tools("list posts")
        service.search_by_category("content")
        service.get_stats()

        assert len(calls) == 1

    def test_missing_catalog_degrades_to_empty(self, tmp_path, log_records):
        service = ToolSearchService(catalog_path=tmp_path / "missing.json")

        assert service.search_tools("list posts") == []
        assert service.get_categories() == []
        assert service.get_stats() == {"total": 0, "by_category": {}}
        assert service.is_vectors_loaded() is False
        # Empty catalog is cached: one warning only
        assert len(warnings_in(log_records)) == 1

    def test_reset_reloads_catalog(self, catalog_file):
        service = ToolSearchService(catalog_path=catalog_file)
        assert service.get_stats()["total"] == 6

        catalog_file.write_text(
            json.dumps(
                {
                    "generated": "2026-01-02",
                    "model": "tfidf",
                    "tools": [
                        {"name": "wpnav_list_themes", "description": "List themes", "category": "themes"}
                    ],
                }
            ),
            encoding="utf-8",
        )
        # Cached until reset
        assert service.get_stats()["total"] == 6

        service.reset()
        assert service.index is None
        assert service.get_categories() == ["themes"]

    def test_load_returns_catalog_despite_concurrent_reset(self, catalog_file):
        service = ToolSearchService(catalog_path=catalog_file)
        real_lock = service._lock

        class ResetOnReleaseLock:
            """Lock that runs one reset() right after the first release."""

            fired = False

            def __enter__(self):
                real_lock.acquire()
                return self

            def __exit__(self, *exc):
                real_lock.release()
                if not ResetOnReleaseLock.fired:
                    ResetOnReleaseLock.fired = True
                    service.reset()

        service._lock = ResetOnReleaseLock()

        tools = service.load_tool_vectors()

        assert isinstance(tools, list)
        assert len(tools) == 6
        assert service.index is None

    def test_set_tools_replaces_index(self, search_service):
        old_index = search_service.index
        search_service.set_tools(
            [ToolEmbedding(name="wpnav_list_themes", description="List installed themes", category="themes")]
        )
        assert search_service.index is not old_index
        assert search_service.get_stats()["total"] == 1
        assert search_service.search_tools("list posts") == []


class TestDefaultService:
    """Module-level functions backed by the process-wide service."""

    def test_module_functions_use_default_service(self, default_search_service):
        assert service_module.search_tools("list posts")[0].name == "wpnav_list_posts"
        assert service_module.search_tools("list posts", limit=1, min_score=0.0)[0].name == (
            "wpnav_list_posts"
        )
        assert len(service_module.search_by_category("content")) == 3
        assert service_module.get_categories() == ["content", "plugins", "users"]
        assert service_module.get_stats()["total"] == 6
        assert service_module.is_vectors_loaded() is True
        assert len(service_module.load_tool_vectors()) == 6

    def test_reset_default_service(self, default_search_service):
        service_module.reset_search_service()
        assert default_search_service.index is None

    def test_get_search_service_creates_singleton(self):
        service_module.set_search_service(None)
        try:
            first = service_module.get_search_service()
            assert service_module.get_search_service() is first
        finally:
            service_module.set_search_service(None)
