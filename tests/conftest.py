"""Pytest fixtures and test utilities for the tool search test suite."""

import asyncio
import json
from pathlib import Path

import pytest
from loguru import logger

from tool_search.catalog.models import ToolEmbedding
from tool_search.embeddings.pipeline import EmbeddingPipeline, set_pipeline
from tool_search.service import ToolSearchService, set_search_service


# ============================================================================
# CATALOG FIXTURES
# ============================================================================


@pytest.fixture
def sample_tools() -> list[ToolEmbedding]:
    """Create a small catalog spanning three categories."""
    return [
        ToolEmbedding(
            name="wpnav_list_posts",
            description="List WordPress posts with filtering and pagination",
            category="content",
            keywords=["posts", "list", "pagination"],
        ),
        ToolEmbedding(
            name="wpnav_create_post",
            description="Create a new WordPress post or draft",
            category="content",
            keywords=["post", "create", "draft"],
        ),
        ToolEmbedding(
            name="wpnav_list_pages",
            description="List WordPress pages with filtering",
            category="content",
            keywords=["pages", "list"],
        ),
        ToolEmbedding(
            name="wpnav_list_plugins",
            description="List installed WordPress plugins",
            category="plugins",
            keywords=["plugins", "install"],
        ),
        ToolEmbedding(
            name="wpnav_activate_plugin",
            description="Activate an installed plugin",
            category="plugins",
            keywords=["plugin", "activate"],
        ),
        ToolEmbedding(
            name="wpnav_list_users",
            description="List site users filtered by role",
            category="users",
            keywords=["users", "roles"],
        ),
    ]


@pytest.fixture
def catalog_file(tmp_path: Path, sample_tools) -> Path:
    """
    Write sample_tools as a JSON catalog document.

    Returns:
        Path to the catalog file
    """
    path = tmp_path / "tool-vectors.json"
    document = {
        "generated": "2026-01-01T00:00:00+00:00",
        "model": "tfidf",
        "tools": [tool.to_dict() for tool in sample_tools],
    }
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def search_service(sample_tools) -> ToolSearchService:
    """Search service preloaded with sample_tools."""
    return ToolSearchService(tools=sample_tools)


@pytest.fixture
def default_search_service(search_service):
    """
    Install search_service as the process-wide default.

    Cleanup:
        Restores lazy creation of the default service
    """
    set_search_service(search_service)
    yield search_service
    set_search_service(None)


# ============================================================================
# EMBEDDING PROVIDER FAKES
# ============================================================================


class FakeHandle:
    """Embedding handle producing deterministic two-dimensional vectors."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.encode_calls = 0

    def encode(self, texts: list[str]) -> list[list[float]]:
        self.encode_calls += 1
        if self.fail:
            raise RuntimeError("encoder crashed")
        return [[float(len(text)), 1.0] for text in texts]


class CountingProvider:
    """
    Embedding provider that records how often it is checked and loaded.

    Args:
        is_available: Value returned by available()
        error: Exception raised from load(), if any
        delay: Seconds load() takes, so concurrent callers overlap
        handle: Handle returned on success
    """

    def __init__(self, is_available=True, error=None, delay=0.01, handle=None):
        self.is_available = is_available
        self.error = error
        self.delay = delay
        self.handle = handle or FakeHandle()
        self.available_calls = 0
        self.load_calls = 0

    def available(self) -> bool:
        self.available_calls += 1
        return self.is_available

    async def load(self):
        self.load_calls += 1
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.handle


@pytest.fixture
def provider() -> CountingProvider:
    return CountingProvider()


@pytest.fixture
def pipeline(provider) -> EmbeddingPipeline:
    return EmbeddingPipeline(provider=provider)


@pytest.fixture
def default_pipeline(pipeline):
    """
    Install pipeline as the process-wide default.

    Cleanup:
        Restores lazy creation of the default pipeline
    """
    set_pipeline(pipeline)
    yield pipeline
    set_pipeline(None)


# ============================================================================
# LOG CAPTURE
# ============================================================================


@pytest.fixture
def log_records():
    """
    Capture loguru records emitted during a test.

    Yields:
        List of loguru record dicts (level, message, ...)
    """
    records: list[dict] = []
    handler_id = logger.add(lambda msg: records.append(msg.record), format="{message}")
    try:
        yield records
    finally:
        logger.remove(handler_id)


def warnings_in(records: list[dict]) -> list[str]:
    """Messages of WARNING records."""
    return [r["message"] for r in records if r["level"].name == "WARNING"]
