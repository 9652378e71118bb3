"""
Tool search service.

Owns the loaded catalog and its TF-IDF index and answers free-text,
category and statistics queries over it. A process-wide default
instance backs the module-level functions; tests and embedders can
construct their own or swap the default with ``set_search_service()``.
"""

import threading
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from .catalog.loader import load_catalog
from .catalog.models import SearchOptions, ToolEmbedding, ToolSearchResult
from .config import Config
from .retrieval.tfidf import Document, TFIDFIndex, build_index, score


class ToolSearchService:
    """
    Search facade over a tool catalog.

    Features:
    - Catalog read once, on first use (or injected at construction)
    - TF-IDF index built together with the catalog, never mutated
    - Missing/corrupt catalog degrades to an empty catalog
    - Optional neural path falls back to TF-IDF
    """

    def __init__(
        self,
        tools: Optional[list[ToolEmbedding]] = None,
        catalog_path: Optional[str | Path] = None,
    ):
        """
        Initialize the service.

        Args:
            tools: Catalog entries to serve; skips reading ``catalog_path``
            catalog_path: Catalog document to read lazily (defaults to Config.CATALOG_PATH)
        """
        self.catalog_path = str(catalog_path) if catalog_path else Config.CATALOG_PATH
        self._lock = threading.Lock()
        self._tools: Optional[list[ToolEmbedding]] = None
        self._tools_by_name: dict[str, ToolEmbedding] = {}
        self._index: Optional[TFIDFIndex] = None
        self._warned_no_vectors = False

        if tools is not None:
            self.set_tools(tools)

    # ------------------------------------------------------------------
    # Catalog lifecycle
    # ------------------------------------------------------------------

    def load_tool_vectors(self) -> list[ToolEmbedding]:
        """
        Load the catalog and build its index on first call.

        Never raises: an unavailable catalog is cached as empty.

        Returns:
            Catalog entries
        """
        tools = self._tools
        if tools is not None:
            return tools

        with self._lock:
            if self._tools is None:
                self._install(load_catalog(self.catalog_path))
            tools = self._tools
        return tools

    def set_tools(self, tools: list[ToolEmbedding]) -> None:
        """Replace the catalog and rebuild the index wholesale."""
        with self._lock:
            self._install(list(tools))

    def reset(self) -> None:
        """Drop the cached catalog and index; the next query reloads them."""
        with self._lock:
            self._tools = None
            self._tools_by_name = {}
            self._index = None
            self._warned_no_vectors = False

    def _install(self, tools: list[ToolEmbedding]) -> None:
        index = build_index(Document(id=tool.name, text=tool.search_text) for tool in tools)
        self._tools_by_name = {tool.name: tool for tool in tools}
        self._index = index
        self._warned_no_vectors = False
        self._tools = tools

    def is_vectors_loaded(self) -> bool:
        """True once a non-empty catalog is loaded."""
        return bool(self._tools)

    @property
    def index(self) -> Optional[TFIDFIndex]:
        return self._index

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, query: str, options: Optional[SearchOptions] = None) -> list[ToolSearchResult]:
        """
        Search tools by natural language query.

        Args:
            query: Free-text query
            options: Limit, score threshold and neural toggle

        Returns:
            Matching tools, best first
        """
        options = options or SearchOptions(limit=Config.DEFAULT_LIMIT, min_score=Config.MIN_SCORE)

        tools = self.load_tool_vectors()
        if not tools:
            return []

        query = query.strip() if query else ""
        if not query or options.limit <= 0:
            return []

        if options.use_embeddings:
            return self._search_with_embeddings(query, tools, options.limit, options.min_score)
        return self._search_with_tfidf(query, options.limit, options.min_score)

    def search_tools(
        self,
        query: str,
        limit: Optional[int] = None,
        use_embeddings: bool = False,
        min_score: Optional[float] = None,
    ) -> list[ToolSearchResult]:
        """Keyword-argument form of ``search()``; None falls back to Config defaults."""
        options = SearchOptions(
            limit=Config.DEFAULT_LIMIT if limit is None else limit,
            use_embeddings=use_embeddings,
            min_score=Config.MIN_SCORE if min_score is None else min_score,
        )
        return self.search(query, options)

    def _search_with_tfidf(self, query: str, limit: int, min_score: float) -> list[ToolSearchResult]:
        if self._index is None:
            return []

        # Over-fetch so results dropped by min_score can be replaced
        candidates = score(query, self._index, limit * 2)

        output: list[ToolSearchResult] = []
        for candidate in candidates:
            if candidate.score < min_score:
                continue
            tool = self._tools_by_name.get(candidate.id)
            if tool is not None:
                output.append(ToolSearchResult.from_tool(tool, candidate.score))
            if len(output) >= limit:
                break

        return output

    def _search_with_embeddings(
        self, query: str, tools: list[ToolEmbedding], limit: int, min_score: float
    ) -> list[ToolSearchResult]:
        if not any(tool.has_vector for tool in tools):
            if not self._warned_no_vectors:
                logger.warning("Neural embeddings not available, falling back to TF-IDF")
                self._warned_no_vectors = True
            return self._search_with_tfidf(query, limit, min_score)

        # Queries are not embedded at search time; precomputed vectors only select this path
        logger.debug("Runtime query embedding not enabled; scoring with TF-IDF")
        return self._search_with_tfidf(query, limit, min_score)

    def search_by_category(self, category: str) -> list[ToolSearchResult]:
        """
        List tools in a category (case-insensitive exact match).

        Every match scores 1.0; this is a filter, not a ranking.
        """
        tools = self.load_tool_vectors()
        normalized = category.lower()
        return [
            ToolSearchResult.from_tool(tool, 1.0)
            for tool in tools
            if tool.category.lower() == normalized
        ]

    def get_categories(self) -> list[str]:
        """Distinct category names, sorted."""
        return sorted({tool.category for tool in self.load_tool_vectors()})

    def get_stats(self) -> dict[str, Any]:
        """Tool counts: ``{"total": n, "by_category": {category: n}}``."""
        tools = self.load_tool_vectors()
        by_category: dict[str, int] = {}
        for tool in tools:
            by_category[tool.category] = by_category.get(tool.category, 0) + 1
        return {"total": len(tools), "by_category": by_category}


# ============================================================================
# Process-wide default service
# ============================================================================

_search_service: Optional[ToolSearchService] = None


def get_search_service() -> ToolSearchService:
    """Get or create the process-wide search service."""
    global _search_service
    if _search_service is None:
        _search_service = ToolSearchService()
    return _search_service


def set_search_service(service: Optional[ToolSearchService]) -> None:
    """Install a service as the process-wide default (None restores lazy creation)."""
    global _search_service
    _search_service = service


def reset_search_service() -> None:
    """Reset the default service so the next query reloads the catalog."""
    get_search_service().reset()


def load_tool_vectors() -> list[ToolEmbedding]:
    return get_search_service().load_tool_vectors()


def is_vectors_loaded() -> bool:
    return get_search_service().is_vectors_loaded()


def search_tools(
    query: str,
    limit: Optional[int] = None,
    use_embeddings: bool = False,
    min_score: Optional[float] = None,
) -> list[ToolSearchResult]:
    """Search the default catalog. See ``ToolSearchService.search_tools``."""
    return get_search_service().search_tools(
        query, limit=limit, use_embeddings=use_embeddings, min_score=min_score
    )


def search_by_category(category: str) -> list[ToolSearchResult]:
    return get_search_service().search_by_category(category)


def get_categories() -> list[str]:
    return get_search_service().get_categories()


def get_stats() -> dict[str, Any]:
    return get_search_service().get_stats()
