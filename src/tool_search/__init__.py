"""Tool Search - keyword and optional neural search over a tool catalog."""

__version__ = "0.1.0"

from .catalog.models import SearchOptions, ToolEmbedding, ToolSearchResult
from .service import (
    ToolSearchService,
    get_categories,
    get_search_service,
    get_stats,
    load_tool_vectors,
    search_by_category,
    search_tools,
)

__all__ = [
    "SearchOptions",
    "ToolEmbedding",
    "ToolSearchResult",
    "ToolSearchService",
    "__version__",
    "get_categories",
    "get_search_service",
    "get_stats",
    "load_tool_vectors",
    "search_by_category",
    "search_tools",
]
