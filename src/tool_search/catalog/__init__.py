"""Tool catalog models, loading and build-time generation."""

from .builder import build_catalog, build_tool_embedding
from .loader import load_catalog, read_catalog_file
from .models import SearchOptions, ToolEmbedding, ToolSearchResult, ToolVectorsFile

__all__ = [
    "SearchOptions",
    "ToolEmbedding",
    "ToolSearchResult",
    "ToolVectorsFile",
    "build_catalog",
    "build_tool_embedding",
    "load_catalog",
    "read_catalog_file",
]
