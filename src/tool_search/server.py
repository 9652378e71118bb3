"""FastMCP server exposing tool search to agents."""

import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger

from .config import Config
from .service import get_search_service

SERVER_NAME = "ToolSearch"
SEARCH_HINT = "Use describe_tools to get full schemas for these tools"

mcp = FastMCP(SERVER_NAME)


def search_tools_handler(
    query: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 10,
) -> dict[str, Any]:
    """
    Find tools by query, category, or both.

    - query only: ranked free-text search
    - category only: every tool in the category
    - both: ranked search, then filtered to the category

    Raises:
        ToolError: If neither query nor category is given, or the category is unknown
    """
    if not query and not category:
        raise ToolError(
            "At least one of query or category is required. "
            f"Available categories: {', '.join(Config.CATEGORIES)}"
        )

    if category and category not in Config.CATEGORIES:
        raise ToolError(
            f"Invalid category: {category}. "
            f"Available categories: {', '.join(Config.CATEGORIES)}"
        )

    effective_limit = max(1, min(Config.MAX_LIMIT, limit))
    service = get_search_service()

    if query and category:
        # Over-fetch so enough results survive the category filter
        candidates = service.search_tools(query, limit=effective_limit * 3)
        wanted = category.lower()
        results = [r for r in candidates if r.category.lower() == wanted][:effective_limit]
    elif query:
        results = service.search_tools(query, limit=effective_limit)
    else:
        results = service.search_by_category(category)[:effective_limit]

    logger.debug(
        f"search_tools query={query!r} category={category!r} -> {len(results)} results"
    )

    return {
        "tools": [
            {"name": r.name, "description": r.description, "category": r.category}
            for r in results
        ],
        "total_matching": len(results),
        "hint": SEARCH_HINT,
    }


def list_categories_handler() -> dict[str, Any]:
    """Catalog categories with per-category tool counts."""
    service = get_search_service()
    return {"categories": service.get_categories(), "stats": service.get_stats()}


@mcp.tool()
def search_tools(
    query: Optional[str] = None,
    category: Optional[str] = None,
    limit: int = 10,
) -> dict[str, Any]:
    """
    Find tools by natural language query or category.

    Returns tool names and brief descriptions only (not full schemas).

    Args:
        query: Natural language query (e.g. "create a blog post", "manage plugins")
        category: Filter by tool category
        limit: Maximum number of results (1-25)
    """
    return search_tools_handler(query=query, category=category, limit=limit)


@mcp.tool()
def list_tool_categories() -> dict[str, Any]:
    """List tool categories and how many tools each contains."""
    return list_categories_handler()


def main():
    """
    Main entry point for the tool search server.

    Configures loguru and runs the server over stdio.
    """
    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>",
        level=Config.LOG_LEVEL,
    )

    try:
        Config.validate()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Starting {SERVER_NAME}...")
    # Load eagerly so catalog problems show up at startup
    tools = get_search_service().load_tool_vectors()
    logger.info(f"Serving {len(tools)} tools")

    try:
        mcp.run()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
