"""Centralized configuration for tool search."""

import os
from pathlib import Path

_DEFAULT_CATALOG_PATH = str(Path(__file__).parent / "data" / "tool-vectors.json")

_DEFAULT_CATEGORIES = "batch,content,cookbook,core,plugins,roles,taxonomy,themes,users"


def _parse_list(value: str) -> list[str]:
    """Split a comma-separated environment value, dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """
    Tool search configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables.
    """

    # ========================================================================
    # Catalog
    # ========================================================================
    CATALOG_PATH: str = os.getenv("TOOL_SEARCH_CATALOG_PATH", _DEFAULT_CATALOG_PATH)
    CATEGORIES: list[str] = _parse_list(
        os.getenv("TOOL_SEARCH_CATEGORIES", _DEFAULT_CATEGORIES)
    )

    # ========================================================================
    # Search defaults
    # ========================================================================
    DEFAULT_LIMIT: int = int(os.getenv("TOOL_SEARCH_DEFAULT_LIMIT", "10"))
    MAX_LIMIT: int = int(os.getenv("TOOL_SEARCH_MAX_LIMIT", "25"))
    MIN_SCORE: float = float(os.getenv("TOOL_SEARCH_MIN_SCORE", "0.1"))

    # ========================================================================
    # Neural embeddings (optional)
    # ========================================================================
    EMBEDDING_MODEL: str = os.getenv(
        "TOOL_SEARCH_EMBEDDING_MODEL", "sentence-transformers/all-MiniLM-L6-v2"
    )

    # ========================================================================
    # Logging
    # ========================================================================
    LOG_LEVEL: str = os.getenv("TOOL_SEARCH_LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if cls.DEFAULT_LIMIT <= 0:
            errors.append(f"DEFAULT_LIMIT must be > 0, got {cls.DEFAULT_LIMIT}")
        if cls.MAX_LIMIT <= 0:
            errors.append(f"MAX_LIMIT must be > 0, got {cls.MAX_LIMIT}")
        if cls.DEFAULT_LIMIT > cls.MAX_LIMIT:
            errors.append(
                f"DEFAULT_LIMIT ({cls.DEFAULT_LIMIT}) must not exceed MAX_LIMIT ({cls.MAX_LIMIT})"
            )
        if not (0.0 <= cls.MIN_SCORE <= 1.0):
            errors.append(f"MIN_SCORE must be within [0, 1], got {cls.MIN_SCORE}")
        if not cls.CATEGORIES:
            errors.append("CATEGORIES must contain at least one category")

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True
