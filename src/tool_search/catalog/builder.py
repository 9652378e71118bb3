"""
Build-time catalog generation.

Turns plain tool definitions into catalog entries with pre-extracted
keywords and, optionally, precomputed neural vectors.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from ..retrieval.tokenizer import extract_keywords
from .models import ToolEmbedding, ToolVectorsFile

TFIDF_MODEL_NAME = "tfidf"


def build_tool_embedding(
    definition: Mapping[str, Any],
    vector: Sequence[float] | None = None,
    max_keywords: int = 20,
) -> ToolEmbedding:
    """
    Create a catalog entry from a ``{name, description, category}`` mapping.

    Raises:
        KeyError: If a required field is missing
    """
    name = str(definition["name"])
    description = str(definition["description"])
    return ToolEmbedding(
        name=name,
        description=description,
        category=str(definition["category"]),
        keywords=extract_keywords(f"{name} {description}", max_keywords),
        vector=list(vector) if vector is not None else None,
    )


def build_catalog(
    definitions: Sequence[Mapping[str, Any]],
    model: str = TFIDF_MODEL_NAME,
    vectors: Sequence[Sequence[float] | None] | None = None,
    max_keywords: int = 20,
) -> ToolVectorsFile:
    """
    Build a catalog document from tool definitions.

    Args:
        definitions: Tool definitions with name, description and category
        model: Name of the model that produced ``vectors``
        vectors: Optional embeddings, one per definition (None entries allowed)
        max_keywords: Keywords kept per tool

    Returns:
        ToolVectorsFile ready to be serialized with ``to_dict()``

    Raises:
        ValueError: If ``vectors`` does not match ``definitions`` in length
    """
    if vectors is not None and len(vectors) != len(definitions):
        raise ValueError(
            f"Got {len(vectors)} vectors for {len(definitions)} tool definitions"
        )

    tools = [
        build_tool_embedding(
            definition,
            vector=vectors[i] if vectors is not None else None,
            max_keywords=max_keywords,
        )
        for i, definition in enumerate(definitions)
    ]

    return ToolVectorsFile(
        generated=datetime.now(timezone.utc).isoformat(),
        model=model,
        tools=tools,
    )
