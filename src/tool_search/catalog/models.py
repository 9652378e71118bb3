"""
Catalog data models.

Defines ToolEmbedding (a searchable catalog entry), ToolVectorsFile (the
on-disk catalog document), and the search option/result shapes.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolEmbedding:
    """
    Searchable catalog entry for a single tool.

    Invariants:
    - name must not be empty
    - vector, when present, is a precomputed neural embedding
    """

    name: str  # "wpnav_list_posts"
    description: str
    category: str  # "content", "plugins", ...
    keywords: list[str] = field(default_factory=list)  # Pre-extracted for TF-IDF
    vector: list[float] | None = None  # Neural embedding, only when precomputed

    @property
    def search_text(self) -> str:
        """Text indexed for keyword search: name, description and keywords."""
        return f"{self.name} {self.description} {' '.join(self.keywords)}"

    @property
    def has_vector(self) -> bool:
        return bool(self.vector)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolEmbedding":
        """
        Parse a catalog entry.

        Raises:
            KeyError: If name, description or category is missing
            TypeError: If the entry is not a mapping
            ValueError: If name is empty
        """
        if not isinstance(data, dict):
            raise TypeError(f"Tool entry must be a mapping, got {type(data).__name__}")

        name = str(data["name"])
        if not name:
            raise ValueError("Tool entry has an empty name")

        vector = data.get("vector")
        return cls(
            name=name,
            description=str(data["description"]),
            category=str(data["category"]),
            keywords=[str(k) for k in data.get("keywords") or []],
            vector=[float(x) for x in vector] if vector else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "keywords": list(self.keywords),
        }
        if self.vector is not None:
            data["vector"] = list(self.vector)
        return data


@dataclass
class ToolVectorsFile:
    """Precomputed catalog document: ``{generated, model, tools}``."""

    generated: str  # ISO-8601 timestamp
    model: str  # Embedding model used for vectors ("tfidf" when none)
    tools: list[ToolEmbedding] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolVectorsFile":
        if not isinstance(data, dict):
            raise TypeError(f"Catalog must be a mapping, got {type(data).__name__}")

        tools = data["tools"]
        if not isinstance(tools, list):
            raise TypeError("'tools' must be a list")

        return cls(
            generated=str(data.get("generated", "")),
            model=str(data.get("model", "")),
            tools=[ToolEmbedding.from_dict(entry) for entry in tools],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated": self.generated,
            "model": self.model,
            "tools": [tool.to_dict() for tool in self.tools],
        }


@dataclass
class SearchOptions:
    """Options for free-text tool search."""

    limit: int = 10
    use_embeddings: bool = False  # Neural query embedding (falls back to TF-IDF)
    min_score: float = 0.1


@dataclass
class ToolSearchResult:
    """
    Tool returned by search.

    Metadata only; score is in [0, 1].
    """

    name: str
    description: str
    category: str
    score: float

    @classmethod
    def from_tool(cls, tool: ToolEmbedding, score: float) -> "ToolSearchResult":
        return cls(
            name=tool.name,
            description=tool.description,
            category=tool.category,
            score=min(score, 1.0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "score": self.score,
        }
