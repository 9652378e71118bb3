#!/usr/bin/env python3
"""
Build the tool search catalog (tool-vectors.json).

Reads tool definitions ({name, description, category}) from a YAML or JSON
file, extracts keywords for TF-IDF search, optionally precomputes neural
vectors, and writes the catalog document.

Usage:
    python scripts/build_catalog.py tools.yaml
    python scripts/build_catalog.py tools.yaml --embed --output catalog.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from tool_search.catalog.builder import TFIDF_MODEL_NAME, build_catalog
from tool_search.config import Config
from tool_search.embeddings import embed_texts, is_model_available


def read_definitions(path: Path) -> list[dict[str, Any]]:
    """Read tool definitions; accepts a bare list or a {tools: [...]} mapping."""
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if isinstance(data, dict):
        data = data.get("tools", [])
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of tool definitions in {path}")
    return data


async def compute_vectors(definitions: list[dict[str, Any]]) -> list[list[float] | None] | None:
    if not is_model_available():
        logger.warning("sentence-transformers not installed; writing catalog without vectors")
        return None

    texts = [f"{d['name']} {d['description']}" for d in definitions]
    vectors = await embed_texts(texts)
    if all(v is None for v in vectors):
        return None
    return vectors


def main() -> int:
    parser = argparse.ArgumentParser(description="Build the tool search catalog")
    parser.add_argument("definitions", type=Path, help="YAML/JSON file with tool definitions")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(Config.CATALOG_PATH),
        help="Catalog file to write (default: bundled tool-vectors.json)",
    )
    parser.add_argument("--embed", action="store_true", help="Precompute neural vectors")
    parser.add_argument("--max-keywords", type=int, default=20)
    args = parser.parse_args()

    definitions = read_definitions(args.definitions)

    vectors = asyncio.run(compute_vectors(definitions)) if args.embed else None
    model = Config.EMBEDDING_MODEL if vectors is not None else TFIDF_MODEL_NAME

    catalog = build_catalog(
        definitions, model=model, vectors=vectors, max_keywords=args.max_keywords
    )

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with open(args.output, "w", encoding="utf-8") as f:
        json.dump(catalog.to_dict(), f, indent=2)
        f.write("\n")

    logger.info(f"Wrote {len(catalog.tools)} tools to {args.output} (model={model})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
