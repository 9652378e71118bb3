"""
Catalog loading.

Reads the precomputed tool catalog from disk. A missing or corrupt
catalog is not fatal: it is logged and treated as an empty catalog.
"""

import json
from pathlib import Path

import yaml
from loguru import logger

from .models import ToolEmbedding, ToolVectorsFile

_YAML_SUFFIXES = {".yaml", ".yml"}


def read_catalog_file(path: str | Path) -> ToolVectorsFile:
    """
    Parse a catalog file.

    Files ending in .yaml/.yml are parsed as YAML, everything else as JSON.

    Args:
        path: Path to the catalog document

    Returns:
        Parsed ToolVectorsFile

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError / yaml.YAMLError: If the document is malformed
        KeyError / TypeError / ValueError: If entries are missing required fields
    """
    catalog_file = Path(path)
    if not catalog_file.exists():
        raise FileNotFoundError(f"Tool catalog not found: {catalog_file}")

    with open(catalog_file, encoding="utf-8") as f:
        if catalog_file.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return ToolVectorsFile.from_dict(data)


def load_catalog(path: str | Path) -> list[ToolEmbedding]:
    """
    Load catalog entries, degrading to an empty list on any read error.

    Args:
        path: Path to the catalog document

    Returns:
        Catalog entries (empty if the catalog is unavailable)
    """
    try:
        catalog = read_catalog_file(path)
    except FileNotFoundError:
        logger.warning(
            f"Tool catalog not found at {path}; run scripts/build_catalog.py to generate it. "
            "Search will return no results."
        )
        return []
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read tool catalog {path}: {e}")
        return []
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Invalid tool catalog {path}: {e}")
        return []

    logger.info(
        f"Loaded {len(catalog.tools)} tools from catalog {path} "
        f"(model={catalog.model or 'unknown'}, generated={catalog.generated or 'unknown'})"
    )
    return catalog.tools
