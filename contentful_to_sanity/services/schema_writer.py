"""Persistence of Sanity schema definitions."""

import json
import logging
from pathlib import Path
from typing import List

from ..models.sanity import SanityDocumentDefinition

logger = logging.getLogger(__name__)

INDEX_FILE = "index.json"


def write_schemas(definitions: List[SanityDocumentDefinition], output_dir: str) -> List[Path]:
    """
    Write one JSON file per document definition plus an index.

    Args:
        definitions: Document definitions, in the order the index lists them
        output_dir: Directory to write to, created when missing

    Returns:
        Paths of the written files, index last
    """
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    written = []
    for definition in definitions:
        file_path = directory / f"{definition.name}.json"
        definition.save_to_json(str(file_path))
        written.append(file_path)

    index_path = directory / INDEX_FILE
    with open(index_path, 'w', encoding="utf-8") as f:
        json.dump({"types": [d.name for d in definitions]}, f, indent=2)
    written.append(index_path)

    logger.info(f"Wrote {len(definitions)} schema definitions to {directory}")
    return written


def read_schemas(output_dir: str) -> List[SanityDocumentDefinition]:
    """Read definitions written by `write_schemas`, in index order."""
    directory = Path(output_dir)
    with open(directory / INDEX_FILE, encoding="utf-8") as f:
        names = json.load(f).get("types", [])

    return [SanityDocumentDefinition.from_json_file(str(directory / f"{name}.json")) for name in names]
