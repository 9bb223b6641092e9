"""Schema file loading.

Schemas are stored as JSON or YAML documents with the same shape:

    fields:
      username:
        required: true
        minLength: 3
        messages:
          minLength:
            en: "At least ${minLength} characters"
    crossFieldValidations: []
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

SCHEMA_SUFFIXES = (".json", ".yaml", ".yml")


class SchemaLoadError(Exception):
    """A schema document could not be read or is not a mapping."""
    pass


def load_document(path: Path) -> Any:
    """Read a JSON or YAML document from disk."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaLoadError(f"Cannot parse {path}: {e}") from e


def load_schema(path: Path) -> dict[str, Any]:
    """Load a schema document.

    Raises:
        SchemaLoadError: If the file cannot be read, parsed, or is not a mapping
    """
    schema = load_document(path)

    if not isinstance(schema, dict):
        raise SchemaLoadError(f"Schema in {path} must be a mapping")

    return schema


def iter_schema_files(directory: Path) -> list[Path]:
    """List schema files in a directory, sorted by name."""
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.lower() in SCHEMA_SUFFIXES
    )
