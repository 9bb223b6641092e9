"""Named schema registry.

Stores schemas under string keys and builds a fresh Validator for each
request. Validators are not cached.

Example:
    schemas = SchemaRegistry()
    schemas.register("signup", {"fields": {"email": {"required": True}}})

    validator = schemas.create_validator("signup")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from formguard.engine import Validator
from formguard.rules.registry import RuleRegistry
from formguard.schemas.loader import iter_schema_files, load_schema


class SchemaNotFoundError(KeyError):
    """No schema is registered under the requested key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Schema not found: {self.key}"


class SchemaRegistry:
    """Registry of named schemas."""

    def __init__(self, rule_registry: RuleRegistry | None = None):
        self._schemas: dict[str, Mapping[str, Any]] = {}
        self._rule_registry = rule_registry

    def register(self, key: str, schema: Mapping[str, Any]) -> None:
        """Register (or replace) a schema under a key."""
        self._schemas[key] = schema

    def create_validator(self, key: str) -> Validator:
        """Build a new Validator for a registered schema.

        Raises:
            SchemaNotFoundError: If no schema is registered under key
        """
        if key not in self._schemas:
            raise SchemaNotFoundError(key)
        return Validator(self._schemas[key], registry=self._rule_registry)

    def get_schema(self, key: str) -> Mapping[str, Any] | None:
        return self._schemas.get(key)

    def has(self, key: str) -> bool:
        return key in self._schemas

    def unregister(self, key: str) -> None:
        """Remove a schema; unknown keys are ignored."""
        self._schemas.pop(key, None)

    @property
    def keys(self) -> list[str]:
        """Registered keys in registration order."""
        return list(self._schemas)

    def load_directory(self, directory: Path) -> list[str]:
        """Register every schema file in a directory under its file stem.

        Returns:
            The keys that were registered
        """
        loaded = []
        for path in iter_schema_files(directory):
            self.register(path.stem, load_schema(path))
            loaded.append(path.stem)
        return loaded
