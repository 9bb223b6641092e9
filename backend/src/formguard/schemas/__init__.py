"""Schema storage, loading and checking.

Usage:
    from formguard.schemas import SchemaRegistry, load_schema

    schemas = SchemaRegistry()
    schemas.register("signup", load_schema(Path("schemas/signup.yaml")))
    result = schemas.create_validator("signup").validate(record)
"""

from formguard.schemas.checker import SchemaIssue, check_schema
from formguard.schemas.loader import SchemaLoadError, load_document, load_schema
from formguard.schemas.registry import SchemaNotFoundError, SchemaRegistry

__all__ = [
    "SchemaIssue",
    "SchemaLoadError",
    "SchemaNotFoundError",
    "SchemaRegistry",
    "check_schema",
    "load_document",
    "load_schema",
]
