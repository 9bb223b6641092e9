"""
schemas/checker.py — optional strict checks for form schemas.

Validation itself ignores config keys it does not understand. This module
reports them, along with problems that would otherwise only show up at
validate time:

  - document shape (JSON Schema, Draft 2020-12)
  - unknown field-config keys and unknown field types (warnings)
  - pattern parameters that do not compile (errors)
  - cross-field expressions that do not parse (errors)
  - cross-field expressions naming fields the schema does not declare (warnings)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from formguard.conversion import CONVERTERS
from formguard.expressions import (
    ASTNode,
    BinaryOp,
    Identifier,
    LexerError,
    ParseError,
    UnaryOp,
    compile_expression,
)
from formguard.rules import InvalidPatternError, compile_pattern, default_registry
from formguard.rules.registry import RuleRegistry

_SCHEMA_PATH = Path(__file__).parent / "form.schema.json"

# Field-config keys that are not rules
RESERVED_KEYS = frozenset({"type", "messages"})


@dataclass
class SchemaIssue:
    """A single finding for a form schema."""

    message: str
    path: str = ""          # e.g. "fields/username/pattern"
    severity: str = "error" # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}]{loc}: {self.message}"


@lru_cache(maxsize=1)
def _load_validator() -> Draft202012Validator:
    with _SCHEMA_PATH.open(encoding="utf-8") as fh:
        return Draft202012Validator(json.load(fh))


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _identifiers(root: ASTNode) -> Iterator[str]:
    """Yield identifier names left to right; long && / || chains are deep."""
    stack = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            yield node.name
        elif isinstance(node, BinaryOp):
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, UnaryOp):
            stack.append(node.operand)


def _check_fields(fields: Mapping[str, Any], registry: RuleRegistry) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []

    for name, config in fields.items():
        if not isinstance(config, Mapping):
            continue

        field_type = config.get("type")
        if field_type is not None and field_type not in CONVERTERS:
            issues.append(SchemaIssue(
                message=f"Unknown type '{field_type}', value will not be converted",
                path=f"fields/{name}/type",
                severity="warning",
            ))

        for key in config:
            if key in RESERVED_KEYS or registry.has(key):
                continue
            issues.append(SchemaIssue(
                message=f"'{key}' is not a registered rule and will be ignored",
                path=f"fields/{name}/{key}",
                severity="warning",
            ))

        if "pattern" in config and registry.has("pattern"):
            try:
                compile_pattern(config["pattern"])
            except InvalidPatternError as e:
                issues.append(SchemaIssue(message=str(e), path=f"fields/{name}/pattern"))

    return issues


def _check_cross_field_rules(
    rules: list[Any],
    fields: Mapping[str, Any],
) -> list[SchemaIssue]:
    issues: list[SchemaIssue] = []

    for index, rule in enumerate(rules):
        if not isinstance(rule, Mapping) or not isinstance(rule.get("rule"), str):
            continue

        path = f"crossFieldValidations[{index}]/rule"
        try:
            ast = compile_expression(rule["rule"])
        except (LexerError, ParseError) as e:
            issues.append(SchemaIssue(message=f"Invalid expression: {e}", path=path))
            continue

        for name in dict.fromkeys(_identifiers(ast)):
            if name not in fields:
                issues.append(SchemaIssue(
                    message=f"Expression refers to undeclared field '{name}'",
                    path=path,
                    severity="warning",
                ))

    return issues


def check_schema(
    schema: Any,
    *,
    registry: RuleRegistry | None = None,
) -> list[SchemaIssue]:
    """
    Check a form schema without validating any record.

    Args:
        schema:   The schema document (already parsed).
        registry: Rule registry used to tell rules from unknown keys.
                  Defaults to the process-wide registry.

    Returns:
        A list of :class:`SchemaIssue` objects (empty when clean).
    """
    registry = registry if registry is not None else default_registry
    validator = _load_validator()

    issues = [
        SchemaIssue(message=error.message, path=_json_path(error))
        for error in sorted(validator.iter_errors(schema), key=_json_path)
    ]
    if issues or not isinstance(schema, Mapping):
        return issues

    fields = schema.get("fields") or {}
    issues.extend(_check_fields(fields, registry))
    issues.extend(_check_cross_field_rules(schema.get("crossFieldValidations") or [], fields))
    return issues
