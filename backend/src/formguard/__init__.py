"""formguard: declarative form validation.

This package provides:
- Type conversion of raw field values (string, number, boolean, date)
- A registry of named rules (required, minLength, pattern, format, ...)
- Locale-aware messages with ${identifier} interpolation
- Cross-field rules written as small comparison expressions
- A registry of named schemas

Usage:
    from formguard import Validator, register_rule

    # At application startup
    register_rule("even", lambda value, param: value % 2 == 0)

    result = Validator(schema).validate(record, locale="ja")
    if not result.valid:
        print(result.errors)
"""

from formguard.config import ValidatorConfig
from formguard.conversion import CONVERSION_FAILED, convert, stringify
from formguard.engine import Validator
from formguard.expressions import evaluate_rule
from formguard.field import FieldValidator
from formguard.messages import MessageResolver, lookup_template, resolve_message
from formguard.rules import (
    InvalidPatternError,
    RuleRegistry,
    create_registry,
    default_registry,
    register_rule,
)
from formguard.schemas import (
    SchemaIssue,
    SchemaLoadError,
    SchemaNotFoundError,
    SchemaRegistry,
    check_schema,
    load_schema,
)
from formguard.types import CrossFieldError, ValidationResult

__all__ = [
    # Engine
    "FieldValidator",
    "Validator",
    "ValidatorConfig",
    # Types
    "CrossFieldError",
    "ValidationResult",
    # Conversion
    "CONVERSION_FAILED",
    "convert",
    "stringify",
    # Rules
    "InvalidPatternError",
    "RuleRegistry",
    "create_registry",
    "default_registry",
    "register_rule",
    # Messages
    "MessageResolver",
    "lookup_template",
    "resolve_message",
    # Expressions
    "evaluate_rule",
    # Schemas
    "SchemaIssue",
    "SchemaLoadError",
    "SchemaNotFoundError",
    "SchemaRegistry",
    "check_schema",
    "load_schema",
]
