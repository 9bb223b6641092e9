"""Built-in rules installed into every rule registry.

Rules:
- required: value must be non-null and non-empty
- minLength/maxLength: string length bounds
- min/max: numeric or date bounds
- pattern: full regex match
- format: named date/time formats
- enum: value must be one of a list
"""

import re
from datetime import datetime
from functools import lru_cache
from typing import Any

from formguard.conversion import CONVERSION_FAILED, to_date, to_number
from formguard.rules.registry import RuleRegistry


class InvalidPatternError(ValueError):
    """A pattern rule parameter is not a valid regular expression."""

    def __init__(self, pattern: Any, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


# =============================================================================
# Named Formats
# =============================================================================

FORMAT_PATTERNS: dict[str, re.Pattern[str]] = {
    "YYYY/MM/DD": re.compile(r"\d{4}/\d{2}/\d{2}"),
    "YYYY-MM-DD": re.compile(r"\d{4}-\d{2}-\d{2}"),
    "YYYYMMDD": re.compile(r"\d{8}"),
    "YYYYMMDDHHmmss": re.compile(r"\d{14}"),
    "ISO8601": re.compile(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:Z|[+-]\d{2}:\d{2})?"
    ),
    "UNIX_MS": re.compile(r"\d{10,13}"),
    "TIMESTAMP_MS": re.compile(r"\d{10,13}"),
    "HH:mm:ss": re.compile(r"\d{2}:\d{2}:\d{2}"),
    "HHmmss": re.compile(r"\d{6}"),
}


def compile_pattern(pattern: Any) -> re.Pattern[str]:
    """Compile a pattern rule parameter.

    Raises:
        InvalidPatternError: If the pattern is not a string or does not compile
    """
    if not isinstance(pattern, str):
        raise InvalidPatternError(pattern, "pattern must be a string")
    return _compile(pattern)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


# =============================================================================
# Rule Predicates
# =============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def required(value: Any, param: Any) -> bool:
    return value is not None and value != ""


def min_length(value: Any, length: Any) -> bool:
    limit = to_number(length)
    return isinstance(value, str) and limit is not CONVERSION_FAILED and len(value) >= limit


def max_length(value: Any, length: Any) -> bool:
    limit = to_number(length)
    return isinstance(value, str) and limit is not CONVERSION_FAILED and len(value) <= limit


def _bound(value: Any, limit: Any) -> tuple[Any, Any] | None:
    """Pair a value with its bound in a comparable form, or None."""
    if isinstance(value, datetime):
        value = to_date(value)
        bound = to_date(limit)
    elif _is_number(value):
        bound = to_number(limit)
    else:
        return None

    if bound is CONVERSION_FAILED:
        return None
    return value, bound


def minimum(value: Any, limit: Any) -> bool:
    pair = _bound(value, limit)
    return pair is not None and pair[0] >= pair[1]


def maximum(value: Any, limit: Any) -> bool:
    pair = _bound(value, limit)
    return pair is not None and pair[0] <= pair[1]


def pattern(value: Any, regex: Any) -> bool:
    compiled = compile_pattern(regex)
    return isinstance(value, str) and compiled.fullmatch(value) is not None


def format_(value: Any, fmt: Any) -> bool:
    if not isinstance(value, str):
        return False

    compiled = FORMAT_PATTERNS.get(fmt) if isinstance(fmt, str) else None
    if compiled is None:
        # Unknown format names never pass
        return False

    return compiled.fullmatch(value) is not None


def enum(value: Any, options: Any) -> bool:
    if not isinstance(options, (list, tuple)):
        return False
    return any(
        option == value and isinstance(option, bool) == isinstance(value, bool)
        for option in options
    )


BUILTIN_RULES = {
    "required": required,
    "minLength": min_length,
    "maxLength": max_length,
    "min": minimum,
    "max": maximum,
    "pattern": pattern,
    "format": format_,
    "enum": enum,
}


def register_builtin_rules(registry: RuleRegistry) -> RuleRegistry:
    """Install the built-in rules into a registry and return it."""
    for name, predicate in BUILTIN_RULES.items():
        registry.register(name, predicate)
    return registry
