"""Rule registry and built-in rules.

Usage:
    from formguard.rules import register_rule

    # At application startup
    register_rule("even", lambda value, param: value % 2 == 0)
"""

from formguard.rules.builtins import (
    BUILTIN_RULES,
    FORMAT_PATTERNS,
    InvalidPatternError,
    compile_pattern,
    register_builtin_rules,
)
from formguard.rules.registry import RulePredicate, RuleRegistry

# Process-wide registry used by validators that are not given their own
default_registry = register_builtin_rules(RuleRegistry())


def register_rule(name: str, predicate: RulePredicate) -> None:
    """Install or replace a rule in the process-wide registry."""
    default_registry.register(name, predicate)


def create_registry(include_builtins: bool = True) -> RuleRegistry:
    """Create an isolated registry, optionally seeded with the built-ins."""
    registry = RuleRegistry()
    if include_builtins:
        register_builtin_rules(registry)
    return registry


__all__ = [
    "BUILTIN_RULES",
    "FORMAT_PATTERNS",
    "InvalidPatternError",
    "RulePredicate",
    "RuleRegistry",
    "compile_pattern",
    "create_registry",
    "default_registry",
    "register_builtin_rules",
    "register_rule",
]
