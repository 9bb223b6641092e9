"""Rule registry for formguard.

A rule is a named predicate ``(value, param) -> bool``. Field configs refer
to rules by name; any config key that names a registered rule is treated as
that rule's parameter.

Registration is expected to finish during application setup, before
validators start running. Writes are serialized with a lock; reads take a
snapshot of the table and never block.
"""

import logging
import threading
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)

RulePredicate = Callable[[Any, Any], bool]


class RuleRegistry:
    """Registry of named rule predicates.

    Example:
        registry = RuleRegistry()
        registry.register("even", lambda value, param: value % 2 == 0)

        registry.apply("even", 4, True)  # True
    """

    def __init__(self, rules: dict[str, RulePredicate] | None = None):
        self._rules: dict[str, RulePredicate] = dict(rules or {})
        self._lock = threading.Lock()

    def register(self, name: str, predicate: RulePredicate) -> None:
        """Register a rule predicate by name.

        The last registration for a name wins.

        Args:
            name: Rule name as used in field configs (e.g., "minLength")
            predicate: Callable taking (value, param) and returning a bool
        """
        if not callable(predicate):
            raise TypeError(f"Rule '{name}' must be callable")

        with self._lock:
            if name in self._rules:
                logger.debug("Replacing registered rule '%s'", name)
            rules = dict(self._rules)
            rules[name] = predicate
            self._rules = rules

    def get(self, name: str) -> RulePredicate:
        """Get a rule predicate by name.

        Raises:
            KeyError: If the rule is not registered
        """
        try:
            return self._rules[name]
        except KeyError:
            raise KeyError(f"Rule '{name}' is not registered") from None

    def has(self, name: str) -> bool:
        """Check if a rule is registered."""
        return isinstance(name, str) and name in self._rules

    def apply(self, name: str, value: Any, param: Any) -> bool:
        """Run a registered rule and coerce its result to a bool."""
        return bool(self.get(name)(value, param))

    def names(self) -> list[str]:
        """List registered rule names in registration order."""
        return list(self._rules)

    def copy(self) -> "RuleRegistry":
        """Create an independent registry with the same rules."""
        return RuleRegistry(self._rules)

    def clear(self) -> None:
        """Clear all registrations. Primarily for testing."""
        with self._lock:
            self._rules = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)
