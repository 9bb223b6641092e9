"""Field-level validation.

A field is converted to its declared type, then every config key that names
a registered rule is applied in the order the keys were declared. A failed
conversion reports a single "type" error and skips the rules.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from formguard.conversion import CONVERSION_FAILED, DEFAULT_TYPE, convert
from formguard.messages import MessageResolver, resolver
from formguard.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)

TYPE_RULE = "type"


@dataclass
class FieldValidator:
    """Validates a single field against its config."""

    name: str
    config: Mapping[str, Any]
    registry: RuleRegistry
    message_resolver: MessageResolver = field(default=resolver)

    def validate(self, raw_value: Any, locale: str) -> list[str]:
        """Validate one raw value and return its error messages."""
        value = convert(raw_value, self.config.get("type") or DEFAULT_TYPE)
        messages = self.config.get("messages") or {}
        context = {**self.config, "value": value}

        if value is CONVERSION_FAILED:
            logger.debug("Field '%s' failed type conversion", self.name)
            return [self.message_resolver.resolve(messages, TYPE_RULE, locale, context)]

        errors: list[str] = []
        for rule_name, param in self.config.items():
            if not self.registry.has(rule_name):
                continue

            if not self.registry.apply(rule_name, value, param):
                logger.debug("Field '%s' failed rule '%s'", self.name, rule_name)
                errors.append(
                    self.message_resolver.resolve(messages, rule_name, locale, context)
                )

        return errors
