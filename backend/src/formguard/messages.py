"""Locale-aware error messages.

Messages are declared per rule and per locale:

    messages:
      minLength:
        en: "At least ${minLength} characters"
        ja: "${minLength}文字以上で入力してください"
      default:
        default: "Invalid value"

Lookup order for a failed rule, first hit wins:
1. messages[rule][locale]
2. messages[rule]["default"]
3. messages["default"][locale]
4. messages["default"]["default"]

If none is present a "[rule] validation failed" message is synthesized.
"""

import re
from typing import Any, Mapping

from formguard.conversion import stringify

DEFAULT_KEY = "default"


def fallback_message(rule_name: str) -> str:
    return f"[{rule_name}] validation failed"


def lookup_template(
    messages: Mapping[str, Any] | None,
    rule_name: str,
    locale: str,
) -> tuple[bool, str]:
    """Find the most specific template for a rule and locale.

    Returns:
        (found, template); template is "" when nothing was found
    """
    if not isinstance(messages, Mapping):
        return False, ""

    candidates = (
        (rule_name, locale),
        (rule_name, DEFAULT_KEY),
        (DEFAULT_KEY, locale),
        (DEFAULT_KEY, DEFAULT_KEY),
    )
    for message_key, locale_key in candidates:
        by_locale = messages.get(message_key)
        if not isinstance(by_locale, Mapping):
            continue
        template = by_locale.get(locale_key)
        if isinstance(template, str) and template:
            return True, template

    return False, ""


class MessageResolver:
    """Resolves and interpolates messages for failed rules.

    Supports ${identifier} placeholders, replaced by the stringified context
    value. Unknown identifiers render as an empty string, and any
    placeholder still present after substitution is removed.
    """

    PATTERN = re.compile(r"\$\{(?P<name>[^{}]*)\}")

    def interpolate(self, template: str, context: Mapping[str, Any] | None) -> str:
        """Replace ${identifier} placeholders with context values."""
        context = context or {}

        def replace(match: re.Match) -> str:
            return stringify(context.get(match.group("name").strip()))

        message = self.PATTERN.sub(replace, template)

        # Nested placeholders such as ${${a}} leave one behind; drop it
        while self.PATTERN.search(message):
            message = self.PATTERN.sub("", message)
        return message

    def resolve(
        self,
        messages: Mapping[str, Any] | None,
        rule_name: str,
        locale: str,
        context: Mapping[str, Any] | None = None,
    ) -> str:
        """Resolve the message for a failed rule.

        Never returns an empty string.
        """
        found, template = lookup_template(messages, rule_name, locale)
        if not found:
            return fallback_message(rule_name)

        message = self.interpolate(template, context)
        return message or fallback_message(rule_name)


resolver = MessageResolver()


def resolve_message(
    messages: Mapping[str, Any] | None,
    rule_name: str,
    locale: str,
    context: Mapping[str, Any] | None = None,
) -> str:
    """Convenience wrapper around the shared MessageResolver."""
    return resolver.resolve(messages, rule_name, locale, context)
