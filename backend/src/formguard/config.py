"""Validator configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class ValidatorConfig:
    """Process-level defaults for validators.

    Attributes:
        default_locale: Locale used when validate() is called without one
        strict_schema: Run the schema check when a Validator is constructed
    """

    default_locale: str = "en"
    strict_schema: bool = False

    @classmethod
    def from_env(cls) -> ValidatorConfig:
        """Create config from environment variables.

        - FORMGUARD_DEFAULT_LOCALE: default locale (default: "en")
        - FORMGUARD_STRICT_SCHEMA: 1/true/yes/on enables the schema check
        """
        locale = os.environ.get("FORMGUARD_DEFAULT_LOCALE", "").strip() or "en"
        strict = os.environ.get("FORMGUARD_STRICT_SCHEMA", "").strip().lower() in _TRUTHY
        return cls(default_locale=locale, strict_schema=strict)
