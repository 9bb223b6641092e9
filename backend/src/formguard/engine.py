"""Validation engine.

Binds to one schema and validates records against it:

    schema = {
        "fields": {
            "username": {"required": True, "minLength": 3},
            "startDate": {"type": "date"},
            "endDate": {"type": "date"},
        },
        "crossFieldValidations": [
            {
                "rule": "startDate <= endDate",
                "fields": ["startDate", "endDate"],
                "target": "endDate",
                "message": {"default": {"en": "End date must follow start date"}},
            }
        ],
    }

    result = Validator(schema).validate(record, locale="en")

The schema is referenced, not copied: later edits are seen by later calls.
"""

import logging
from typing import Any, Mapping

from formguard.config import ValidatorConfig
from formguard.expressions import evaluate_rule
from formguard.field import FieldValidator
from formguard.messages import MessageResolver, resolver
from formguard.rules import compile_pattern, default_registry
from formguard.rules.builtins import pattern as pattern_rule
from formguard.rules.registry import RulePredicate, RuleRegistry
from formguard.types import CrossFieldError, ValidationResult

logger = logging.getLogger(__name__)

# Errors of a cross-field rule that names neither a target nor any field
FORM_ERRORS_KEY = "_form"


class Validator:
    """Validates records against a schema.

    Attributes:
        schema: The bound schema mapping
        registry: Rule registry; the process-wide one unless given
        config: Locale and strictness defaults
    """

    def __init__(
        self,
        schema: Mapping[str, Any],
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
        message_resolver: MessageResolver | None = None,
    ):
        self.schema = schema
        self.registry = registry if registry is not None else default_registry
        self.config = config or ValidatorConfig.from_env()
        self.message_resolver = message_resolver or resolver

        self._check_patterns()
        if self.config.strict_schema:
            self._check_schema()

    @classmethod
    def register_rule(cls, name: str, predicate: RulePredicate) -> None:
        """Install or replace a rule in the process-wide registry."""
        default_registry.register(name, predicate)

    def validate(
        self,
        record: Mapping[str, Any] | None,
        locale: str | None = None,
    ) -> ValidationResult:
        """Validate a record.

        Args:
            record: Field name to raw value
            locale: Message locale (defaults to the configured locale)

        Returns:
            A new ValidationResult
        """
        record = record or {}
        locale = locale or self.config.default_locale
        result = ValidationResult()

        for name, field_config in self._fields().items():
            if not isinstance(field_config, Mapping):
                field_config = {}

            field_validator = FieldValidator(
                name=name,
                config=field_config,
                registry=self.registry,
                message_resolver=self.message_resolver,
            )
            for message in field_validator.validate(record.get(name), locale):
                result.add_error(name, message)

        for rule in self._cross_field_rules():
            error = self._check_cross_field_rule(rule, record, locale)
            if error is not None:
                result.add_cross_error(error)

        logger.debug(
            "Validated record: %d field(s) with errors, %d cross-field error(s)",
            len(result.errors),
            len(result.cross_errors),
        )
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _fields(self) -> Mapping[str, Any]:
        fields = self.schema.get("fields")
        return fields if isinstance(fields, Mapping) else {}

    def _cross_field_rules(self) -> list[Mapping[str, Any]]:
        rules = self.schema.get("crossFieldValidations") or []
        return [rule for rule in rules if isinstance(rule, Mapping)]

    def _check_cross_field_rule(
        self,
        rule: Mapping[str, Any],
        record: Mapping[str, Any],
        locale: str,
    ) -> CrossFieldError | None:
        if evaluate_rule(rule.get("rule"), record):
            return None

        fields = tuple(rule.get("fields") or ())
        target = rule.get("target") or (fields[0] if fields else FORM_ERRORS_KEY)
        message = self.message_resolver.resolve(
            rule.get("message"), target, locale, record
        )
        logger.debug("Cross-field rule %r failed for '%s'", rule.get("rule"), target)
        return CrossFieldError(fields=fields, target=target, message=message)

    def _check_patterns(self) -> None:
        """Compile every pattern parameter so bad regexes fail here."""
        if not self.registry.has("pattern") or self.registry.get("pattern") is not pattern_rule:
            return
        for field_config in self._fields().values():
            if isinstance(field_config, Mapping) and "pattern" in field_config:
                compile_pattern(field_config["pattern"])

    def _check_schema(self) -> None:
        from formguard.schemas.checker import check_schema
        from formguard.schemas.loader import SchemaLoadError

        issues = check_schema(self.schema, registry=self.registry)
        errors = [issue for issue in issues if issue.severity == "error"]
        for issue in issues:
            logger.warning("Schema issue: %s", issue)
        if errors:
            raise SchemaLoadError(
                f"Schema has {len(errors)} error(s): " + "; ".join(str(e) for e in errors)
            )
