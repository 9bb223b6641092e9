"""Core types for formguard validation results."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CrossFieldError:
    """A failed cross-field rule.

    Attributes:
        fields: Field names the rule declared
        target: Field the error is attached to
        message: Resolved, interpolated message
    """

    fields: tuple[str, ...]
    target: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "crossField",
            "fields": list(self.fields),
            "target": self.target,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    """Result of validating a record.

    Attributes:
        errors: Messages per field, in the order rules failed
        cross_errors: Failed cross-field rules, in declaration order
    """

    errors: dict[str, list[str]] = field(default_factory=dict)
    cross_errors: list[CrossFieldError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True when no field has an error."""
        return not self.errors

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)

    def add_cross_error(self, error: CrossFieldError) -> None:
        """Record a cross-field failure, also against its target field."""
        self.cross_errors.append(error)
        self.add_error(error.target, error.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": {name: list(messages) for name, messages in self.errors.items()},
            "crossErrors": [e.to_dict() for e in self.cross_errors],
        }
