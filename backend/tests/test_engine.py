"""Tests for the validation engine."""

import pytest

from formguard import (
    CrossFieldError,
    InvalidPatternError,
    SchemaLoadError,
    Validator,
    ValidatorConfig,
    create_registry,
    default_registry,
    register_rule,
)
from formguard.engine import FORM_ERRORS_KEY
from formguard.field import FieldValidator


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment configuration out of the tests."""
    monkeypatch.delenv("FORMGUARD_DEFAULT_LOCALE", raising=False)
    monkeypatch.delenv("FORMGUARD_STRICT_SCHEMA", raising=False)


@pytest.fixture
def restore_default_registry():
    """Undo process-wide rule registrations made by a test."""
    saved = default_registry.copy()
    yield
    default_registry.clear()
    for name in saved:
        default_registry.register(name, saved.get(name))


def date_range_schema():
    return {
        "fields": {
            "startDate": {"type": "date"},
            "endDate": {"type": "date"},
        },
        "crossFieldValidations": [
            {
                "rule": "startDate <= endDate",
                "fields": ["startDate", "endDate"],
                "target": "endDate",
                "message": {
                    "endDate": {"en": "End ${endDate} is before start ${startDate}"},
                },
            }
        ],
    }


# =============================================================================
# Field validation
# =============================================================================


class TestFieldRules:
    def test_japanese_min_length_scenario(self):
        schema = {
            "fields": {
                "username": {
                    "required": True,
                    "minLength": 3,
                    "messages": {
                        "required": {"ja": "ユーザー名は必須です"},
                        "minLength": {"ja": "${minLength}文字以上で入力してください"},
                    },
                }
            }
        }

        result = Validator(schema).validate({"username": "あ"}, "ja")

        assert result.valid is False
        assert result.errors == {"username": ["3文字以上で入力してください"]}

    def test_valid_record(self):
        schema = {"fields": {"username": {"required": True, "minLength": 3}}}
        result = Validator(schema).validate({"username": "alice"})

        assert result.valid is True
        assert result.errors == {}
        assert result.cross_errors == []

    def test_failures_accumulate_without_short_circuit(self):
        schema = {"fields": {"username": {"required": True, "minLength": 3}}}
        result = Validator(schema).validate({})

        assert result.errors["username"] == [
            "[required] validation failed",
            "[minLength] validation failed",
        ]

    def test_rules_run_in_declaration_order(self):
        forward = {"fields": {"code": {"pattern": "[a-z]+", "minLength": 5}}}
        backward = {"fields": {"code": {"minLength": 5, "pattern": "[a-z]+"}}}

        assert Validator(forward).validate({"code": "AB"}).errors["code"] == [
            "[pattern] validation failed",
            "[minLength] validation failed",
        ]
        assert Validator(backward).validate({"code": "AB"}).errors["code"] == [
            "[minLength] validation failed",
            "[pattern] validation failed",
        ]

    def test_required_false_still_requires_a_value(self):
        schema = {"fields": {"x": {"required": False}}}
        assert Validator(schema).validate({"x": ""}).errors == {"x": ["[required] validation failed"]}

    def test_unknown_config_keys_are_ignored(self):
        schema = {"fields": {"nickname": {"placeholder": "Your nickname", "label": "Nick"}}}
        assert Validator(schema).validate({"nickname": "x"}).valid is True

    def test_messages_use_field_config_and_value(self):
        schema = {
            "fields": {
                "age": {
                    "type": "number",
                    "max": 120,
                    "messages": {"max": {"en": "${value} is more than ${max}"}},
                }
            }
        }
        result = Validator(schema).validate({"age": "130"})

        assert result.errors == {"age": ["130 is more than 120"]}

    def test_fields_without_config_are_not_validated(self):
        schema = {"fields": {"anything": None}}
        assert Validator(schema).validate({"anything": 1}).valid is True

    def test_record_keys_outside_schema_are_ignored(self):
        schema = {"fields": {"name": {"required": True}}}
        assert Validator(schema).validate({"name": "x", "extra": ""}).valid is True


class TestTypeConversion:
    @pytest.mark.parametrize("raw", ["abc", "", None, "NaN"])
    def test_non_numeric_number_reports_one_error(self, raw):
        schema = {
            "fields": {
                "age": {
                    "type": "number",
                    "required": True,
                    "min": 0,
                    "enum": [1, 2],
                    "messages": {"type": {"en": "Age must be a number"}},
                }
            }
        }
        result = Validator(schema).validate({"age": raw})

        assert result.errors == {"age": ["Age must be a number"]}

    def test_type_failure_only_affects_that_field(self):
        schema = {
            "fields": {
                "age": {"type": "number"},
                "name": {"required": True},
            }
        }
        result = Validator(schema).validate({"age": "x"})

        assert result.errors == {
            "age": ["[type] validation failed"],
            "name": ["[required] validation failed"],
        }

    def test_boolean_field(self):
        schema = {"fields": {"agree": {"type": "boolean", "enum": [True]}}}
        validator = Validator(schema)

        assert validator.validate({"agree": "on"}).valid is True
        assert validator.validate({"agree": "off"}).errors == {"agree": ["[enum] validation failed"]}
        assert validator.validate({"agree": "maybe"}).errors == {"agree": ["[type] validation failed"]}

    def test_date_bounds(self):
        schema = {
            "fields": {
                "visit": {
                    "type": "date",
                    "min": "2025-01-01",
                    "messages": {"min": {"default": "Visit must be on or after ${min}"}},
                }
            }
        }
        validator = Validator(schema)

        assert validator.validate({"visit": "2025/03/01"}).valid is True
        assert validator.validate({"visit": "2024-12-31"}).errors == {
            "visit": ["Visit must be on or after 2025-01-01"]
        }

    def test_integer_beyond_float_range(self):
        schema = {"fields": {"n": {"type": "number", "max": 100}}}
        result = Validator(schema).validate({"n": 10**400})

        assert result.errors == {"n": ["[max] validation failed"]}

    def test_number_enum_matches_converted_value(self):
        schema = {"fields": {"size": {"type": "number", "enum": [1, 2, 3]}}}
        assert Validator(schema).validate({"size": "2"}).valid is True

    def test_unknown_type_passes_raw_value(self):
        schema = {"fields": {"tags": {"type": "list", "minLength": 1}}}
        result = Validator(schema).validate({"tags": ["a"]})

        assert result.errors == {"tags": ["[minLength] validation failed"]}


class TestFieldValidator:
    def test_validate_returns_messages(self):
        validator = FieldValidator(
            name="email",
            config={"required": True, "messages": {"default": {"en": "Bad email"}}},
            registry=create_registry(),
        )

        assert validator.validate(None, "en") == ["Bad email"]
        assert validator.validate("a@b.c", "en") == []


# =============================================================================
# Cross-field validation
# =============================================================================


class TestCrossFieldRules:
    def test_date_range_failure(self):
        record = {"startDate": "2025/01/01", "endDate": "2024/12/31"}
        result = Validator(date_range_schema()).validate(record)

        message = "End 2024/12/31 is before start 2025/01/01"
        assert result.valid is False
        assert result.cross_errors == [
            CrossFieldError(fields=("startDate", "endDate"), target="endDate", message=message)
        ]
        assert result.errors == {"endDate": [message]}

    def test_date_range_pass(self):
        record = {"startDate": "2024/12/31", "endDate": "2025/01/01"}
        result = Validator(date_range_schema()).validate(record)

        assert result.valid is True
        assert result.cross_errors == []

    def test_cross_errors_follow_field_errors(self):
        schema = date_range_schema()
        schema["fields"]["endDate"]["required"] = True
        schema["fields"]["endDate"]["type"] = "string"

        result = Validator(schema).validate({"startDate": "2025/01/01", "endDate": ""})

        assert result.errors["endDate"] == [
            "[required] validation failed",
            "End  is before start 2025/01/01",
        ]

    def test_target_defaults_to_first_field(self):
        schema = {
            "crossFieldValidations": [
                {
                    "rule": "password == confirm",
                    "fields": ["confirm", "password"],
                    "message": {"default": {"en": "Passwords differ"}},
                }
            ]
        }
        result = Validator(schema).validate({"password": "a", "confirm": "b"})

        assert result.errors == {"confirm": ["Passwords differ"]}
        assert result.cross_errors[0].target == "confirm"

    def test_missing_field_counts_as_failure(self):
        result = Validator(date_range_schema()).validate({"startDate": "2025/01/01"})
        assert result.cross_errors[0].target == "endDate"

    def test_malformed_expression_counts_as_failure(self):
        schema = {"crossFieldValidations": [{"rule": "a <= ", "fields": ["a"]}]}
        result = Validator(schema).validate({"a": 1})

        assert result.errors == {"a": ["[a] validation failed"]}

    def test_type_mismatch_counts_as_failure(self):
        schema = {
            "crossFieldValidations": [
                {"rule": "low < high", "fields": ["low", "high"], "message": {"default": {"default": "bad"}}}
            ]
        }
        result = Validator(schema).validate({"low": 1, "high": "2"})

        assert result.errors == {"low": ["bad"]}

    def test_rule_without_fields_or_target(self):
        schema = {"crossFieldValidations": [{"rule": "false"}]}
        result = Validator(schema).validate({})

        assert result.errors == {FORM_ERRORS_KEY: [f"[{FORM_ERRORS_KEY}] validation failed"]}
        assert result.cross_errors[0].fields == ()

    def test_locale_specific_message(self):
        schema = date_range_schema()
        schema["crossFieldValidations"][0]["message"]["endDate"]["ja"] = "終了日は開始日以降にしてください"
        record = {"startDate": "2025/01/01", "endDate": "2024/12/31"}

        result = Validator(schema).validate(record, "ja")
        assert result.errors["endDate"] == ["終了日は開始日以降にしてください"]

    def test_to_dict(self):
        record = {"startDate": "2025/01/01", "endDate": "2024/12/31"}
        data = Validator(date_range_schema()).validate(record).to_dict()

        assert data == {
            "valid": False,
            "errors": {"endDate": ["End 2024/12/31 is before start 2025/01/01"]},
            "crossErrors": [
                {
                    "type": "crossField",
                    "fields": ["startDate", "endDate"],
                    "target": "endDate",
                    "message": "End 2024/12/31 is before start 2025/01/01",
                }
            ],
        }


# =============================================================================
# Engine lifecycle
# =============================================================================


class TestValidatorLifecycle:
    def test_validate_is_idempotent(self):
        validator = Validator(date_range_schema())
        record = {"startDate": "2025/01/01", "endDate": "2024/12/31"}

        first = validator.validate(record)
        second = validator.validate(record)

        assert first.to_dict() == second.to_dict()
        assert len(second.errors["endDate"]) == 1
        assert first is not second
        assert first.errors is not second.errors

    def test_schema_changes_are_seen_by_later_calls(self):
        schema = {"fields": {}}
        validator = Validator(schema)
        assert validator.validate({}).valid is True

        schema["fields"]["name"] = {"required": True}
        assert validator.validate({}).valid is False

    def test_malformed_pattern_fails_construction(self):
        with pytest.raises(InvalidPatternError):
            Validator({"fields": {"code": {"pattern": "[a-"}}})

    def test_custom_pattern_rule_skips_regex_check(self):
        registry = create_registry()
        registry.register("pattern", lambda value, param: value == param)

        validator = Validator({"fields": {"code": {"pattern": "[a-"}}}, registry=registry)
        assert validator.validate({"code": "[a-"}).valid is True

    def test_default_locale_from_config(self):
        schema = {"fields": {"name": {"required": True, "messages": {"required": {"ja": "必須"}}}}}
        validator = Validator(schema, config=ValidatorConfig(default_locale="ja"))

        assert validator.validate({}).errors == {"name": ["必須"]}

    def test_default_locale_from_env(self, monkeypatch):
        monkeypatch.setenv("FORMGUARD_DEFAULT_LOCALE", "ja")
        schema = {"fields": {"name": {"required": True, "messages": {"required": {"ja": "必須"}}}}}

        assert Validator(schema).validate({}).errors == {"name": ["必須"]}

    def test_strict_schema_rejects_bad_expression(self):
        schema = {"crossFieldValidations": [{"rule": "a <=", "fields": ["a"]}]}

        with pytest.raises(SchemaLoadError):
            Validator(schema, config=ValidatorConfig(strict_schema=True))

    def test_strict_schema_allows_warnings(self):
        schema = {"fields": {"name": {"label": "Name"}}}
        validator = Validator(schema, config=ValidatorConfig(strict_schema=True))

        assert validator.validate({}).valid is True


class TestCustomRules:
    def test_isolated_registry(self):
        registry = create_registry()
        registry.register("even", lambda value, param: value % 2 == 0)
        schema = {"fields": {"count": {"type": "number", "even": True}}}

        validator = Validator(schema, registry=registry)

        assert validator.validate({"count": "4"}).valid is True
        assert validator.validate({"count": "3"}).errors == {"count": ["[even] validation failed"]}
        assert not default_registry.has("even")

    def test_register_rule_is_process_wide(self, restore_default_registry):
        register_rule("startsWith", lambda value, prefix: value.startswith(prefix))
        schema = {"fields": {"sku": {"startsWith": "SKU-"}}}

        assert Validator(schema).validate({"sku": "SKU-1"}).valid is True
        assert Validator(schema).validate({"sku": "X-1"}).valid is False

    def test_classmethod_registration(self, restore_default_registry):
        Validator.register_rule("never", lambda value, param: False)
        schema = {"fields": {"x": {"never": True}}}

        assert Validator(schema).validate({"x": "1"}).errors == {"x": ["[never] validation failed"]}

    def test_registration_after_construction_is_visible(self, restore_default_registry):
        schema = {"fields": {"x": {"later": True}}}
        validator = Validator(schema)
        assert validator.validate({"x": "1"}).valid is True

        register_rule("later", lambda value, param: False)
        assert validator.validate({"x": "1"}).valid is False
