"""
Tests for field-level value validation
"""

import pytest

from app.fields.definition import FieldDefinition
from app.fields.validation import (
    apply_rule,
    as_int,
    check_rule_params,
    is_empty,
    is_integer,
    is_number,
    normalize_options,
    rule_param_error,
    to_number,
)


def make_field(**overrides):
    data = {"machine_name": "value", "label": "Value"}
    data.update(overrides)
    return FieldDefinition.from_mapping(data)


class TestRequired:
    """Test the required check"""

    @pytest.mark.parametrize("empty", [None, "", [], {}])
    def test_empty_required_value(self, empty):
        field = make_field(label="Title", required=True, validation={"min_length": 3})
        assert field.validate_value(empty) == ["Title is required"]

    def test_empty_optional_value(self):
        assert make_field(validation={"min_length": 3}).validate_value("") == []


class TestTypeChecks:
    """Test type compatibility messages"""

    @pytest.mark.parametrize(
        "field_type,value,message",
        [
            ("email", "not-an-email", "Please enter a valid email address"),
            ("url", "example", "Please enter a valid URL"),
            ("integer", "12.5", "Please enter a valid integer"),
            ("float", "abc", "Please enter a valid number"),
            ("date", "2024-13-40", "Please enter a valid date"),
            ("time", "25:00", "Please enter a valid time"),
            ("color", "red", "Please enter a valid hex color"),
            ("slug", "Not A Slug", "Only lowercase letters, numbers and hyphens are allowed"),
            ("json", "{broken", "Please enter valid JSON"),
        ],
    )
    def test_invalid_values(self, field_type, value, message):
        assert make_field(type=field_type).validate_value(value) == [message]

    @pytest.mark.parametrize(
        "field_type,value",
        [
            ("email", "editor@example.com"),
            ("url", "https://example.com/page"),
            ("integer", "42"),
            ("integer", 7),
            ("float", "3.14"),
            ("date", "2024-02-29"),
            ("datetime", "2024-02-29T10:00:00Z"),
            ("color", "#ff8800"),
            ("slug", "hello-world"),
            ("json", '{"ok": true}'),
        ],
    )
    def test_valid_values(self, field_type, value):
        assert make_field(type=field_type).validate_value(value) == []

    def test_unknown_type(self):
        assert make_field(type="hologram").validate_value("x") == ["Unknown field type 'hologram'"]


class TestRules:
    """Test declared validation rules"""

    def test_length_rules(self):
        field = make_field(validation={"min_length": 3, "max_length": 5})
        assert field.validate_value("ab") == ["Minimum length is 3 characters"]
        assert field.validate_value("abcdef") == ["Maximum length is 5 characters"]
        assert field.validate_value("abcd") == []

    def test_camel_case_aliases(self):
        field = make_field(validation={"maxLength": 2})
        assert field.validate_value("abc") == ["Maximum length is 2 characters"]

    def test_settings_limits_apply_once(self):
        field = make_field(settings={"max_length": 2}, validation={"max_length": 2})
        assert field.validate_value("abc") == ["Maximum length is 2 characters"]

    def test_all_errors_collected(self):
        field = make_field(type="integer", validation={"min": 10, "in": [20, 30]})
        assert field.validate_value("5") == ["Value must be at least 10", "Value must be one of: 20, 30"]

    def test_regex_with_delimiters(self):
        assert apply_rule("regex", "/^[A-Z]+$/", "abc") == ["Value does not match the required format"]
        assert apply_rule("regex", "/^[A-Z]+$/", "ABC") == []

    def test_unknown_rule_ignored(self):
        assert apply_rule("sparkles", True, "x") == []


class TestOptions:
    """Test option-based fields"""

    def test_select_outside_options(self):
        field = make_field(type="select", settings={"options": {"draft": "Draft", "live": "Live"}})
        assert field.validate_value("archived") == ["Value must be one of: draft, live"]
        assert field.validate_value("live") == []

    def test_multiselect_reports_invalid_items(self):
        field = make_field(type="multiselect", settings={"options": ["a", "b"]})
        assert field.validate_value(["a", "x", "y"]) == ["Invalid options selected: x, y"]

    def test_normalize_option_formats(self):
        assert normalize_options("a|Apple\nb") == [("a", "Apple"), ("b", "b")]
        assert normalize_options([{"value": 1, "label": "One"}]) == [("1", "One")]
        assert normalize_options('{"x": "Ex"}') == [("x", "Ex")]


class TestHelpers:
    """Test value predicates"""

    def test_is_empty(self):
        assert is_empty(None)
        assert is_empty([])
        assert not is_empty(0)
        assert not is_empty(False)

    def test_numbers(self):
        assert is_number("1.5")
        assert not is_number(True)
        assert is_integer("3.0")
        assert not is_integer("3.5")

    @pytest.mark.parametrize("value", ["inf", "-inf", "nan", "Infinity", "1e999", float("inf"), float("nan")])
    def test_non_finite_numbers_rejected(self, value):
        assert not is_number(value)
        assert not is_integer(value)
        assert to_number(value) is None

    def test_as_int_keeps_precision(self):
        assert as_int("3.0") == 3
        assert as_int("12345678901234567890") == 12345678901234567890

    @pytest.mark.parametrize("field_type", ["integer", "float", "decimal"])
    def test_non_finite_value_reports_error(self, field_type):
        errors = make_field(type=field_type, validation={"min": 0}).validate_value("inf")
        assert errors and errors[0].startswith("Please enter a valid")


class TestRuleParams:
    """Test validation rules with unusable parameters"""

    @pytest.mark.parametrize(
        "rule,param",
        [("min", "abc"), ("max", None), ("max_length", "ten"), ("min_length", -1), ("pattern", "("), ("in", "a")],
    )
    def test_unusable_param_skipped(self, rule, param):
        assert apply_rule(rule, param, "value") == []

    def test_validate_value_survives_bad_rules(self):
        field = make_field(validation={"pattern": "(", "max_length": "ten", "min_length": 2})
        assert field.validate_value("a") == ["Minimum length is 2 characters"]

    def test_rule_param_error_messages(self):
        assert rule_param_error("min", "abc") == "Rule 'min' needs a number, got 'abc'"
        assert rule_param_error("maxLength", "ten") == "Rule 'max_length' needs a non-negative integer, got 'ten'"
        assert rule_param_error("regex", "/(/") == "Rule 'regex' has an invalid regular expression: '/(/'"
        assert rule_param_error("not_in", 3) == "Rule 'not_in' needs a list of values"
        assert rule_param_error("min", "5") is None
        assert rule_param_error("sparkles", object()) is None

    def test_check_rule_params_includes_settings(self):
        field = make_field(validation={"pattern": "["}, settings={"max_length": "long", "placeholder": "x"})
        assert check_rule_params(field) == [
            "Rule 'pattern' has an invalid regular expression: '['",
            "Rule 'max_length' needs a non-negative integer, got 'long'",
        ]
        assert check_rule_params(make_field(validation={"min": 1, "pattern": "^a"})) == []
