"""
Field value validation.

Every check appends to a list instead of raising so that a form can show all
problems at once. The only early exit is an empty required value, which gets
the required message and nothing else.
"""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from app.fields.field_types import FieldType

if TYPE_CHECKING:
    from app.fields.definition import FieldDefinition

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_RE = re.compile(r"^(https?|ftp)://[^\s/$.?#][^\s]*$", re.IGNORECASE)
COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")

TRUE_VALUES = {"1", "true", "yes", "on"}

# Field settings that act as validation rules when no rule of the same name is declared
SETTING_RULES = ("min_length", "max_length", "min", "max", "pattern")

# camelCase keys come from rows written by older admin forms
RULE_ALIASES = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "notIn": "not_in",
}


def is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, (list, dict, tuple)) and len(value) == 0)


def to_number(value: Any) -> float | None:
    """The value as a finite float, or None. Booleans, inf and nan are not numbers here."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value if isinstance(value, (int, float)) else str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def is_number(value: Any) -> bool:
    return to_number(value) is not None


def is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    number = to_number(value)
    return number is not None and number.is_integer()


def as_int(value: Any) -> int:
    """Integer form of a value that passed `is_integer`."""
    if isinstance(value, int):
        return value
    return int(Decimal(str(value).strip()))


def _parse_date(value: Any) -> bool:
    if isinstance(value, date):
        return True
    try:
        date.fromisoformat(str(value))
    except ValueError:
        return False
    return True


def _parse_datetime(value: Any) -> bool:
    if isinstance(value, datetime):
        return True
    try:
        datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def _parse_time(value: Any) -> bool:
    return isinstance(value, time) or bool(TIME_RE.match(str(value)))


def normalize_options(options: Any) -> list[tuple[str, str]]:
    """
    (value, label) pairs from an `options` setting. Accepts a list, a mapping,
    a list of {value, label} dicts, a JSON string, or "key|Label" lines.
    """
    if isinstance(options, str):
        try:
            options = json.loads(options)
        except ValueError:
            pairs = []
            for line in options.splitlines():
                if line.strip():
                    key, _, label = line.partition("|")
                    pairs.append((key.strip(), label.strip() or key.strip()))
            return pairs
    if isinstance(options, dict):
        return [(str(key), str(label)) for key, label in options.items()]
    pairs = []
    for option in options or []:
        if isinstance(option, dict):
            key = str(option.get("value", option.get("id", "")))
            pairs.append((key, str(option.get("label", key))))
        else:
            pairs.append((str(option), str(option)))
    return pairs


def option_keys(options: Any) -> list[str]:
    return [key for key, _ in normalize_options(options)]


def check_type(field_type: FieldType | None, value: Any) -> list[str]:
    """Type-compatibility errors for a non-empty value."""
    if field_type in (FieldType.EMAIL,):
        if not EMAIL_RE.match(str(value)):
            return ["Please enter a valid email address"]
    elif field_type in (FieldType.URL,):
        if not URL_RE.match(str(value)):
            return ["Please enter a valid URL"]
    elif field_type in (FieldType.INTEGER,):
        if not is_integer(value):
            return ["Please enter a valid integer"]
    elif field_type in (FieldType.FLOAT, FieldType.DECIMAL):
        if not is_number(value):
            return ["Please enter a valid number"]
    elif field_type == FieldType.DATE:
        if not _parse_date(value):
            return ["Please enter a valid date"]
    elif field_type == FieldType.DATETIME:
        if not _parse_datetime(value):
            return ["Please enter a valid date and time"]
    elif field_type == FieldType.TIME:
        if not _parse_time(value):
            return ["Please enter a valid time"]
    elif field_type == FieldType.COLOR:
        if not COLOR_RE.match(str(value)):
            return ["Please enter a valid hex color"]
    elif field_type == FieldType.SLUG:
        if not SLUG_RE.match(str(value)):
            return ["Only lowercase letters, numbers and hyphens are allowed"]
    elif field_type == FieldType.JSON:
        if isinstance(value, str):
            try:
                json.loads(value)
            except ValueError:
                return ["Please enter valid JSON"]
    return []


def check_options(field: "FieldDefinition", value: Any) -> list[str]:
    options = field.get_setting("options")
    if not options:
        return []
    allowed = option_keys(options)
    values = value if isinstance(value, (list, tuple)) else [value]
    invalid = [str(v) for v in values if str(v) not in allowed]
    if not invalid:
        return []
    if len(values) == 1:
        return [f"Value must be one of: {', '.join(allowed)}"]
    return [f"Invalid options selected: {', '.join(invalid)}"]


def _length_param(param: Any) -> int | None:
    if isinstance(param, bool) or not is_integer(param):
        return None
    length = as_int(param)
    return length if length >= 0 else None


def _pattern_param(rule: str, param: Any) -> re.Pattern | None:
    pattern = str(param)
    # "regex" accepts a delimited pattern ("/^[A-Z]+$/") as stored by older rows
    if rule == "regex" and len(pattern) > 1 and pattern[0] == "/" and pattern.rfind("/") > 0:
        pattern = pattern[1:pattern.rfind("/")]
    try:
        return re.compile(pattern)
    except re.error:
        return None


def rule_param_error(rule: str, param: Any) -> str | None:
    """Why a rule parameter cannot be applied, or None when it is usable. Unknown rules pass."""
    rule = RULE_ALIASES.get(rule, rule)
    if rule in ("min", "max") and to_number(param) is None:
        return f"Rule '{rule}' needs a number, got {param!r}"
    if rule in ("min_length", "max_length") and _length_param(param) is None:
        return f"Rule '{rule}' needs a non-negative integer, got {param!r}"
    if rule in ("pattern", "regex") and _pattern_param(rule, param) is None:
        return f"Rule '{rule}' has an invalid regular expression: {param!r}"
    if rule in ("in", "not_in") and not isinstance(param, (list, tuple)):
        return f"Rule '{rule}' needs a list of values"
    return None


def check_rule_params(field: "FieldDefinition") -> list[str]:
    """Problems with the declared rules and rule-like settings of a field."""
    problems = [rule_param_error(rule, param) for rule, param in field.validation.items()]
    for key in SETTING_RULES:
        param = field.settings.get(key)
        if param not in (None, ""):
            problems.append(rule_param_error(key, param))
    return [problem for problem in problems if problem]


def apply_rule(rule: str, param: Any, value: Any) -> list[str]:
    """Apply one declared validation rule; unknown rules and unusable parameters are ignored."""
    rule = RULE_ALIASES.get(rule, rule)
    if rule_param_error(rule, param):
        logger.warning("Skipping validation rule '%s' with unusable parameter %r", rule, param)
        return []

    if rule == "min":
        number = to_number(value)
        if number is not None and number < to_number(param):
            return [f"Value must be at least {param}"]
    elif rule == "max":
        number = to_number(value)
        if number is not None and number > to_number(param):
            return [f"Value must be at most {param}"]
    elif rule == "min_length":
        if isinstance(value, str) and len(value) < _length_param(param):
            return [f"Minimum length is {param} characters"]
    elif rule == "max_length":
        if isinstance(value, str) and len(value) > _length_param(param):
            return [f"Maximum length is {param} characters"]
    elif rule == "pattern":
        if isinstance(value, str) and not _pattern_param(rule, param).search(value):
            return ["Value does not match the required pattern"]
    elif rule == "regex":
        if isinstance(value, str) and not _pattern_param(rule, param).search(value):
            return ["Value does not match the required format"]
    elif rule == "in":
        if value not in param and str(value) not in [str(p) for p in param]:
            return [f"Value must be one of: {', '.join(str(p) for p in param)}"]
    elif rule == "not_in":
        if value in param or str(value) in [str(p) for p in param]:
            return ["Value is not allowed"]
    return []


def validate_field_value(field: "FieldDefinition", value: Any) -> list[str]:
    """Collect every field-level error for a value."""
    if is_empty(value):
        if field.required:
            return [f"{field.label} is required"]
        return []

    errors: list[str] = []
    field_type = field.type_enum

    if field_type is None:
        errors.append(f"Unknown field type '{field.field_type}'")
    else:
        errors.extend(check_type(field_type, value))

    if field_type in (FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX, FieldType.MULTISELECT):
        errors.extend(check_options(field, value))

    for rule, param in field.validation.items():
        errors.extend(apply_rule(rule, param, value))

    declared = {RULE_ALIASES.get(rule, rule) for rule in field.validation}
    for key in SETTING_RULES:
        param = field.settings.get(key)
        if param not in (None, "") and key not in declared:
            errors.extend(apply_rule(key, param, value))

    return errors
