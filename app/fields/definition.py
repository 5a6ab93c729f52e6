"""
FieldDefinition: immutable description of one field on a content or block type.

Raw mappings (stored JSON rows, code descriptors, API payloads) are parsed
into a FieldDefinition at the boundary with `from_mapping`; nothing deeper in
the pipeline handles raw dicts. Edits go through `replace`, which returns a
new definition.
"""

from __future__ import annotations

import dataclasses
import json
import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from app.exceptions import ValidationError
from app.fields import field_types as field_type_catalog
from app.fields.field_types import FieldType
from app.fields.validation import TRUE_VALUES, validate_field_value
from app.utils.slugify import machine_name as to_machine_name

MACHINE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]{0,62}$")


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


def _to_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _to_dict(value: Any) -> dict[str, Any]:
    if value is None or value == "":
        return {}
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return {}
    return dict(value) if isinstance(value, Mapping) else {}


def _first(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return default


# Older key names accepted by from_mapping, and the persisted key each stands for
FIELD_KEY_ALIASES = {
    "field_type": "type",
    "name": "label",
    "default_value": "default",
    "validation_rules": "validation",
}


def canonical_field_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Rename alias keys to their persisted names; a persisted key present in `raw` wins over its alias."""
    result: dict[str, Any] = {}
    for key, value in raw.items():
        canonical = FIELD_KEY_ALIASES.get(key, key)
        if canonical != key and canonical in raw:
            continue
        result[canonical] = value
    return result


def validate_machine_name(name: str) -> str:
    if not isinstance(name, str) or not MACHINE_NAME_RE.match(name):
        raise ValidationError(
            f"Invalid machine name '{name}': use lowercase letters, digits and underscores, starting with a letter",
            field="machine_name",
        )
    return name


@dataclass(frozen=True)
class FieldDefinition:
    """One field instance. `field_type` keeps the stored id verbatim, even when unknown."""

    machine_name: str
    label: str
    field_type: str = FieldType.STRING.value
    required: bool = False
    multiple: bool = False
    cardinality: int = 1
    default_value: Any = None
    widget: str | None = None
    widget_settings: dict[str, Any] = field(default_factory=dict)
    settings: dict[str, Any] = field(default_factory=dict)
    validation: dict[str, Any] = field(default_factory=dict)
    weight: int = 0
    description: str | None = None
    help_text: str | None = None
    searchable: bool = False
    translatable: bool = False

    def __post_init__(self) -> None:
        validate_machine_name(self.machine_name)
        if isinstance(self.field_type, FieldType):
            object.__setattr__(self, "field_type", self.field_type.value)

    # ── Construction ──────────────────────────────────────────────────

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "FieldDefinition":
        """
        Build a definition from a raw mapping.

        Accepts the persisted keys and the older aliases (`field_type`, `name`,
        `default_value`, `validation_rules`). Missing values fall back to the
        dataclass defaults; a missing machine name is derived from the label.
        """
        if isinstance(raw, FieldDefinition):
            return raw

        label = _first(raw, "label", "name", default=None)
        name = raw.get("machine_name") or to_machine_name(label or "")
        if not name:
            raise ValidationError("Field requires a machine name or label", field="machine_name")
        if not label:
            label = name.replace("_", " ").title()

        field_type = _first(raw, "type", "field_type", default=None) or FieldType.STRING.value
        if isinstance(field_type, FieldType):
            field_type = field_type.value

        multiple = _to_bool(raw.get("multiple", False))
        cardinality = _to_int(raw.get("cardinality"), -1 if multiple else 1)
        if "multiple" not in raw and cardinality != 1:
            multiple = True

        widget = raw.get("widget") or None
        description = raw.get("description") or None
        help_text = raw.get("help_text") or None

        return cls(
            machine_name=name,
            label=str(label),
            field_type=str(field_type),
            required=_to_bool(raw.get("required", False)),
            multiple=multiple,
            cardinality=cardinality,
            default_value=_first(raw, "default", "default_value", default=None),
            widget=widget,
            widget_settings=_to_dict(raw.get("widget_settings")),
            settings=_to_dict(raw.get("settings")),
            validation=_to_dict(_first(raw, "validation", "validation_rules", default=None)),
            weight=_to_int(raw.get("weight"), 0),
            description=description,
            help_text=help_text,
            searchable=_to_bool(raw.get("searchable", False)),
            translatable=_to_bool(raw.get("translatable", False)),
        )

    def to_mapping(self) -> dict[str, Any]:
        """Persisted representation, one entry of a type's JSON `fields` column."""
        return {
            "machine_name": self.machine_name,
            "type": self.field_type,
            "label": self.label,
            "required": self.required,
            "default": self.default_value,
            "widget": self.widget,
            "widget_settings": dict(self.widget_settings),
            "weight": self.weight,
            "settings": dict(self.settings),
            "description": self.description,
            "help_text": self.help_text,
            "multiple": self.multiple,
            "cardinality": self.cardinality,
            "validation": dict(self.validation),
            "searchable": self.searchable,
            "translatable": self.translatable,
        }

    def replace(self, **changes: Any) -> "FieldDefinition":
        return dataclasses.replace(self, **changes)

    # ── Accessors ─────────────────────────────────────────────────────

    @property
    def type_enum(self) -> FieldType | None:
        """The FieldType member, or None for legacy/unknown ids."""
        return field_type_catalog.find(self.field_type)

    @property
    def is_unlimited(self) -> bool:
        return self.cardinality == -1

    def get_setting(self, key: str, default: Any = None) -> Any:
        if key in self.widget_settings:
            return self.widget_settings[key]
        return self.settings.get(key, default)

    def get_int_setting(self, key: str, default: int) -> int:
        """An integer setting; missing or malformed values give `default`."""
        return _to_int(self.get_setting(key), default)

    def effective_widget_settings(self) -> dict[str, Any]:
        """Field settings overlaid with widget settings."""
        return {**self.settings, **self.widget_settings}

    def resolved_widget_id(self) -> str | None:
        """Explicit widget, else the field type's default widget."""
        if self.widget:
            return self.widget
        field_type = self.type_enum
        return field_type.default_widget if field_type else None

    def validate_value(self, value: Any) -> list[str]:
        return validate_field_value(self, value)


def parse_fields(raw_fields: Any) -> list[FieldDefinition]:
    """Parse a stored field list (JSON string, list, or machine_name-keyed mapping)."""
    if raw_fields is None or raw_fields == "":
        return []
    if isinstance(raw_fields, str):
        try:
            raw_fields = json.loads(raw_fields)
        except ValueError:
            return []
    if isinstance(raw_fields, Mapping):
        items = []
        for key, raw in raw_fields.items():
            if isinstance(raw, FieldDefinition):
                items.append(raw)
            else:
                items.append({"machine_name": key, **raw})
        raw_fields = items
    return [FieldDefinition.from_mapping(raw) for raw in raw_fields]
