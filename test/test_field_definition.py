"""
Tests for FieldDefinition parsing and persistence
"""

import pytest

from app.exceptions import ValidationError
from app.fields.definition import FieldDefinition, canonical_field_keys, parse_fields, validate_machine_name
from app.fields.field_types import FieldType


class TestFromMapping:
    """Test building definitions from raw mappings"""

    def test_defaults(self):
        field = FieldDefinition.from_mapping({"machine_name": "title", "label": "Title"})
        assert field.field_type == "string"
        assert field.required is False
        assert field.multiple is False
        assert field.cardinality == 1
        assert field.weight == 0
        assert field.widget is None
        assert field.settings == {}

    def test_older_aliases(self):
        field = FieldDefinition.from_mapping(
            {
                "machine_name": "price",
                "name": "Price",
                "field_type": "decimal",
                "default_value": "0.00",
                "validation_rules": {"min": 0},
            }
        )
        assert field.label == "Price"
        assert field.field_type == "decimal"
        assert field.default_value == "0.00"
        assert field.validation == {"min": 0}

    def test_machine_name_derived_from_label(self):
        field = FieldDefinition.from_mapping({"label": "Hero Image"})
        assert field.machine_name == "hero_image"

    def test_label_derived_from_machine_name(self):
        field = FieldDefinition.from_mapping({"machine_name": "meta_title"})
        assert field.label == "Meta Title"

    def test_missing_name_and_label_rejected(self):
        with pytest.raises(ValidationError):
            FieldDefinition.from_mapping({"type": "string"})

    def test_string_flags_and_json_settings(self):
        field = FieldDefinition.from_mapping(
            {
                "machine_name": "tags",
                "required": "yes",
                "multiple": "true",
                "settings": '{"vocabulary": "tags"}',
            }
        )
        assert field.required is True
        assert field.multiple is True
        assert field.cardinality == -1
        assert field.is_unlimited
        assert field.settings == {"vocabulary": "tags"}

    def test_cardinality_implies_multiple(self):
        field = FieldDefinition.from_mapping({"machine_name": "images", "cardinality": 3})
        assert field.multiple is True
        assert field.cardinality == 3

    def test_unknown_type_kept_verbatim(self):
        field = FieldDefinition.from_mapping({"machine_name": "legacy", "type": "hologram"})
        assert field.field_type == "hologram"
        assert field.type_enum is None
        assert field.resolved_widget_id() is None

    def test_enum_type_normalized(self):
        field = FieldDefinition(machine_name="body", label="Body", field_type=FieldType.HTML)
        assert field.field_type == "html"
        assert field.type_enum is FieldType.HTML


class TestMachineNames:
    """Test machine name rules"""

    @pytest.mark.parametrize("name", ["title", "field_1", "a"])
    def test_valid(self, name):
        assert validate_machine_name(name) == name

    @pytest.mark.parametrize("name", ["Title", "1field", "with-dash", "", "_hidden"])
    def test_invalid(self, name):
        with pytest.raises(ValidationError):
            validate_machine_name(name)


class TestPersistence:
    """Test to_mapping and parse_fields"""

    def test_to_mapping_is_parseable(self):
        field = FieldDefinition.from_mapping(
            {
                "machine_name": "question",
                "label": "Question",
                "required": True,
                "widget": "textarea",
                "weight": 4,
                "help_text": "Ask something",
            }
        )
        stored = field.to_mapping()
        assert stored["type"] == "string"
        assert stored["widget"] == "textarea"
        assert FieldDefinition.from_mapping(stored) == field

    def test_parse_fields_from_json_string(self):
        fields = parse_fields('[{"machine_name": "a"}, {"machine_name": "b", "type": "integer"}]')
        assert [f.machine_name for f in fields] == ["a", "b"]
        assert fields[1].field_type == "integer"

    def test_parse_fields_from_keyed_mapping(self):
        fields = parse_fields({"summary": {"type": "textarea", "label": "Summary"}})
        assert fields[0].machine_name == "summary"
        assert fields[0].field_type == "textarea"

    def test_parse_fields_empty_and_invalid(self):
        assert parse_fields(None) == []
        assert parse_fields("") == []
        assert parse_fields("not json") == []


class TestAccessors:
    """Test settings lookups and widget resolution"""

    def test_widget_settings_override_field_settings(self):
        field = FieldDefinition(
            machine_name="body",
            label="Body",
            settings={"rows": 5, "toolbar": "basic"},
            widget_settings={"rows": 12},
        )
        assert field.get_setting("rows") == 12
        assert field.get_setting("toolbar") == "basic"
        assert field.get_setting("missing", "x") == "x"
        assert field.effective_widget_settings() == {"rows": 12, "toolbar": "basic"}

    def test_resolved_widget_id(self):
        field = FieldDefinition(machine_name="body", label="Body", field_type="html")
        assert field.resolved_widget_id() == "wysiwyg"
        assert field.replace(widget="textarea").resolved_widget_id() == "textarea"

    def test_replace_returns_new_instance(self):
        field = FieldDefinition(machine_name="body", label="Body")
        changed = field.replace(required=True)
        assert changed.required is True
        assert field.required is False

    def test_int_setting(self):
        field = FieldDefinition(
            machine_name="gallery",
            label="Gallery",
            settings={"max_items": "4", "columns": "wide", "scale": None},
            widget_settings={"rows": 3},
        )
        assert field.get_int_setting("max_items", 0) == 4
        assert field.get_int_setting("columns", 8) == 8
        assert field.get_int_setting("scale", 2) == 2
        assert field.get_int_setting("rows", 1) == 3
        assert field.get_int_setting("missing", 7) == 7


class TestCanonicalKeys:
    """Test mapping older key names onto the canonical ones"""

    def test_aliases_renamed(self):
        raw = {"field_type": "integer", "name": "Count", "default_value": 1, "validation_rules": {"min": 0}}
        assert canonical_field_keys(raw) == {"type": "integer", "label": "Count", "default": 1, "validation": {"min": 0}}

    def test_canonical_key_wins(self):
        assert canonical_field_keys({"default": "a", "default_value": "b"}) == {"default": "a"}
        assert canonical_field_keys({"default_value": "b", "default": "a"}) == {"default": "a"}

    def test_other_keys_untouched(self):
        assert canonical_field_keys({"help_text": "Hi", "required": True}) == {"help_text": "Hi", "required": True}
