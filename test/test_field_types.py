"""
Tests for the field type catalogue
"""

import pytest

from app.exceptions import FieldTypeNotFoundError
from app.fields import field_types
from app.fields.field_types import FieldType, FieldTypeRegistry


class TestFieldTypeEnum:
    """Test FieldType members and their metadata"""

    def test_every_type_has_metadata(self):
        for field_type in FieldType:
            assert field_type.label
            assert field_type.description
            assert field_type.category
            assert field_type.storage_type
            assert field_type.default_widget

    def test_str_enum_compares_to_id(self):
        assert FieldType.STRING == "string"
        assert FieldType("taxonomy_reference") is FieldType.TAXONOMY_REFERENCE

    def test_supports_multiple(self):
        assert FieldType.GALLERY.supports_multiple
        assert FieldType.MULTISELECT.supports_multiple
        assert not FieldType.STRING.supports_multiple

    def test_to_dict_shape(self):
        data = FieldType.HTML.to_dict()
        assert data["id"] == "html"
        assert data["category"] == "Text"
        assert data["storage_type"] == "text"
        assert data["default_widget"] == "wysiwyg"


class TestLookup:
    """Test module-level lookup helpers"""

    def test_all_types_in_declaration_order(self):
        types = field_types.all_types()
        assert types[0] is FieldType.STRING
        assert len(types) == len(FieldType)

    def test_by_id_unknown_raises_not_found(self):
        with pytest.raises(FieldTypeNotFoundError) as exc_info:
            field_types.by_id("hologram")
        assert exc_info.value.status_code == 404

    def test_find_unknown_returns_none(self):
        assert field_types.find("hologram") is None
        assert field_types.find(None) is None

    def test_grouped_by_category_covers_every_type_once(self):
        grouped = field_types.grouped_by_category()
        assert list(grouped)[:3] == ["Text", "Number", "Date/Time"]
        flattened = [t for members in grouped.values() for t in members]
        assert sorted(flattened) == sorted(FieldType)


class TestFieldTypeRegistry:
    """Test the injectable registry"""

    def test_restricted_registry(self):
        registry = FieldTypeRegistry(allowed=[FieldType.STRING, FieldType.INTEGER])
        assert registry.has("string")
        assert not registry.has("html")
        assert registry.find("html") is None
        with pytest.raises(FieldTypeNotFoundError):
            registry.by_id("html")

    def test_restricted_grouping_drops_empty_categories(self):
        registry = FieldTypeRegistry(allowed=[FieldType.STRING, FieldType.INTEGER])
        assert registry.grouped_by_category() == {
            "Text": [FieldType.STRING],
            "Number": [FieldType.INTEGER],
        }

    def test_type_options(self):
        options = FieldTypeRegistry().type_options()
        assert options[0] == {"id": "string", "label": "Text (single line)"}
