"""
Tests for slugify and machine_name utilities

Tests URL slug and column-safe identifier generation from labels.
"""

import pytest

from app.utils.slugify import machine_name, slugify


class TestSlugifyBasic:
    """Test basic slugify functionality"""

    def test_slugify_simple_string(self):
        """Test slugifying a simple string"""
        assert slugify("Hello World") == "hello-world"

    def test_slugify_lowercase_conversion(self):
        """Test that slugify converts to lowercase"""
        assert slugify("MiXeD CaSe") == "mixed-case"

    def test_slugify_removes_special_characters(self):
        """Test that special characters are replaced with hyphens"""
        assert slugify("Price: $99.99") == "price-99-99"
        assert slugify("--Edges--") == "edges"

    def test_slugify_transliterates(self):
        """Test that accented characters are transliterated"""
        assert slugify("Café Münchën") == "cafe-munchen"


class TestMachineName:
    """Test machine name generation for fields and types"""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("Featured Image", "featured_image"),
            ("  Meta -- Title ", "meta_title"),
            ("Résumé", "resume"),
            ("FAQ", "faq"),
        ],
    )
    def test_machine_name_from_label(self, label, expected):
        """Test converting labels to identifiers"""
        assert machine_name(label) == expected

    def test_machine_name_leading_digit(self):
        """Test that identifiers never start with a digit"""
        assert machine_name("3D Model") == "field_3d_model"

    def test_machine_name_empty(self):
        """Test empty and None labels"""
        assert machine_name("") == ""
        assert machine_name(None) == ""
        assert machine_name("!!!") == ""

    def test_machine_name_max_length(self):
        """Test truncation without a trailing underscore"""
        name = machine_name("a" * 40 + " " + "b" * 40)
        assert len(name) <= 63
        assert not name.endswith("_")
        assert machine_name("word " * 3, max_length=6) == "word_w"
