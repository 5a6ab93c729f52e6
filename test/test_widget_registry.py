"""
Tests for WidgetRegistry lookup, resolution and value handling
"""

import pytest

from app.exceptions import WidgetNotFoundError, WidgetResolutionError
from app.fields.context import RenderContext
from app.fields.definition import FieldDefinition
from app.fields.registry import WidgetRegistry, build_widget_registry
from app.fields.widgets import RepeaterWidget, TextareaWidget, TextInputWidget
from app.modules import CORE_MODULE


def make_field(**overrides):
    data = {"machine_name": "title", "label": "Title"}
    data.update(overrides)
    return FieldDefinition.from_mapping(data)


class LoudTextWidget(TextInputWidget):
    id = "loud_text"
    label = "Loud Text"
    priority = 50


class QuietTextWidget(TextInputWidget):
    id = "quiet_text"
    label = "Quiet Text"
    priority = 50


class TestRegistration:
    """Test registering and looking up widgets"""

    def test_get_unknown_widget(self):
        with pytest.raises(WidgetNotFoundError):
            WidgetRegistry().get("nope")

    def test_reregistering_keeps_position(self):
        registry = WidgetRegistry()
        registry.register(TextInputWidget())
        registry.register(TextareaWidget())

        class CustomTextInput(TextInputWidget):
            label = "Custom"

        registry.register(CustomTextInput())
        assert [w.id for w in registry.all()] == ["text_input", "textarea"]
        assert registry.get("text_input").label == "Custom"

    def test_set_type_default_requires_registered_widget(self):
        with pytest.raises(WidgetNotFoundError):
            WidgetRegistry().set_type_default("string", "nope")

    def test_has(self, widget_registry):
        assert widget_registry.has("wysiwyg")
        assert not widget_registry.has(None)

    def test_module_widgets_registered(self, widget_registry):
        assert widget_registry.has("rating")
        assert widget_registry.has("icon_picker")


class TestGetForType:
    """Test compatible widget listings"""

    def test_sorted_by_priority(self, widget_registry):
        ids = [w.id for w in widget_registry.get_for_type("email")]
        assert ids[0] == "email"
        assert ids.index("email") < ids.index("text_input")

    def test_equal_priority_keeps_registration_order(self):
        registry = WidgetRegistry()
        registry.register_many([QuietTextWidget(), LoudTextWidget()])
        assert [w.id for w in registry.get_for_type("string")] == ["quiet_text", "loud_text"]

    def test_listing_is_deterministic(self, widget_registry):
        first = [w.id for w in widget_registry.get_for_type("string")]
        second = [w.id for w in widget_registry.get_for_type("string")]
        assert first == second
        assert first[-1] == "hidden"

    def test_options_for_type(self, widget_registry):
        options = widget_registry.get_options_for_type("html")
        assert {"id": "wysiwyg", "label": "WYSIWYG Editor"} in options

    def test_grouped_by_category(self, widget_registry):
        grouped = widget_registry.grouped_by_category()
        assert "rating" in [m.id for m in grouped["Custom"]]


class TestResolve:
    """Test widget resolution precedence"""

    def test_explicit_widget_wins(self, widget_registry):
        assert widget_registry.resolve(make_field(widget="textarea")).id == "textarea"

    def test_incompatible_explicit_widget_falls_back(self, widget_registry):
        assert widget_registry.resolve(make_field(widget="date")).id == "text_input"

    def test_unknown_explicit_widget_falls_back(self, widget_registry):
        assert widget_registry.resolve(make_field(widget="missing")).id == "text_input"

    def test_type_default(self, widget_registry):
        assert widget_registry.resolve(make_field(type="html")).id == "wysiwyg"
        assert widget_registry.resolve(make_field(type="taxonomy_reference")).id == "taxonomy"

    def test_registry_type_default_override(self, widget_registry):
        widget_registry.set_type_default("integer", "rating")
        assert widget_registry.resolve(make_field(type="integer")).id == "rating"

    def test_highest_priority_when_default_missing(self):
        registry = WidgetRegistry()
        registry.register_many([QuietTextWidget(), LoudTextWidget(), TextareaWidget()])
        assert registry.resolve(make_field(type="string")).id == "quiet_text"

    def test_empty_registry_raises(self):
        with pytest.raises(WidgetResolutionError) as exc_info:
            WidgetRegistry().resolve(make_field())
        assert exc_info.value.details["field_type"] == "string"

    def test_unknown_field_type_raises(self, widget_registry):
        with pytest.raises(WidgetResolutionError):
            widget_registry.resolve(make_field(type="hologram"))

    def test_multi_value_field_gets_repeater(self, widget_registry):
        widget = widget_registry.widget_for(make_field(multiple=True))
        assert isinstance(widget, RepeaterWidget)
        assert widget.inner.id == "text_input"

    def test_multi_capable_widget_not_wrapped(self, widget_registry):
        widget = widget_registry.widget_for(make_field(type="taxonomy_reference", multiple=True))
        assert widget.id == "taxonomy"


class TestRendering:
    """Test rendering through the registry"""

    def test_render_uses_default_value(self, widget_registry):
        field = make_field(default="Untitled")
        html = str(widget_registry.render_field(field, None).html)
        assert 'value="Untitled"' in html

    def test_render_includes_widget_assets(self, widget_registry):
        result = widget_registry.render_field(make_field(machine_name="body", type="html"), "")
        assert "/assets/widgets/wysiwyg/editor.css" in result.assets.css_files

    def test_render_fields_merges_assets_once(self, widget_registry):
        fields = [make_field(machine_name="body", type="html"), make_field(machine_name="intro", type="html")]
        result = widget_registry.render_fields(fields, {"body": "<p>a</p>"})
        html = str(result.html)
        assert html.index('data-field="body"') < html.index('data-field="intro"')
        assert result.assets.css_files.count("/assets/widgets/wysiwyg/editor.css") == 1
        assert len(result.assets.init_scripts) == 2

    def test_render_display(self, widget_registry):
        field = make_field(type="select", settings={"options": {"a": "Apple"}})
        result = widget_registry.render_fields_display([field], {"title": "a"}, RenderContext.for_display())
        assert "Apple" in str(result.html)


class TestValues:
    """Test validation and value preparation through the registry"""

    def test_field_errors_before_widget_errors(self, widget_registry):
        field = make_field(type="email", validation={"max_length": 3})
        errors = widget_registry.validate_field(field, "not-an-email")
        assert errors == [
            "Please enter a valid email address",
            "Maximum length is 3 characters",
            "Please enter a valid email address",
        ]

    def test_required_empty_value(self, widget_registry):
        assert widget_registry.validate_field(make_field(required=True), None) == ["Title is required"]

    def test_multiple_values_checked_per_item(self, widget_registry):
        field = make_field(type="integer", multiple=True, cardinality=2)
        errors = widget_registry.validate_field(field, ["1", "x", "3"])
        assert "Title allows at most 2 values" in errors
        assert "Item 2: Please enter a valid integer" in errors

    def test_validate_fields_skips_valid(self, widget_registry):
        fields = [make_field(required=True), make_field(machine_name="email", type="email")]
        results = widget_registry.validate_fields(fields, {"email": "a@b.co"})
        assert results == {"title": ["Title is required"]}

    def test_prepare_values_skips_absent_fields(self, widget_registry):
        fields = [make_field(type="integer"), make_field(machine_name="tags", multiple=True)]
        assert widget_registry.prepare_values(fields, {"title": "5"}) == {"title": 5}


class TestBuildWidgetRegistry:
    """Test the startup factory"""

    def test_core_only(self, field_types):
        registry = build_widget_registry(field_types, [CORE_MODULE])
        assert registry.has("text_input")
        assert not registry.has("rating")
