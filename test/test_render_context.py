"""
Tests for RenderContext and RenderResult
"""

from markupsafe import Markup

from app.fields.assets import AssetCollection
from app.fields.context import DISPLAY, EDIT, RenderContext, RenderResult


class TestRenderContext:
    """Test context construction and naming"""

    def test_defaults(self):
        context = RenderContext.create()
        assert context.mode == EDIT
        assert context.locale == "en"
        assert not context.is_display

    def test_unknown_options_collected(self):
        context = RenderContext.create(mode="edit", theme="dark")
        assert context.get("theme") == "dark"
        assert context.get("missing", 1) == 1

    def test_for_display(self):
        context = RenderContext.for_display(locale="de")
        assert context.mode == DISPLAY
        assert context.readonly
        assert context.locale == "de"

    def test_field_name_and_id(self):
        context = RenderContext.create(name_prefix="fields", form_id="node_form")
        assert context.field_name("meta_title") == "fields[meta_title]"
        assert context.field_id("meta_title") == "field-node-form-fields-meta-title"

    def test_field_id_with_index(self):
        context = RenderContext.create().with_index(2)
        assert context.field_id("tags") == "field-tags-2"

    def test_errors(self):
        context = RenderContext.create().with_errors({"title": ["Title is required"]})
        assert context.has_errors_for("title")
        assert context.errors_for("title") == ["Title is required"]
        assert context.errors_for("body") == []

    def test_copies_leave_original_untouched(self):
        original = RenderContext.create()
        changed = original.with_disabled().with_mode(DISPLAY).with_option("compact", True)
        assert changed.disabled and changed.is_display and changed.get("compact")
        assert not original.disabled
        assert original.mode == EDIT
        assert original.options == {}

    def test_to_dict(self):
        data = RenderContext.create(form_id="f").to_dict()
        assert data["form_id"] == "f"
        assert data["errors"] == {}


class TestRenderResult:
    """Test combining render results"""

    def test_html_becomes_markup(self):
        assert isinstance(RenderResult("<b>x</b>").html, Markup)

    def test_combine(self):
        first = RenderResult(Markup("<p>a</p>"), AssetCollection(css=["/a.css"]))
        second = RenderResult(Markup("<p>b</p>"), AssetCollection(css=["/b.css", "/a.css"]))
        combined = first.combine(second)
        assert str(combined) == "<p>a</p><p>b</p>"
        assert combined.assets.css_files == ["/a.css", "/b.css"]
        assert first.assets.css_files == ["/a.css"]

    def test_empty_and_wrap(self):
        assert RenderResult.empty().is_empty
        wrapped = RenderResult(Markup("x")).wrap("<div>", "</div>")
        assert str(wrapped.html) == "<div>x</div>"

    def test_html_with_assets(self):
        result = RenderResult(Markup("<p>x</p>"), AssetCollection(js=["/a.js"]))
        assert str(result.html_with_assets()).endswith("<p>x</p>")
        assert result.to_dict()["assets"]["js"] == ["/a.js"]
