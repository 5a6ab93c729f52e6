"""
Tests for FormBuilder

Tests the form element, field grouping, CSRF token, errors and actions.
"""

import pytest

from app.fields.definition import FieldDefinition
from app.fields.form import FormBuilder, FormResult, group_by_setting


def make_field(machine_name, label, **overrides):
    return FieldDefinition.from_mapping({"machine_name": machine_name, "label": label, **overrides})


FIELDS = [
    make_field("title", "Title", required=True),
    make_field("summary", "Summary", type="text"),
    make_field("seo_title", "SEO Title", settings={"group": "SEO"}),
]


@pytest.fixture
def builder(widget_registry):
    return FormBuilder(widget_registry)


class TestBuilderCopies:
    """Test that builder options return modified copies"""

    def test_with_helpers_return_copies(self, builder):
        changed = builder.with_id("article").with_method("get").with_ajax().with_submit_label("Publish")
        assert (changed.id, changed.method, changed.ajax, changed.submit_label) == ("article", "GET", True, "Publish")
        assert (builder.id, builder.method, builder.ajax, builder.submit_label) == ("form", "POST", False, "Save")

    def test_without_csrf(self, builder):
        assert builder.without_csrf().include_csrf is False
        assert builder.include_csrf is True


class TestBuild:
    """Test rendering the complete form"""

    def test_form_element(self, builder):
        result = builder.with_id("article").with_action("/save").build(FIELDS, {"title": "Hello"})
        assert isinstance(result, FormResult)
        html = str(result.html)
        assert html.startswith('<form id="article" action="/save" method="POST" class="cms-form"')
        assert 'enctype="multipart/form-data"' in html
        assert 'value="Hello"' in html
        assert 'class="cms-form__fields"' in html
        assert "data-ajax" not in html

    def test_ajax_flag(self, builder):
        assert 'data-ajax="true"' in str(builder.with_ajax().build(FIELDS).html)

    def test_csrf_token_on_post(self, builder):
        html = str(builder.with_csrf_token("abc123").build(FIELDS).html)
        assert '<input type="hidden" name="_token" value="abc123">' in html

    def test_generated_csrf_token(self, builder):
        html = str(builder.build(FIELDS).html)
        assert 'name="_token"' in html

    def test_no_csrf_token_on_get(self, builder):
        assert "_token" not in str(builder.with_method("GET").build(FIELDS).html)

    def test_no_csrf_token_when_disabled(self, builder):
        assert "_token" not in str(builder.without_csrf().build(FIELDS).html)

    def test_form_and_field_errors(self, builder):
        errors = {"_form": ["Could not save"], "title": ["Title is required"]}
        html = str(builder.with_errors(errors).build(FIELDS).html)
        assert '<div class="cms-form__errors"><div class="cms-form__error">Could not save</div></div>' in html
        assert "Title is required" in html

    def test_actions(self, builder):
        html = str(builder.with_submit_label("Publish").with_cancel_url("/admin").build(FIELDS).html)
        assert '<button type="submit" class="cms-form__submit">Publish</button>' in html
        assert '<a href="/admin" class="cms-form__cancel">Cancel</a>' in html

    def test_unsafe_cancel_url_dropped(self, builder):
        html = str(builder.with_cancel_url("javascript:alert(1)").build(FIELDS).html)
        assert "cms-form__cancel" not in html

    def test_assets_collected(self, builder):
        result = builder.build([make_field("body", "Body", type="html")])
        assert "/assets/widgets/wysiwyg/editor.js" in result.assets.js_files
        assert str(result.html_with_assets()).endswith(str(result.html))


class TestGrouping:
    """Test fieldset grouping by the `group` setting"""

    def test_group_by_setting(self):
        groups = group_by_setting(FIELDS)
        assert list(groups) == ["General", "SEO"]
        assert [f.machine_name for f in groups["General"]] == ["title", "summary"]

    def test_grouped_fieldsets(self, builder):
        html = str(builder.build_fields(FIELDS).html)
        assert html.count("<fieldset") == 2
        assert '<fieldset class="cms-form__group">' in html
        assert '<fieldset class="cms-form__group cms-form__group--collapsed">' in html
        assert '<span class="cms-form__group-toggle">▼</span> SEO</legend>' in html
        assert html.index("General") < html.index("SEO")

    def test_ungrouped(self, builder):
        html = str(builder.with_grouping(False).build_fields(FIELDS).html)
        assert "<fieldset" not in html
        assert 'data-field="seo_title"' in html

    def test_build_field_uses_form_id(self, builder):
        html = str(builder.with_id("article").build_field(FIELDS[0], "x").html)
        assert 'id="field-article-title"' in html


class TestSubmissions:
    """Test validate and prepare"""

    def test_validate(self, builder):
        assert builder.validate(FIELDS, {}) == {"title": ["Title is required"]}

    def test_prepare(self, builder):
        assert builder.prepare(FIELDS, {"title": "Hello"}) == {"title": "Hello"}
