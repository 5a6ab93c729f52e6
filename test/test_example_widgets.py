"""
Tests for the example module's rating and icon picker widgets
"""

import pytest

from app.fields.context import RenderContext
from app.fields.definition import FieldDefinition
from app.modules.example import EXAMPLE_MODULE, IconPickerWidget, RatingWidget


def make_field(**overrides):
    data = {"machine_name": "score", "label": "Score", "type": "integer"}
    data.update(overrides)
    return FieldDefinition.from_mapping(data)


@pytest.fixture
def context():
    return RenderContext.create()


class TestRatingWidget:
    """Test the star rating widget"""

    def test_module_ships_widgets(self):
        assert [w.id for w in EXAMPLE_MODULE.create_widgets()] == ["rating", "icon_picker"]

    def test_render(self, context):
        result = RatingWidget().render_field(make_field(), 3, context)
        html = str(result.html)
        assert 'id="field-score_wrapper"' in html
        assert html.count("field-rating__star--filled") == 3
        assert html.count("field-rating__star--empty") == 2
        assert result.assets.init_scripts == ["CmsWidgets.rating('field-score');"]
        assert "/assets/widgets/rating/rating.css" in result.assets.css_files

    def test_half_star(self, context):
        field = make_field(type="float", settings={"allow_half": True})
        html = str(RatingWidget().render_field(field, 2.5, context).html)
        assert html.count("field-rating__star--half") == 1
        assert 'data-step="0.5"' in html

    def test_validate(self):
        field = make_field()
        assert RatingWidget().validate(field, "x") == ["Rating must be a number"]
        assert RatingWidget().validate(field, 6) == ["Rating must be between 0 and 5"]
        assert RatingWidget().validate(field, 2.5) == ["Rating must be a whole number"]
        assert RatingWidget().validate(field, 4) == []

    def test_validate_half_steps(self):
        field = make_field(type="float", settings={"allow_half": True, "max_stars": 10})
        assert RatingWidget().validate(field, 7.5) == []
        assert RatingWidget().validate(field, 7.25) == ["Rating must be in steps of 0.5"]

    def test_prepare_value_clamps(self):
        assert RatingWidget().prepare_value(make_field(), "9") == 5
        assert RatingWidget().prepare_value(make_field(type="float"), "-1") == 0.0
        assert RatingWidget().prepare_value(make_field(), "") is None

    def test_malformed_max_stars_uses_default(self):
        field = make_field(settings={"max_stars": "lots"})
        assert RatingWidget.max_stars(field) == 5
        assert RatingWidget().validate(field, 6) == ["Rating must be between 0 and 5"]

    def test_non_finite_rating(self):
        assert RatingWidget().validate(make_field(), "inf") == ["Rating must be a number"]
        assert RatingWidget().prepare_value(make_field(), "nan") is None

    def test_display(self, context):
        html = str(RatingWidget().render_display(make_field(), 4, context).html)
        assert 'title="4 / 5"' in html


class TestIconPickerWidget:
    """Test the icon picker widget"""

    def test_render(self, context):
        field = make_field(machine_name="icon", label="Icon", type="string")
        html = str(IconPickerWidget().render_field(field, "star", context).html)
        assert 'id="field-icon_wrapper"' in html
        assert 'data-name="star"' in html
        assert "icon-picker__icon--selected" in html
        assert html.count("icon-picker__icon ") + html.count('icon-picker__icon"') == 8

    def test_validate(self):
        field = make_field(machine_name="icon", type="string")
        assert IconPickerWidget().validate(field, "rocket") == ["Unknown icon 'rocket'"]
        assert IconPickerWidget().validate(field, "home") == []

    def test_display(self, context):
        field = make_field(machine_name="icon", type="string")
        html = str(IconPickerWidget().render_display(field, "heart", context).html)
        assert "❤️" in html
