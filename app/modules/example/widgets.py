"""Star rating and icon picker widgets."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import is_empty, is_number
from app.fields.widgets.base import Widget

ICON_SETS: dict[str, dict[str, str]] = {
    "emoji": {
        "home": "🏠",
        "user": "👤",
        "heart": "❤️",
        "star": "⭐",
        "mail": "📧",
        "phone": "📞",
        "search": "🔍",
        "camera": "📷",
    },
}


class RatingWidget(Widget):
    """Star rating for numeric fields. Settings: max_stars (default 5), allow_half."""

    id = "rating"
    label = "Star Rating"
    category = "Custom"
    icon = "⭐"
    supported_types = (FieldType.INTEGER, FieldType.FLOAT, FieldType.DECIMAL)
    css_assets = ("/assets/widgets/rating/rating.css",)
    js_assets = ("/assets/widgets/rating/rating.js",)

    @staticmethod
    def max_stars(field: FieldDefinition) -> int:
        return field.get_int_setting("max_stars", 5)

    @staticmethod
    def step(field: FieldDefinition) -> float:
        return 0.5 if field.get_setting("allow_half", False) else 1

    def stars(self, field: FieldDefinition, value: Any) -> Markup:
        current = float(value) if is_number(value) else 0
        stars = []
        for i in range(1, self.max_stars(field) + 1):
            if i <= current:
                state, glyph = "filled", "★"
            elif i - 0.5 <= current:
                state, glyph = "half", "⯪"
            else:
                state, glyph = "empty", "☆"
            stars.append(tag("span", glyph, class_=["field-rating__star", f"field-rating__star--{state}"], data_value=i))
        return Markup("").join(stars)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        attributes.pop("placeholder")
        hidden = tag("input", type="hidden", value="" if value is None else value, **attributes)
        stars = tag(
            "div",
            self.stars(field, value),
            class_="field-rating__stars",
            data_max=self.max_stars(field),
            data_step=self.step(field),
        )
        return tag("div", [hidden, stars], class_="field-rating", id=f"{attributes['id']}_wrapper")

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        return f"CmsWidgets.rating('{element_id}');"

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        label = f"{value} / {self.max_stars(field)}"
        return RenderResult(
            tag("span", self.stars(field, value), class_="field-display field-display--rating", title=label)
        )

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value):
            return []
        if not is_number(value):
            return ["Rating must be a number"]
        number = float(value)
        max_stars = self.max_stars(field)
        if number < 0 or number > max_stars:
            return [f"Rating must be between 0 and {max_stars}"]
        if (number / self.step(field)) % 1:
            return ["Rating must be a whole number" if self.step(field) == 1 else "Rating must be in steps of 0.5"]
        return []

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value) or not is_number(value):
            return None
        number = max(0.0, min(float(value), float(self.max_stars(field))))
        if field.field_type == FieldType.INTEGER.value:
            return int(round(number))
        return number

    def settings_schema(self) -> dict[str, Any]:
        return {
            "max_stars": {"type": "integer", "label": "Maximum stars", "default": 5, "min": 1, "max": 10},
            "allow_half": {"type": "boolean", "label": "Allow half stars", "default": False},
        }


class IconPickerWidget(Widget):
    """Pick one icon name from an icon set (`icon_set` setting)."""

    id = "icon_picker"
    label = "Icon Picker"
    category = "Custom"
    icon = "🎨"
    supported_types = (FieldType.STRING,)
    css_assets = ("/assets/widgets/icon-picker/icon-picker.css",)
    js_assets = ("/assets/widgets/icon-picker/icon-picker.js",)

    @staticmethod
    def icons(field: FieldDefinition) -> dict[str, str]:
        return ICON_SETS.get(field.get_setting("icon_set", "emoji"), ICON_SETS["emoji"])

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        attributes.pop("placeholder")
        element_id = attributes["id"]
        icons = self.icons(field)

        hidden = tag("input", type="hidden", value=value or "", **attributes)
        preview = tag("span", icons.get(value, ""), class_="icon-picker__preview", id=f"{element_id}_preview")
        toggle = tag(
            "button",
            [preview, " ", value or "Choose icon"],
            type="button",
            class_="icon-picker__toggle",
            disabled=context.disabled,
            data_toggle=element_id,
        )
        buttons = [
            tag(
                "button",
                glyph,
                type="button",
                title=name,
                class_=["icon-picker__icon", "icon-picker__icon--selected" if name == value else ""],
                data_name=name,
            )
            for name, glyph in icons.items()
        ]
        grid = tag(
            "div",
            Markup("").join(buttons),
            class_="icon-picker__grid",
            id=f"{element_id}_grid",
            style=f"--columns: {field.get_int_setting('columns', 8)}",
        )
        return tag("div", [hidden, toggle, grid], class_="icon-picker", id=f"{element_id}_wrapper")

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        return f"CmsWidgets.iconPicker('{element_id}');"

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        glyph = self.icons(field).get(value, "❓")
        return RenderResult(tag("span", glyph, class_="field-display field-display--icon", title=value))

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value) or value in self.icons(field):
            return []
        return [f"Unknown icon '{value}'"]

    def settings_schema(self) -> dict[str, Any]:
        return {
            "icon_set": {"type": "select", "label": "Icon set", "options": {"emoji": "Emoji"}, "default": "emoji"},
            "columns": {"type": "integer", "label": "Grid columns", "default": 8, "min": 4, "max": 12},
        }
