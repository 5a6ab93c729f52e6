"""Numeric inputs: integer, decimal, range slider."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import as_int, is_empty, is_integer, is_number, to_number
from app.fields.widgets.base import Widget


class NumberWidget(Widget):
    id = "number"
    label = "Number"
    category = "Number"
    icon = "🔢"
    priority = 10
    supported_types = (FieldType.INTEGER, FieldType.FLOAT, FieldType.DECIMAL)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return tag(
            "input",
            type="number",
            value="" if value is None else value,
            min=field.get_setting("min"),
            max=field.get_setting("max"),
            step=field.get_setting("step", self.default_step(field)),
            **self.base_attributes(field, context),
        )

    def default_step(self, field: FieldDefinition) -> str:
        return "1" if field.field_type == FieldType.INTEGER.value else "any"

    def settings_schema(self) -> dict[str, Any]:
        return {
            "min": {"type": "number", "label": "Minimum", "default": None},
            "max": {"type": "number", "label": "Maximum", "default": None},
            "step": {"type": "number", "label": "Step", "default": 1},
            "prefix": {"type": "string", "label": "Prefix", "default": ""},
            "suffix": {"type": "string", "label": "Suffix", "default": ""},
        }

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value) or is_number(value):
            return []
        return ["Please enter a number"]

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value) or not is_number(value):
            return None
        if field.field_type == FieldType.INTEGER.value:
            return as_int(value) if is_integer(value) else int(to_number(value))
        return to_number(value)

    def display_text(self, field: FieldDefinition, value: Any) -> str:
        prefix = field.get_setting("prefix", "") or ""
        suffix = field.get_setting("suffix", "") or ""
        if is_number(value) and field.get_setting("thousand_separator"):
            scale = field.get_setting("scale", 0)
            value = f"{to_number(value):,.{as_int(scale) if is_integer(scale) else 0}f}"
        return f"{prefix}{value}{suffix}"


class DecimalWidget(NumberWidget):
    id = "decimal"
    label = "Decimal"
    icon = "🔣"
    priority = 15
    supported_types = (FieldType.FLOAT, FieldType.DECIMAL)

    def default_step(self, field: FieldDefinition) -> str:
        scale = self.scale(field)
        return "1" if scale <= 0 else "0." + "0" * (scale - 1) + "1"

    def settings_schema(self) -> dict[str, Any]:
        schema = super().settings_schema()
        schema["scale"] = {"type": "integer", "label": "Decimal places", "default": 2}
        return schema

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value) or not is_number(value):
            return None
        try:
            quantized = Decimal(str(value).strip()).quantize(Decimal(1).scaleb(-self.scale(field)))
        except InvalidOperation:
            # More digits than the decimal context allows at this scale
            return None
        if field.field_type == FieldType.DECIMAL.value:
            # Stored as a string to keep precision through the JSON layer
            return str(quantized)
        return float(quantized)

    def scale(self, field: FieldDefinition) -> int:
        scale = field.get_setting("scale", 2)
        return as_int(scale) if is_integer(scale) else 2


class RangeWidget(NumberWidget):
    id = "range"
    label = "Range Slider"
    icon = "🎚"
    priority = 5
    supported_types = (FieldType.INTEGER, FieldType.FLOAT)
    css_assets = ("/assets/widgets/range/range.css",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        low = field.get_setting("min", 0)
        high = field.get_setting("max", 100)
        current = low if value is None or value == "" else value
        element_id = self.field_id(field, context)
        slider = tag(
            "input",
            type="range",
            value=current,
            min=low,
            max=high,
            step=field.get_setting("step", 1),
            oninput=f"document.getElementById({json.dumps(element_id + '-output')}).value = this.value",
            **self.base_attributes(field, context),
        )
        output = tag("output", str(current), id=f"{element_id}-output", for_=element_id)
        return slider + output

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        errors = super().validate(field, value)
        if errors or is_empty(value):
            return errors
        low, high = self.bounds(field)
        if not low <= to_number(value) <= high:
            errors.append(f"Value must be between {field.get_setting('min', 0)} and {field.get_setting('max', 100)}")
        return errors

    def bounds(self, field: FieldDefinition) -> tuple[float, float]:
        """Slider limits; a setting that is not a number falls back to 0 or 100."""
        low = to_number(field.get_setting("min", 0))
        high = to_number(field.get_setting("max", 100))
        return (0.0 if low is None else low, 100.0 if high is None else high)

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(
            tag(
                "span",
                self.display_text(field, value),
                class_="field-display field-display--range",
                data_max=field.get_setting("max", 100),
            )
        )
