"""Choice widgets: checkbox, switch, select list, radios, checkboxes."""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import option, tag
from app.fields.validation import TRUE_VALUES, is_empty
from app.fields.widgets.base import Widget


def _to_list(value: Any) -> list[str]:
    if is_empty(value):
        return []
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except ValueError:
            decoded = [part.strip() for part in value.split(",") if part.strip()]
        value = decoded
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [str(v) for v in value]


class CheckboxWidget(Widget):
    """Single on/off checkbox. A hidden "0" input precedes it so unchecked boxes still submit."""

    id = "checkbox"
    label = "Checkbox"
    category = "Selection"
    icon = "☑"
    priority = 10
    supported_types = (FieldType.BOOLEAN,)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        hidden = tag("input", type="hidden", name=attributes["name"], value="0")
        box = tag("input", type="checkbox", value="1", checked=bool(value), **attributes)
        text = field.get_setting("on_label")
        if text:
            box = tag("label", [box, " ", text], class_="field-widget__checkbox-label")
        return hidden + box

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        return bool(value)

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        return self.prepare_value(field, value)

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        on = self.prepare_value(field, value)
        text = field.get_setting("on_label", "Yes") if on else field.get_setting("off_label", "No")
        return RenderResult(tag("span", text, class_=["field-display", "field-display--boolean", f"is-{'on' if on else 'off'}"]))

    def settings_schema(self) -> dict[str, Any]:
        return {
            "on_label": {"type": "string", "label": "On label", "default": "Yes"},
            "off_label": {"type": "string", "label": "Off label", "default": "No"},
        }


class SwitchWidget(CheckboxWidget):
    id = "switch"
    label = "Toggle Switch"
    icon = "🔘"
    priority = 5
    css_assets = ("/assets/widgets/switch/switch.css",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        attributes["class_"] = "field-widget__control field-widget__switch-input"
        hidden = tag("input", type="hidden", name=attributes["name"], value="0")
        box = tag("input", type="checkbox", value="1", checked=bool(value), role="switch", **attributes)
        slider = tag("span", None, class_="field-widget__switch-slider")
        return hidden + tag("label", [box, slider], class_="field-widget__switch")


class SelectWidget(Widget):
    id = "select"
    label = "Select List"
    category = "Selection"
    icon = "📋"
    priority = 10
    supported_types = (FieldType.SELECT, FieldType.MULTISELECT, FieldType.RADIO)
    handles_multiple = True

    def is_multiple(self, field: FieldDefinition) -> bool:
        return field.multiple or field.field_type == FieldType.MULTISELECT.value

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        multiple = self.is_multiple(field)
        selected = set(_to_list(value))
        attributes = self.base_attributes(field, context)
        attributes.pop("placeholder", None)
        if multiple:
            attributes["name"] = f"{attributes['name']}[]"

        choices = []
        if not multiple:
            empty_label = field.get_setting("empty_option", "- Select -")
            choices.append(option("", empty_label, selected=not selected))
        for key, text in self.options(field):
            choices.append(option(key, text, selected=key in selected))
        return tag("select", Markup("").join(choices), multiple=multiple, **attributes)

    def settings_schema(self) -> dict[str, Any]:
        return {
            "options": {"type": "options", "label": "Options", "default": []},
            "empty_option": {"type": "string", "label": "Empty option label", "default": "- Select -"},
        }

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if self.is_multiple(field):
            return _to_list(value)
        return None if is_empty(value) else str(value)

    def display_text(self, field: FieldDefinition, value: Any) -> str:
        labels = dict(self.options(field))
        return ", ".join(labels.get(v, v) for v in _to_list(value))


class RadiosWidget(SelectWidget):
    id = "radios"
    label = "Radio Buttons"
    icon = "🔘"
    priority = 5
    supported_types = (FieldType.RADIO, FieldType.SELECT, FieldType.BOOLEAN)
    handles_multiple = False

    def is_multiple(self, field: FieldDefinition) -> bool:
        return False

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        name = self.field_name(field, context)
        base_id = self.field_id(field, context)
        current = None if value is None else str(value)
        choices = self.options(field)
        if not choices and field.field_type == FieldType.BOOLEAN.value:
            choices = [("1", "Yes"), ("0", "No")]
        items = []
        for i, (key, text) in enumerate(choices):
            radio = tag(
                "input",
                type="radio",
                id=f"{base_id}-{i}",
                name=name,
                value=key,
                checked=key == current,
                required=field.required and i == 0,
                disabled=context.disabled,
            )
            items.append(tag("label", [radio, " ", text], class_="field-widget__option", for_=f"{base_id}-{i}"))
        return tag("div", Markup("").join(items), class_="field-widget__options", role="radiogroup", id=base_id)


class CheckboxesWidget(SelectWidget):
    id = "checkboxes"
    label = "Checkboxes"
    icon = "☑"
    priority = 10
    supported_types = (FieldType.CHECKBOX, FieldType.MULTISELECT)
    handles_multiple = True

    def is_multiple(self, field: FieldDefinition) -> bool:
        return True

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        name = f"{self.field_name(field, context)}[]"
        base_id = self.field_id(field, context)
        selected = set(_to_list(value))
        items = []
        for i, (key, text) in enumerate(self.options(field)):
            box = tag(
                "input",
                type="checkbox",
                id=f"{base_id}-{i}",
                name=name,
                value=key,
                checked=key in selected,
                disabled=context.disabled,
            )
            items.append(tag("label", [box, " ", text], class_="field-widget__option", for_=f"{base_id}-{i}"))
        return tag("div", Markup("").join(items), class_="field-widget__options", id=base_id)

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        limit = field.get_int_setting("max_selections", 0)
        if limit and len(_to_list(value)) > limit:
            return [f"Select at most {limit} options"]
        return []
