"""
Repeater wrapper for multi-value fields whose widget edits one value at a time.

Each item is rendered by the inner widget with an indexed name (`tags[0]`,
`tags[1]`, ...) and a <template> row named `tags[__INDEX__]` lets the client
add rows. The repeater is built on the fly by the registry and never registered.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.html import tag
from app.fields.validation import is_empty
from app.fields.widgets.base import Widget

INDEX_PLACEHOLDER = "__INDEX__"


def as_list(value: Any) -> list[Any]:
    if is_empty(value):
        return []
    if isinstance(value, str) and value.startswith("["):
        try:
            decoded = json.loads(value)
        except ValueError:
            return [value]
        return decoded if isinstance(decoded, list) else [decoded]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class RepeaterWidget(Widget):
    category = "Composite"
    icon = "🔁"
    handles_multiple = True
    css_assets = ("/assets/widgets/repeater/repeater.css",)
    js_assets = ("/assets/widgets/repeater/repeater.js",)

    def __init__(self, inner: Widget) -> None:
        self.inner = inner
        self.id = f"repeater:{inner.id}"
        self.label = f"{inner.label} (multiple)"
        self.supported_types = inner.supported_types

    def single(self, field: FieldDefinition) -> FieldDefinition:
        """The field as the inner widget sees it: one value, no own label."""
        return field.replace(multiple=False, cardinality=1, required=False)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return self._render_items(field, value, context)[0]

    def _render_items(self, field: FieldDefinition, value: Any, context: RenderContext) -> tuple[Markup, RenderResult]:
        single = self.single(field)
        items = as_list(value)
        if not items and field.required:
            items = [None]
        limit = field.cardinality if field.cardinality > 0 else None
        if limit is not None:
            items = items[:limit]

        item_context = dataclasses.replace(context, hide_label=True, hide_help=True, errors={})
        collected = RenderResult()
        rows = []
        for index, item in enumerate(items):
            result = self.inner.render_field(single, item, item_context.with_index(index))
            collected = collected.combine(result)
            remove = tag("button", "Remove", type="button", class_="field-repeater__remove", disabled=context.disabled)
            rows.append(tag("div", [result.html, remove], class_="field-repeater__item", data_index=index))

        template = self.inner.render_field(single, None, item_context.with_index(INDEX_PLACEHOLDER))
        collected = collected.combine(template)
        remove = tag("button", "Remove", type="button", class_="field-repeater__remove")
        template_row = tag("div", [template.html, remove], class_="field-repeater__item", data_index=INDEX_PLACEHOLDER)

        add = tag(
            "button",
            field.get_setting("add_label", "Add another"),
            type="button",
            class_="field-repeater__add",
            disabled=context.disabled or (limit is not None and len(items) >= limit),
        )
        html = tag(
            "div",
            [
                tag("div", Markup("").join(rows), class_="field-repeater__items"),
                tag("template", template_row, class_="field-repeater__template"),
                add,
            ],
            class_="field-repeater",
            id=self.field_id(field, context),
            data_max=limit,
            data_name=self.field_name(field, context),
        )
        return html, collected

    def render_field(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        html, inner = self._render_items(field, value, context)
        wrapper = self.build_wrapper(field, html, context)
        assets = self.assets().merge(inner.assets)
        assets.add_init_script(f"CmsWidgets.repeater({json.dumps(self.field_id(field, context))});")
        return RenderResult(wrapper, assets)

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        items = as_list(value)
        if not items:
            return super().render_display(field, None, context)
        single = self.single(field)
        collected = RenderResult()
        parts = []
        for item in items:
            result = self.inner.render_display(single, item, context)
            collected = collected.combine(result)
            parts.append(tag("li", result.html))
        return RenderResult(tag("ul", Markup("").join(parts), class_="field-display field-display--multiple"), collected.assets)

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        single = self.single(field)
        errors = []
        for index, item in enumerate(as_list(value)):
            for error in self.inner.validate(single, item):
                errors.append(f"Item {index + 1}: {error}")
        return errors

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        single = self.single(field)
        prepared = [self.inner.prepare_value(single, item) for item in as_list(value)]
        return [item for item in prepared if not is_empty(item)]

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        single = self.single(field)
        return [self.inner.format_value(single, item) for item in as_list(value)]
