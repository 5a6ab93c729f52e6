"""
Reference pickers for content, taxonomy terms, users and blocks.

The widgets render an autocomplete input bound to an admin lookup endpoint;
stored values are integer ids.
"""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import option, tag
from app.fields.validation import as_int, is_empty, is_integer
from app.fields.widgets.base import Widget


def _ids(value: Any) -> list[int]:
    if is_empty(value):
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            value = value.split(",")
    if not isinstance(value, (list, tuple)):
        value = [value]
    ids = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("id")
        if is_integer(item):
            ids.append(as_int(item))
    return ids


class EntityReferenceWidget(Widget):
    id = "entity_reference"
    label = "Content Reference"
    category = "Reference"
    icon = "🔗"
    priority = 10
    supported_types = (FieldType.ENTITY_REFERENCE,)
    handles_multiple = True
    css_assets = ("/assets/widgets/reference/autocomplete.css",)
    js_assets = ("/assets/widgets/reference/autocomplete.js",)
    lookup_url = "/api/v1/content/lookup"
    target_setting = "target_type"

    def is_multiple(self, field: FieldDefinition) -> bool:
        return field.multiple

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        ids = _ids(value)
        stored = json.dumps(ids) if self.is_multiple(field) else (ids[0] if ids else "")
        hidden = tag("input", type="hidden", value=stored, **attributes)
        search = tag(
            "input",
            type="search",
            id=f"{attributes['id']}-search",
            class_="field-widget__control field-widget__reference-search",
            placeholder=field.get_setting("placeholder", "Start typing to search..."),
            autocomplete="off",
            disabled=context.disabled,
            data_lookup=self.lookup_url,
            data_target=field.get_setting(self.target_setting),
        )
        chips = [tag("li", f"#{ref_id}", data_id=ref_id, class_="field-widget__reference-item") for ref_id in ids]
        selected = tag("ul", Markup("").join(chips), class_="field-widget__reference-list", id=f"{attributes['id']}-list")
        return hidden + search + selected

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        options = json.dumps({"multiple": self.is_multiple(field), "target": field.get_setting(self.target_setting)})
        return f"CmsWidgets.reference({json.dumps(element_id)}, {options});"

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        ids = _ids(value)
        if self.is_multiple(field):
            return ids
        return ids[0] if ids else None

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value):
            return []
        if isinstance(value, str) and value.startswith("["):
            try:
                value = json.loads(value)
            except ValueError:
                return ["Please select a valid item"]
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            if isinstance(item, dict):
                item = item.get("id")
            if not is_integer(item):
                return ["Please select a valid item"]
        return []

    def settings_schema(self) -> dict[str, Any]:
        return {self.target_setting: {"type": "string", "label": "Target type", "default": None}}

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        ids = _ids(value)
        if not ids:
            return super().render_display(field, None, context)
        items = [tag("li", f"#{ref_id}", data_id=ref_id) for ref_id in ids]
        return RenderResult(tag("ul", Markup("").join(items), class_=f"field-display field-display--{self.id}"))


class TaxonomyWidget(EntityReferenceWidget):
    id = "taxonomy"
    label = "Taxonomy Terms"
    icon = "🏷"
    supported_types = (FieldType.TAXONOMY_REFERENCE,)
    lookup_url = "/api/v1/taxonomy/terms/lookup"
    target_setting = "vocabulary"

    def is_multiple(self, field: FieldDefinition) -> bool:
        return field.multiple or bool(field.get_setting("allow_multiple", True))


class UserReferenceWidget(EntityReferenceWidget):
    id = "user_reference"
    label = "User Reference"
    icon = "👤"
    supported_types = (FieldType.USER_REFERENCE,)
    lookup_url = "/api/v1/users/lookup"
    target_setting = "role"


class BlockReferenceWidget(EntityReferenceWidget):
    """Block picker; blocks are few enough that a plain select list is used when options are supplied."""

    id = "block_reference"
    label = "Block Reference"
    icon = "🧱"
    supported_types = (FieldType.BLOCK_REFERENCE,)
    lookup_url = "/api/v1/blocks/lookup"
    target_setting = "block_type"

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        choices = self.options(field)
        if not choices:
            return super().build_input(field, value, context)
        current = {str(ref_id) for ref_id in _ids(value)}
        attributes = self.base_attributes(field, context)
        attributes.pop("placeholder", None)
        items = [option("", "- Select block -", selected=not current)]
        items += [option(key, text, selected=key in current) for key, text in choices]
        return tag("select", Markup("").join(items), **attributes)
