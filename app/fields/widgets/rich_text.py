"""Rich text editors: WYSIWYG, Markdown, code."""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import is_empty
from app.fields.widgets.base import Widget
from app.utils.sanitize import sanitize_html


class WysiwygWidget(Widget):
    id = "wysiwyg"
    label = "WYSIWYG Editor"
    category = "Rich Text"
    icon = "🖋"
    priority = 20
    supported_types = (FieldType.HTML, FieldType.TEXT, FieldType.TEXTAREA)
    css_assets = ("/assets/widgets/wysiwyg/editor.css",)
    js_assets = ("/assets/widgets/wysiwyg/editor.js",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        toolbar = field.get_setting("toolbar", "basic")
        return tag(
            "textarea",
            "" if value is None else str(value),
            rows=field.get_setting("rows", 10),
            data_editor="wysiwyg",
            data_toolbar=toolbar,
            **self.base_attributes(field, context),
        )

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        toolbar = json.dumps(field.get_setting("toolbar", "basic"))
        return f"CmsWidgets.wysiwyg({json.dumps(element_id)}, {{toolbar: {toolbar}}});"

    def settings_schema(self) -> dict[str, Any]:
        return {
            "toolbar": {"type": "select", "label": "Toolbar", "options": ["basic", "full"], "default": "basic"},
            "rows": {"type": "integer", "label": "Rows", "default": 10},
        }

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        return sanitize_html(str(value))

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(tag("div", Markup(sanitize_html(str(value))), class_="field-display field-display--html"))


class MarkdownWidget(Widget):
    id = "markdown"
    label = "Markdown Editor"
    category = "Rich Text"
    icon = "Ⓜ"
    priority = 20
    supported_types = (FieldType.MARKDOWN, FieldType.TEXT, FieldType.TEXTAREA)
    css_assets = ("/assets/widgets/markdown/editor.css",)
    js_assets = ("/assets/widgets/markdown/editor.js",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return tag(
            "textarea",
            "" if value is None else str(value),
            rows=field.get_setting("rows", 12),
            data_editor="markdown",
            data_preview="true" if field.get_setting("preview", True) else "false",
            **self.base_attributes(field, context),
        )

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        return f"CmsWidgets.markdown({json.dumps(element_id)});"

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        # Rendered to HTML client side; the server emits the escaped source
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(tag("div", str(value), class_="field-display field-display--markdown", data_markdown=True))


class CodeWidget(Widget):
    id = "code"
    label = "Code Editor"
    category = "Rich Text"
    icon = "⌨"
    priority = 20
    supported_types = (FieldType.CODE, FieldType.TEXT, FieldType.JSON, FieldType.HTML)
    css_assets = ("/assets/widgets/code/editor.css",)
    js_assets = ("/assets/widgets/code/editor.js",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        if value is not None and not isinstance(value, str):
            value = json.dumps(value, indent=2)
        return tag(
            "textarea",
            "" if value is None else value,
            rows=field.get_setting("rows", 15),
            spellcheck="false",
            data_editor="code",
            data_language=field.get_setting("language", "plaintext"),
            **self.base_attributes(field, context),
        )

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        language = json.dumps(field.get_setting("language", "plaintext"))
        return f"CmsWidgets.code({json.dumps(element_id)}, {{language: {language}}});"

    def settings_schema(self) -> dict[str, Any]:
        return {
            "language": {"type": "string", "label": "Language", "default": "plaintext"},
            "rows": {"type": "integer", "label": "Rows", "default": 15},
        }

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        language = field.get_setting("language", "plaintext")
        code = tag("code", str(value), class_=f"language-{language}")
        return RenderResult(tag("pre", code, class_="field-display field-display--code"))
