"""Plain text inputs: single line, multi line, email, url, phone, password, hidden."""

from __future__ import annotations

from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import EMAIL_RE, URL_RE, is_empty
from app.fields.widgets.base import Widget
from app.utils.sanitize import is_safe_url


class TextInputWidget(Widget):
    id = "text_input"
    label = "Text Input"
    category = "Text"
    icon = "📝"
    priority = 0
    supported_types = (
        FieldType.STRING,
        FieldType.TEXT,
        FieldType.EMAIL,
        FieldType.URL,
        FieldType.PHONE,
        FieldType.SLUG,
    )
    input_type = "text"

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        max_length = field.get_setting("max_length") or field.validation.get("max_length")
        return tag(
            "input",
            type=self.input_type,
            value="" if value is None else value,
            maxlength=max_length or None,
            **attributes,
        )

    def settings_schema(self) -> dict[str, Any]:
        return {
            "placeholder": {"type": "string", "label": "Placeholder", "default": ""},
            "max_length": {"type": "integer", "label": "Maximum length", "default": 255},
        }

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class TextareaWidget(TextInputWidget):
    id = "textarea"
    label = "Text Area"
    icon = "📄"
    priority = 5
    supported_types = (
        FieldType.TEXT,
        FieldType.TEXTAREA,
        FieldType.STRING,
        FieldType.HTML,
        FieldType.MARKDOWN,
        FieldType.CODE,
        FieldType.JSON,
    )

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        rows = field.get_setting("rows", 5)
        return tag("textarea", "" if value is None else str(value), rows=rows, **self.base_attributes(field, context))

    def settings_schema(self) -> dict[str, Any]:
        return {
            "rows": {"type": "integer", "label": "Rows", "default": 5},
            "placeholder": {"type": "string", "label": "Placeholder", "default": ""},
        }

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if value is None:
            return None
        # Keep inner whitespace, only trim the ends
        value = str(value).strip()
        return value or None

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        lines = str(value).splitlines()
        content = []
        for i, line in enumerate(lines):
            if i:
                content.append(Markup("<br>"))
            content.append(line)
        return RenderResult(tag("div", content, class_="field-display field-display--text"))


class EmailWidget(TextInputWidget):
    id = "email"
    label = "Email"
    icon = "✉️"
    priority = 10
    supported_types = (FieldType.EMAIL,)
    input_type = "email"

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value) or EMAIL_RE.match(str(value)):
            return []
        return ["Please enter a valid email address"]

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        value = super().prepare_value(field, value)
        return value.lower() if value else value

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(tag("a", value, href=f"mailto:{value}", class_="field-display field-display--email"))


class UrlWidget(TextInputWidget):
    id = "url"
    label = "URL"
    icon = "🔗"
    priority = 10
    supported_types = (FieldType.URL,)
    input_type = "url"

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value):
            return []
        if not is_safe_url(str(value)) or not URL_RE.match(str(value)):
            return ["Please enter a valid URL"]
        return []

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value) or not is_safe_url(str(value)):
            return super().render_display(field, value, context)
        target = "_blank" if field.get_setting("open_in_new_tab") else None
        rel = "noopener noreferrer" if target else None
        return RenderResult(tag("a", value, href=value, target=target, rel=rel, class_="field-display field-display--url"))


class PhoneWidget(TextInputWidget):
    id = "phone"
    label = "Phone"
    icon = "📞"
    priority = 10
    supported_types = (FieldType.PHONE,)
    input_type = "tel"

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value):
            return []
        digits = [c for c in str(value) if c.isdigit()]
        allowed = set("0123456789+-() .")
        if len(digits) < 7 or any(c not in allowed for c in str(value)):
            return ["Please enter a valid phone number"]
        return []


class PasswordWidget(TextInputWidget):
    id = "password"
    label = "Password"
    icon = "🔒"
    category = "Special"
    priority = -10
    supported_types = (FieldType.STRING,)
    input_type = "password"

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        # Stored secrets are never echoed back into the form
        return None

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(tag("span", "••••••••", class_="field-display field-display--password"))


class HiddenWidget(Widget):
    id = "hidden"
    label = "Hidden"
    icon = "👁"
    category = "Special"
    priority = -100
    supported_types = (
        FieldType.STRING,
        FieldType.TEXT,
        FieldType.INTEGER,
        FieldType.FLOAT,
        FieldType.BOOLEAN,
        FieldType.SLUG,
        FieldType.JSON,
    )

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return tag(
            "input",
            type="hidden",
            id=self.field_id(field, context),
            name=self.field_name(field, context),
            value="" if value is None else value,
        )

    def build_wrapper(self, field: FieldDefinition, input_html: Markup, context: RenderContext) -> Markup:
        return input_html
