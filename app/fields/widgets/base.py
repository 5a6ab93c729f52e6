"""
Widget Base Classes

WidgetMetadata: static description of a widget (id, label, supported field types).
Widget: abstract base class every widget subclasses.

A widget is stateless: one instance per id lives in the WidgetRegistry for the
life of the process. Per-call data arrives through the FieldDefinition, the
value and the RenderContext.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar

from markupsafe import Markup

from app.fields.assets import AssetCollection
from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import is_empty, normalize_options

CONTROL_CLASS = "field-widget__control"


@dataclass(frozen=True)
class WidgetMetadata:
    """
    Declarative metadata describing a widget.

    Attributes:
        id:               Registry key, e.g. "text_input".
        label:            Human-readable name shown in widget selectors.
        category:         Grouping in the admin UI, e.g. "Text", "Media".
        icon:             Short icon glyph for selectors.
        priority:         Higher wins when several widgets fit a field type
                          and no explicit or default widget applies.
        supported_types:  Field type ids the widget can edit.
        handles_multiple: True when one widget instance edits a list of values.
    """

    id: str
    label: str
    category: str = "General"
    icon: str = "📝"
    priority: int = 0
    supported_types: tuple[str, ...] = ()
    handles_multiple: bool = False
    css_assets: tuple[str, ...] = field(default_factory=tuple)
    js_assets: tuple[str, ...] = field(default_factory=tuple)

    def supports(self, field_type: str | FieldType) -> bool:
        return str(getattr(field_type, "value", field_type)) in self.supported_types

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "category": self.category,
            "icon": self.icon,
            "priority": self.priority,
            "supported_types": list(self.supported_types),
            "supports_multiple": self.handles_multiple,
        }


class Widget(ABC):
    """
    Abstract base class for all field widgets.

    Subclasses set the class attributes and implement `build_input`. Everything
    else (wrapper markup, display rendering, validation, value conversion) has
    a default that subclasses override only when they need to.
    """

    id: ClassVar[str]
    label: ClassVar[str]
    category: ClassVar[str] = "General"
    icon: ClassVar[str] = "📝"
    priority: ClassVar[int] = 0
    supported_types: ClassVar[tuple[FieldType, ...]] = ()
    handles_multiple: ClassVar[bool] = False
    css_assets: ClassVar[tuple[str, ...]] = ()
    js_assets: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        """Return the bare input markup for edit mode."""
        ...

    # ── Metadata ──────────────────────────────────────────────────────

    def metadata(self) -> WidgetMetadata:
        return WidgetMetadata(
            id=self.id,
            label=self.label,
            category=self.category,
            icon=self.icon,
            priority=self.priority,
            supported_types=tuple(t.value for t in self.supported_types),
            handles_multiple=self.handles_multiple,
            css_assets=tuple(self.css_assets),
            js_assets=tuple(self.js_assets),
        )

    def supports(self, field_type: str | FieldType) -> bool:
        return self.metadata().supports(field_type)

    def settings_schema(self) -> dict[str, Any]:
        """Widget settings schema for admin forms: setting key -> {type, label, default}."""
        return {}

    def assets(self) -> AssetCollection:
        """A fresh collection with the widget's declared CSS/JS."""
        return AssetCollection(css=self.css_assets, js=self.js_assets)

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        return None

    # ── Rendering ─────────────────────────────────────────────────────

    def render_field(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        formatted = self.format_value(field, value)
        input_html = self.build_input(field, formatted, context)
        html = self.build_wrapper(field, input_html, context)

        assets = self.assets()
        script = self.init_script(field, self.field_id(field, context))
        if script:
            assets.add_init_script(script)
        return RenderResult(html, assets)

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return RenderResult(tag("span", "—", class_="field-display field-display--empty"))
        return RenderResult(tag("span", self.display_text(field, value), class_="field-display"))

    def display_text(self, field: FieldDefinition, value: Any) -> str:
        if isinstance(value, (list, tuple)):
            return ", ".join(str(v) for v in value)
        return str(value)

    def build_wrapper(self, field: FieldDefinition, input_html: Markup, context: RenderContext) -> Markup:
        has_error = context.has_errors_for(field.machine_name)
        classes = [
            "field-widget",
            f"field-widget--{self.id}",
            f"field-type--{field.field_type}",
            "field-widget--required" if field.required else "",
            "field-widget--error" if has_error else "",
        ]

        parts = []
        if not context.hide_label:
            parts.append(self.build_label(field, context))
        parts.append(tag("div", input_html, class_="field-widget__input"))
        if not context.hide_help and field.help_text:
            parts.append(tag("div", field.help_text, class_="field-widget__help", id=self.help_id(field, context)))
        if has_error:
            errors = [tag("div", error, class_="field-widget__error") for error in context.errors_for(field.machine_name)]
            parts.append(tag("div", Markup("").join(errors), class_="field-widget__errors"))

        return tag("div", Markup("").join(parts), class_=classes, data_field=field.machine_name)

    def build_label(self, field: FieldDefinition, context: RenderContext) -> Markup:
        content = [field.label]
        if field.required:
            content.append(tag("span", "*", class_="field-widget__required"))
        return tag("label", content, class_="field-widget__label", for_=self.field_id(field, context))

    # ── Naming ────────────────────────────────────────────────────────

    def field_name(self, field: FieldDefinition, context: RenderContext) -> str:
        name = context.field_name(field.machine_name)
        if context.index is not None:
            name = f"{name}[{context.index}]"
        return name

    def field_id(self, field: FieldDefinition, context: RenderContext) -> str:
        return context.field_id(field.machine_name)

    def help_id(self, field: FieldDefinition, context: RenderContext) -> str:
        return f"{self.field_id(field, context)}-help"

    def base_attributes(self, field: FieldDefinition, context: RenderContext) -> dict[str, Any]:
        """Attributes shared by most controls: id, name, required, disabled and so on."""
        return {
            "id": self.field_id(field, context),
            "name": self.field_name(field, context),
            "class_": CONTROL_CLASS,
            "required": field.required,
            "disabled": context.disabled,
            "readonly": context.readonly,
            "aria_describedby": self.help_id(field, context) if field.help_text else None,
            "placeholder": field.get_setting("placeholder") or None,
        }

    # ── Values ────────────────────────────────────────────────────────

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        """Widget-level checks on top of the field's own validation."""
        return []

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        """Convert a submitted form value into its stored form."""
        return value

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        """Convert a stored value into what the edit control shows."""
        return value

    # ── Helpers ───────────────────────────────────────────────────────

    @staticmethod
    def options(field: FieldDefinition) -> list[tuple[str, str]]:
        """(value, label) pairs from the field's `options` setting."""
        return normalize_options(field.get_setting("options", []))

    @staticmethod
    def format_date(value: Any, fmt: str = "%Y-%m-%d") -> str:
        if isinstance(value, (date, datetime)):
            return value.strftime(fmt)
        if isinstance(value, str) and value:
            try:
                return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime(fmt)
            except ValueError:
                return value
        return ""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
