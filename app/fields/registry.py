"""
Widget Registry

WidgetRegistry: stores widget instances by id, picks the widget for a field,
and runs render/validate/prepare calls through it.

The registry is built once at startup (`build_widget_registry`) and is
read-only while requests are served. Render calls never touch shared asset
state: each RenderResult carries its own AssetCollection and callers merge
them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Sequence

from app.exceptions import WidgetNotFoundError, WidgetResolutionError
from app.fields.assets import AssetCollection
from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType, FieldTypeRegistry
from app.fields.validation import is_empty
from app.fields.widgets import RepeaterWidget, Widget, WidgetMetadata, core_widgets
from app.fields.widgets.repeater import as_list

if TYPE_CHECKING:
    from app.modules import ModuleDescriptor

logger = logging.getLogger(__name__)


class WidgetRegistry:
    """
    In-process registry for field widgets.

    Re-registering an id replaces the widget but keeps the id's original
    position, so modules can override a core widget without changing the
    order selectors list widgets in.
    """

    def __init__(self, field_types: FieldTypeRegistry | None = None) -> None:
        self.field_types = field_types or FieldTypeRegistry()
        self._widgets: dict[str, Widget] = {}
        self._type_defaults: dict[str, str] = {}

    # ── Registration ──────────────────────────────────────────────────────────

    def register(self, widget: Widget) -> None:
        """Register a widget under its id; the last registration for an id wins."""
        if widget.id in self._widgets:
            logger.info("Widget %s overridden by %s", widget.id, type(widget).__name__)
        self._widgets[widget.id] = widget
        logger.debug("Widget registered: %s", widget.id)

    def register_many(self, widgets: Iterable[Widget]) -> None:
        for widget in widgets:
            self.register(widget)

    def set_type_default(self, field_type: str | FieldType, widget_id: str) -> None:
        """Override the default widget for a field type."""
        if widget_id not in self._widgets:
            raise WidgetNotFoundError(widget_id)
        self._type_defaults[_type_id(field_type)] = widget_id

    # ── Lookup ────────────────────────────────────────────────────────────────

    def get(self, widget_id: str) -> Widget:
        widget = self._widgets.get(widget_id)
        if widget is None:
            raise WidgetNotFoundError(widget_id)
        return widget

    def has(self, widget_id: str | None) -> bool:
        return widget_id is not None and widget_id in self._widgets

    def all(self) -> list[Widget]:
        """Return all widgets in registration order."""
        return list(self._widgets.values())

    def get_for_type(self, field_type: str | FieldType) -> list[Widget]:
        """
        Widgets supporting a field type, highest priority first.

        Equal priorities keep registration order (sorted() is stable).
        """
        type_id = _type_id(field_type)
        compatible = [widget for widget in self._widgets.values() if widget.supports(type_id)]
        return sorted(compatible, key=lambda widget: -widget.priority)

    def default_widget_id(self, field_type: str | FieldType) -> str | None:
        type_id = _type_id(field_type)
        if type_id in self._type_defaults:
            return self._type_defaults[type_id]
        known = self.field_types.find(type_id)
        return known.default_widget if known else None

    def get_options_for_type(self, field_type: str | FieldType) -> list[dict[str, str]]:
        """Id/label pairs for a widget selector, in get_for_type() order."""
        return [{"id": widget.id, "label": widget.label} for widget in self.get_for_type(field_type)]

    def grouped_by_category(self) -> dict[str, list[WidgetMetadata]]:
        grouped: dict[str, list[WidgetMetadata]] = {}
        for widget in self._widgets.values():
            grouped.setdefault(widget.category, []).append(widget.metadata())
        return grouped

    def all_metadata(self) -> list[WidgetMetadata]:
        return [widget.metadata() for widget in self._widgets.values()]

    # ── Resolution ────────────────────────────────────────────────────────────

    def resolve(self, field: FieldDefinition) -> Widget:
        """
        Pick the widget for a field.

        1. `field.widget` when it is registered and supports the field type.
        2. The type's default widget (registry override, else the FieldType
           default) when registered and compatible.
        3. The compatible widget with the highest priority.

        Raises WidgetResolutionError when no registered widget supports the
        field type; that is a setup problem, not bad input.
        """
        type_id = field.field_type

        if field.widget:
            explicit = self._widgets.get(field.widget)
            if explicit is not None and explicit.supports(type_id):
                return explicit
            logger.debug(
                "Widget %s not usable for field %s (%s); falling back",
                field.widget,
                field.machine_name,
                type_id,
            )

        default_id = self.default_widget_id(type_id)
        if default_id:
            default = self._widgets.get(default_id)
            if default is not None and default.supports(type_id):
                return default

        candidates = self.get_for_type(type_id)
        if candidates:
            return candidates[0]

        logger.error("No widget supports field type %s (field %s)", type_id, field.machine_name)
        raise WidgetResolutionError(type_id, field.machine_name)

    def widget_for(self, field: FieldDefinition) -> Widget:
        """The resolved widget, wrapped in a repeater for multi-value fields it cannot edit itself."""
        widget = self.resolve(field)
        if field.multiple and not widget.handles_multiple:
            return RepeaterWidget(widget)
        return widget

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render_field(self, field: FieldDefinition, value: Any, context: RenderContext | None = None) -> RenderResult:
        """Render a field in edit mode. A None value falls back to the field's default."""
        context = context or RenderContext.create()
        if value is None and field.default_value is not None:
            value = field.default_value
        widget = self.widget_for(field)
        result = widget.render_field(field, value, context)
        # Widgets that build their own result still get their declared assets
        assets = AssetCollection().merge(result.assets).merge(widget.assets())
        return RenderResult(result.html, assets)

    def render_fields(
        self,
        fields: Sequence[FieldDefinition],
        values: Mapping[str, Any] | None = None,
        context: RenderContext | None = None,
    ) -> RenderResult:
        values = values or {}
        combined = RenderResult()
        for field in fields:
            combined = combined.combine(self.render_field(field, values.get(field.machine_name), context))
        return combined

    def render_field_display(
        self, field: FieldDefinition, value: Any, context: RenderContext | None = None
    ) -> RenderResult:
        context = context or RenderContext.for_display()
        return self.widget_for(field).render_display(field, value, context)

    def render_fields_display(
        self,
        fields: Sequence[FieldDefinition],
        values: Mapping[str, Any] | None = None,
        context: RenderContext | None = None,
    ) -> RenderResult:
        values = values or {}
        combined = RenderResult()
        for field in fields:
            combined = combined.combine(self.render_field_display(field, values.get(field.machine_name), context))
        return combined

    # ── Values ────────────────────────────────────────────────────────────────

    def validate_field(self, field: FieldDefinition, value: Any) -> list[str]:
        """Field-level errors first, then widget-level errors. Nothing is deduplicated."""
        widget = self.widget_for(field)
        if field.multiple:
            errors = self._validate_multiple(field, value)
        else:
            errors = field.validate_value(value)
        if is_empty(value):
            return errors
        return errors + widget.validate(field, value)

    def _validate_multiple(self, field: FieldDefinition, value: Any) -> list[str]:
        items = as_list(value)
        if not items:
            return [f"{field.label} is required"] if field.required else []
        errors = []
        if field.cardinality > 0 and len(items) > field.cardinality:
            errors.append(f"{field.label} allows at most {field.cardinality} values")
        single = field.replace(multiple=False, cardinality=1, required=False)
        if self.resolve(field).handles_multiple:
            return errors + single.validate_value(items)
        for index, item in enumerate(items):
            errors.extend(f"Item {index + 1}: {error}" for error in single.validate_value(item))
        return errors

    def validate_fields(self, fields: Sequence[FieldDefinition], values: Mapping[str, Any]) -> dict[str, list[str]]:
        """Errors per machine name; fields without errors are left out."""
        results = {}
        for field in fields:
            errors = self.validate_field(field, values.get(field.machine_name))
            if errors:
                results[field.machine_name] = errors
        return results

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        return self.widget_for(field).prepare_value(field, value)

    def prepare_values(self, fields: Sequence[FieldDefinition], values: Mapping[str, Any]) -> dict[str, Any]:
        """Storage-ready values for the submitted fields; absent fields are skipped."""
        return {
            field.machine_name: self.prepare_value(field, values[field.machine_name])
            for field in fields
            if field.machine_name in values
        }

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        return self.widget_for(field).format_value(field, value)


def _type_id(field_type: str | FieldType) -> str:
    return field_type.value if isinstance(field_type, FieldType) else str(field_type)


def build_widget_registry(
    field_types: FieldTypeRegistry | None = None,
    modules: Sequence["ModuleDescriptor"] | None = None,
) -> WidgetRegistry:
    """Build the process-wide registry from the core widgets plus every module's widgets."""
    from app.modules import enabled_modules

    modules = enabled_modules(None if modules is None else list(modules))

    registry = WidgetRegistry(field_types)
    registry.register_many(core_widgets())
    for module in modules:
        registry.register_many(module.create_widgets())
        for field_type, widget_id in module.type_defaults.items():
            registry.set_type_default(field_type, widget_id)

    logger.info("Widget registry built with %d widgets", len(registry.all()))
    return registry
