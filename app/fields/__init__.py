"""
Field / widget pipeline.

Public API:
    FieldType             - canonical field kinds (str enum)
    FieldTypeRegistry     - injectable read-only field type catalogue
    FieldDefinition       - immutable field description, parsed with from_mapping()
    AssetCollection       - ordered, deduplicated CSS/JS/init-script references
    RenderContext         - per-render options (mode, locale, names, errors)
    RenderResult          - rendered markup plus its assets
    Widget                - abstract base class for widgets
    WidgetRegistry        - widget lookup, resolution, render and validation
    FormBuilder           - complete edit forms with grouping, CSRF token and actions
    build_widget_registry - startup factory for the process-wide registry
"""

from .assets import AssetCollection
from .context import RenderContext, RenderResult
from .definition import FieldDefinition, parse_fields
from .field_types import FieldType, FieldTypeRegistry
from .form import FormBuilder, FormResult
from .registry import WidgetRegistry, build_widget_registry
from .widgets import Widget, WidgetMetadata

__all__ = [
    "AssetCollection",
    "FieldDefinition",
    "FieldType",
    "FieldTypeRegistry",
    "FormBuilder",
    "FormResult",
    "RenderContext",
    "RenderResult",
    "Widget",
    "WidgetMetadata",
    "WidgetRegistry",
    "build_widget_registry",
    "parse_fields",
]
