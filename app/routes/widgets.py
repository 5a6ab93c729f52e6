"""Widget catalogue routes plus ad-hoc render and validate calls for a single field."""

from fastapi import APIRouter, Depends

from app.dependencies import get_field_types, get_widget_registry
from app.fields import FieldDefinition, FieldTypeRegistry, RenderContext, WidgetRegistry
from app.schemas.content_type import (
    FieldRenderRequest,
    FieldValidateRequest,
    RenderOptions,
    RenderResponse,
    ValidationResponse,
)

router = APIRouter(prefix="/widgets", tags=["Widgets"])


def build_context(options: RenderOptions) -> RenderContext:
    """RenderContext from request options; unset keys keep their defaults."""
    data = options.model_dump(exclude_none=True)
    if data.get("mode") == "display":
        return RenderContext.for_display(**data)
    return RenderContext.create(**data)


@router.get("")
async def list_widgets(widgets: WidgetRegistry = Depends(get_widget_registry)):
    """All registered widgets in registration order."""
    return [metadata.to_dict() for metadata in widgets.all_metadata()]


@router.get("/grouped")
async def list_widgets_grouped(widgets: WidgetRegistry = Depends(get_widget_registry)):
    return {
        category: [metadata.to_dict() for metadata in items]
        for category, items in widgets.grouped_by_category().items()
    }


@router.get("/for-type/{field_type}")
async def widgets_for_type(
    field_type: str,
    field_types: FieldTypeRegistry = Depends(get_field_types),
    widgets: WidgetRegistry = Depends(get_widget_registry),
):
    """Widget selector options for a field type, highest priority first."""
    known = field_types.by_id(field_type)
    return {
        "field_type": known.value,
        "default_widget": widgets.default_widget_id(known),
        "options": widgets.get_options_for_type(known),
    }


@router.get("/{widget_id}")
async def get_widget(widget_id: str, widgets: WidgetRegistry = Depends(get_widget_registry)):
    widget = widgets.get(widget_id)
    return {**widget.metadata().to_dict(), "settings_schema": widget.settings_schema()}


@router.post("/render", response_model=RenderResponse)
async def render_field(payload: FieldRenderRequest, widgets: WidgetRegistry = Depends(get_widget_registry)):
    """Render one field definition with the widget the registry resolves for it."""
    field = FieldDefinition.from_mapping(payload.field.model_dump(exclude_unset=True))
    context = build_context(payload.context)
    if context.is_display:
        result = widgets.render_field_display(field, payload.value, context)
    else:
        result = widgets.render_field(field, payload.value, context)
    return result.to_dict()


@router.post("/validate", response_model=ValidationResponse)
async def validate_field(payload: FieldValidateRequest, widgets: WidgetRegistry = Depends(get_widget_registry)):
    field = FieldDefinition.from_mapping(payload.field.model_dump(exclude_unset=True))
    errors = widgets.validate_field(field, payload.value)
    return {
        "is_valid": not errors,
        "errors": {field.machine_name: errors} if errors else {},
        "values": None if errors else {field.machine_name: widgets.prepare_value(field, payload.value)},
    }
