"""Field type catalogue routes."""

from fastapi import APIRouter, Depends

from app.dependencies import get_field_types, get_widget_registry
from app.fields import FieldTypeRegistry, WidgetRegistry

router = APIRouter(prefix="/field-types", tags=["Field Types"])


@router.get("")
async def list_field_types(field_types: FieldTypeRegistry = Depends(get_field_types)):
    """All field types in declaration order."""
    return [field_type.to_dict() for field_type in field_types.all_types()]


@router.get("/grouped")
async def list_field_types_grouped(field_types: FieldTypeRegistry = Depends(get_field_types)):
    """Field types grouped by category, for type pickers."""
    return {
        category: [field_type.to_dict() for field_type in types]
        for category, types in field_types.grouped_by_category().items()
    }


@router.get("/{type_id}")
async def get_field_type(
    type_id: str,
    field_types: FieldTypeRegistry = Depends(get_field_types),
    widgets: WidgetRegistry = Depends(get_widget_registry),
):
    """One field type with the widgets that can edit it."""
    field_type = field_types.by_id(type_id)
    return {
        **field_type.to_dict(),
        "default_widget": widgets.default_widget_id(field_type),
        "widgets": widgets.get_options_for_type(field_type),
    }
