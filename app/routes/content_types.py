"""
Content type and block type routes.

Both catalogues expose the same surface, so the routers are built by one
factory bound to a manager dependency and the create/update schemas.
"""

from typing import Any, Callable

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.content_types import TypeManager
from app.content_types.catalog import CatalogEntry
from app.database import get_db
from app.dependencies import get_block_manager, get_content_type_manager, get_widget_registry
from app.exceptions import ContentTypeNotFoundError, NotFoundError
from app.fields import FormBuilder, WidgetRegistry
from app.routes.widgets import build_context
from app.schemas.content_type import (
    BlockTypeCreate,
    BlockTypeUpdate,
    ContentTypeCreate,
    ContentTypeUpdate,
    FieldCreate,
    FieldOrderUpdate,
    FieldUpdate,
    RenderResponse,
    TypeFormRequest,
    TypeRenderRequest,
    TypeValidateRequest,
    ValidationResponse,
    WeightsUpdate,
)


def _create_data(payload) -> dict[str, Any]:
    data = payload.model_dump(exclude_none=True, exclude={"fields"})
    data["fields"] = [field.model_dump(exclude_unset=True) for field in payload.fields]
    return data


def build_type_router(
    prefix: str,
    tag: str,
    get_manager: Callable[..., TypeManager],
    create_schema: type,
    update_schema: type,
) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[tag])

    async def require_entry(manager: TypeManager, db: AsyncSession, type_id: str) -> CatalogEntry:
        entry = await manager.get_entry(db, type_id)
        if entry is None:
            raise ContentTypeNotFoundError(type_id, resource_type=manager.resource_type)
        return entry

    # ── Catalogue ─────────────────────────────────────────────────────────────

    @router.get("")
    async def list_types(manager: TypeManager = Depends(get_manager), db: AsyncSession = Depends(get_db)):
        """Merged catalogue of code-defined and database-defined types."""
        return await manager.get_types(db)

    @router.get("/grouped")
    async def list_types_grouped(manager: TypeManager = Depends(get_manager), db: AsyncSession = Depends(get_db)):
        return await manager.get_types_grouped(db)

    @router.get("/{type_id}")
    async def get_type(type_id: str, manager: TypeManager = Depends(get_manager), db: AsyncSession = Depends(get_db)):
        return (await require_entry(manager, db, type_id)).to_dict()

    @router.post("", status_code=status.HTTP_201_CREATED)
    async def create_type(
        payload: create_schema,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        entry = await manager.create_database_type(db, _create_data(payload))
        return entry.to_dict()

    @router.patch("/{type_id}")
    async def update_type(
        type_id: str,
        payload: update_schema,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        entry = await manager.update_database_type(db, type_id, payload.model_dump(exclude_unset=True))
        return entry.to_dict()

    @router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_type(
        type_id: str,
        drop_table: bool = False,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        await manager.delete_database_type(db, type_id, drop_table=drop_table)

    # ── Fields ────────────────────────────────────────────────────────────────

    @router.post("/{type_id}/fields", status_code=status.HTTP_201_CREATED)
    async def add_field(
        type_id: str,
        payload: FieldCreate,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        field = await manager.add_field_to_type(db, type_id, payload.model_dump(exclude_unset=True))
        return field.to_mapping()

    @router.patch("/{type_id}/fields/{machine_name}")
    async def update_field(
        type_id: str,
        machine_name: str,
        payload: FieldUpdate,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        field = await manager.update_field_on_type(db, type_id, machine_name, payload.model_dump(exclude_unset=True))
        return field.to_mapping()

    @router.delete("/{type_id}/fields/{machine_name}", status_code=status.HTTP_204_NO_CONTENT)
    async def remove_field(
        type_id: str,
        machine_name: str,
        drop_column: bool = False,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        if not await manager.remove_field_from_type(db, type_id, machine_name, drop_column=drop_column):
            raise NotFoundError("Field", machine_name)

    @router.put("/{type_id}/fields/order")
    async def reorder_fields(
        type_id: str,
        payload: FieldOrderUpdate,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        fields = await manager.reorder_fields(db, type_id, payload.machine_names)
        return [field.to_mapping() for field in fields]

    @router.put("/{type_id}/form-weights")
    async def set_form_weights(
        type_id: str,
        payload: WeightsUpdate,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        await manager.set_form_weights(db, type_id, payload.weights)
        return [field.machine_name for field in await manager.get_form_fields(db, type_id)]

    @router.put("/{type_id}/display-weights")
    async def set_display_weights(
        type_id: str,
        payload: WeightsUpdate,
        manager: TypeManager = Depends(get_manager),
        db: AsyncSession = Depends(get_db),
    ):
        await manager.set_display_weights(db, type_id, payload.weights)
        return [field.machine_name for field in await manager.get_display_fields(db, type_id)]

    # ── Render and validate ───────────────────────────────────────────────────

    @router.post("/{type_id}/render", response_model=RenderResponse)
    async def render_type(
        type_id: str,
        payload: TypeRenderRequest,
        manager: TypeManager = Depends(get_manager),
        widgets: WidgetRegistry = Depends(get_widget_registry),
        db: AsyncSession = Depends(get_db),
    ):
        """Render the type's form (edit mode) or its display (display mode)."""
        entry = await require_entry(manager, db, type_id)
        context = build_context(payload.context)
        if context.is_display:
            result = widgets.render_fields_display(entry.display_fields(), payload.values, context)
        else:
            result = widgets.render_fields(entry.form_fields(), payload.values, context)
        return result.to_dict()

    @router.post("/{type_id}/form", response_model=RenderResponse)
    async def render_form(
        type_id: str,
        payload: TypeFormRequest,
        manager: TypeManager = Depends(get_manager),
        widgets: WidgetRegistry = Depends(get_widget_registry),
        db: AsyncSession = Depends(get_db),
    ):
        """Render the type's complete edit form, grouped by each field's `group` setting."""
        entry = await require_entry(manager, db, type_id)
        builder = FormBuilder(
            widgets,
            id=payload.form_id,
            action=payload.action,
            method=payload.method.upper(),
            ajax=payload.ajax,
            group_fields=payload.group_fields,
            submit_label=payload.submit_label,
            cancel_url=payload.cancel_url,
            errors=payload.errors,
        )
        return builder.build(entry.form_fields(), payload.values).to_dict()

    @router.post("/{type_id}/validate", response_model=ValidationResponse)
    async def validate_values(
        type_id: str,
        payload: TypeValidateRequest,
        manager: TypeManager = Depends(get_manager),
        widgets: WidgetRegistry = Depends(get_widget_registry),
        db: AsyncSession = Depends(get_db),
    ):
        entry = await require_entry(manager, db, type_id)
        errors = widgets.validate_fields(entry.fields, payload.values)
        return {
            "is_valid": not errors,
            "errors": errors,
            "values": None if errors else widgets.prepare_values(entry.fields, payload.values),
        }

    return router


content_types_router = build_type_router(
    "/content-types", "Content Types", get_content_type_manager, ContentTypeCreate, ContentTypeUpdate
)
block_types_router = build_type_router("/block-types", "Block Types", get_block_manager, BlockTypeCreate, BlockTypeUpdate)

