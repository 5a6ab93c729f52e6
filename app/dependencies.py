"""FastAPI dependencies for the registries built at startup (see main.create_app)."""

from fastapi import Request

from app.content_types import BlockManager, ContentTypeManager
from app.fields import FieldTypeRegistry, WidgetRegistry


def get_field_types(request: Request) -> FieldTypeRegistry:
    return request.app.state.field_types


def get_widget_registry(request: Request) -> WidgetRegistry:
    return request.app.state.widgets


def get_content_type_manager(request: Request) -> ContentTypeManager:
    return request.app.state.content_types


def get_block_manager(request: Request) -> BlockManager:
    return request.app.state.block_types
