from .content_type import (
    BlockTypeCreate,
    BlockTypeUpdate,
    ContentTypeCreate,
    ContentTypeUpdate,
    FieldCreate,
    FieldOrderUpdate,
    FieldRenderRequest,
    FieldUpdate,
    FieldValidateRequest,
    RenderOptions,
    RenderResponse,
    TypeRenderRequest,
    TypeValidateRequest,
    ValidationResponse,
    WeightsUpdate,
)

# Define the public API of this module
__all__ = [
    "BlockTypeCreate",
    "BlockTypeUpdate",
    "ContentTypeCreate",
    "ContentTypeUpdate",
    "FieldCreate",
    "FieldOrderUpdate",
    "FieldRenderRequest",
    "FieldUpdate",
    "FieldValidateRequest",
    "RenderOptions",
    "RenderResponse",
    "TypeRenderRequest",
    "TypeValidateRequest",
    "ValidationResponse",
    "WeightsUpdate",
]
