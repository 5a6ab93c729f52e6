"""Request/response schemas for the field, widget and type catalogue endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class FieldCreate(BaseModel):
    """Schema for adding a field to a type. Unset keys fall back to FieldDefinition defaults."""

    model_config = ConfigDict(extra="allow")

    machine_name: str | None = None
    label: str
    type: str = "string"
    required: bool = False
    multiple: bool | None = None
    cardinality: int | None = None
    default: Any = None
    widget: str | None = None
    widget_settings: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    validation: dict[str, Any] = Field(default_factory=dict)
    weight: int | None = None
    description: str | None = None
    help_text: str | None = None
    searchable: bool = False
    translatable: bool = False


class FieldUpdate(BaseModel):
    """Schema for changing a stored field. Machine name and type cannot change."""

    model_config = ConfigDict(extra="allow")

    label: str | None = None
    required: bool | None = None
    multiple: bool | None = None
    cardinality: int | None = None
    default: Any = None
    widget: str | None = None
    widget_settings: dict[str, Any] | None = None
    settings: dict[str, Any] | None = None
    validation: dict[str, Any] | None = None
    weight: int | None = None
    description: str | None = None
    help_text: str | None = None


class ContentTypeCreate(BaseModel):
    # label and type_id are checked by the manager so every input error is a 400
    type_id: str | None = None
    label: str | None = None
    label_plural: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    publishable: bool | None = None
    revisionable: bool | None = None
    translatable: bool | None = None
    has_author: bool | None = None
    has_taxonomy: bool | None = None
    has_media: bool | None = None
    title_field: str | None = None
    slug_field: str | None = None
    url_pattern: str | None = None
    weight: int | None = None
    settings: dict[str, Any] | None = None
    fields: list[FieldCreate] = Field(default_factory=list)


class ContentTypeUpdate(BaseModel):
    label: str | None = None
    label_plural: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    enabled: bool | None = None
    publishable: bool | None = None
    revisionable: bool | None = None
    translatable: bool | None = None
    has_author: bool | None = None
    has_taxonomy: bool | None = None
    has_media: bool | None = None
    url_pattern: str | None = None
    weight: int | None = None
    settings: dict[str, Any] | None = None


class BlockTypeCreate(BaseModel):
    type_id: str | None = None
    label: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    template: str | None = None
    allowed_regions: list[str] | None = None
    cache_ttl: int | None = None
    css_assets: list[str] | None = None
    js_assets: list[str] | None = None
    weight: int | None = None
    settings: dict[str, Any] | None = None
    fields: list[FieldCreate] = Field(default_factory=list)


class BlockTypeUpdate(BaseModel):
    label: str | None = None
    description: str | None = None
    icon: str | None = None
    category: str | None = None
    enabled: bool | None = None
    template: str | None = None
    allowed_regions: list[str] | None = None
    cache_ttl: int | None = None
    css_assets: list[str] | None = None
    js_assets: list[str] | None = None
    weight: int | None = None
    settings: dict[str, Any] | None = None


class FieldOrderUpdate(BaseModel):
    machine_names: list[str] = Field(..., min_length=1)


class WeightsUpdate(BaseModel):
    weights: dict[str, int]


class RenderOptions(BaseModel):
    """RenderContext options; unknown keys are passed through to `RenderContext.options`."""

    model_config = ConfigDict(extra="allow")

    mode: Literal["edit", "display"] = "edit"
    locale: str | None = None
    form_id: str | None = None
    name_prefix: str | None = None
    disabled: bool = False
    readonly: bool = False
    errors: dict[str, list[str]] = Field(default_factory=dict)


class FieldRenderRequest(BaseModel):
    """Render one ad-hoc field definition."""

    field: FieldCreate
    value: Any = None
    context: RenderOptions = Field(default_factory=RenderOptions)


class FieldValidateRequest(BaseModel):
    field: FieldCreate
    value: Any = None


class TypeRenderRequest(BaseModel):
    """Render every field of a type, in form or display order."""

    values: dict[str, Any] = Field(default_factory=dict)
    context: RenderOptions = Field(default_factory=RenderOptions)


class TypeValidateRequest(BaseModel):
    values: dict[str, Any] = Field(default_factory=dict)


class TypeFormRequest(BaseModel):
    """Render a type's complete edit form."""

    values: dict[str, Any] = Field(default_factory=dict)
    errors: dict[str, list[str]] = Field(default_factory=dict)
    form_id: str = "form"
    action: str = ""
    method: Literal["GET", "POST", "get", "post"] = "POST"
    ajax: bool = False
    group_fields: bool = True
    submit_label: str = "Save"
    cancel_url: str | None = None


class RenderResponse(BaseModel):
    html: str
    assets: dict[str, list[str]]


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: dict[str, list[str]]
    values: dict[str, Any] | None = None
