"""
Code-defined type descriptors.

Modules declare their content and block types as descriptor instances in a
static list; the managers register them at startup. Field entries may be
given as FieldDefinition objects or raw mappings and are parsed here, once.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from app.fields.definition import FieldDefinition, parse_fields, validate_machine_name


def _parse(fields: Any) -> tuple[FieldDefinition, ...]:
    parsed = tuple(parse_fields(list(fields) if isinstance(fields, tuple) else fields))
    seen: set[str] = set()
    for definition in parsed:
        key = definition.machine_name.lower()
        if key in seen:
            raise ValueError(f"Duplicate field '{definition.machine_name}' in type descriptor")
        seen.add(key)
    return parsed


@dataclass(frozen=True)
class ContentTypeDescriptor:
    """
    Declarative description of a content type shipped in code.

    Attributes:
        type_id:      Machine id, e.g. "page". Also names the content table.
        label:        Singular label, e.g. "Page".
        fields:       Field definitions (or raw mappings) in declaration order.
        table_name:   Backing table; defaults to "content_<type_id>".
    """

    type_id: str
    label: str
    label_plural: str | None = None
    description: str | None = None
    icon: str = "📄"
    category: str = "Content"
    fields: tuple[FieldDefinition, ...] = ()
    publishable: bool = True
    revisionable: bool = False
    translatable: bool = False
    has_author: bool = True
    has_taxonomy: bool = True
    has_media: bool = True
    title_field: str = "title"
    slug_field: str | None = "slug"
    url_pattern: str | None = None
    table_name: str | None = None
    weight: int = 0
    settings: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_machine_name(self.type_id)
        object.__setattr__(self, "fields", _parse(self.fields))
        if self.table_name is None:
            object.__setattr__(self, "table_name", f"content_{self.type_id}")
        if self.label_plural is None:
            object.__setattr__(self, "label_plural", f"{self.label}s")


@dataclass(frozen=True)
class BlockTypeDescriptor:
    """Declarative description of a block type shipped in code."""

    type_id: str
    label: str
    description: str | None = None
    icon: str = "🧱"
    category: str = "Basic"
    fields: tuple[FieldDefinition, ...] = ()
    template: str | None = None
    allowed_regions: tuple[str, ...] = ()
    cache_ttl: int = 3600
    css_assets: tuple[str, ...] = ()
    js_assets: tuple[str, ...] = ()
    weight: int = 0
    settings: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        validate_machine_name(self.type_id)
        object.__setattr__(self, "fields", _parse(self.fields))
