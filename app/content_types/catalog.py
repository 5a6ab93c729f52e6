"""
Catalogue entries.

A type in the merged catalogue is either CodeDefinedType (wrapping a
descriptor) or DatabaseDefinedType (wrapping an ORM row). Both expose the same
read interface, so callers never branch on where a type came from except
through `is_mutable`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Sequence, Union

from app.content_types.descriptors import BlockTypeDescriptor, ContentTypeDescriptor
from app.fields.definition import FieldDefinition, parse_fields
from app.models.content_type import CONTENT_TABLE_PREFIX, BlockTypeEntity, ContentTypeEntity

FLAGS = ("publishable", "revisionable", "translatable", "has_author", "has_taxonomy", "has_media")

# Keys that only exist on one of the two kinds; copied into to_dict() when present
CONTENT_KEYS = ("label_plural", "title_field", "slug_field", "url_pattern")
BLOCK_KEYS = ("template", "allowed_regions", "cache_ttl", "css_assets", "js_assets")


def sort_by_weight(fields: Sequence[FieldDefinition], weights: Mapping[str, int] | None = None) -> list[FieldDefinition]:
    """
    Order fields by weight, ascending.

    `weights` (a form or display weight map) overrides a field's own weight.
    sorted() is stable, so equal weights keep declaration order.
    """
    weights = weights or {}
    return sorted(fields, key=lambda f: int(weights.get(f.machine_name, f.weight)))


class _Entry:
    source: ClassVar[str]
    is_mutable: ClassVar[bool]

    @property
    def _record(self) -> Any:
        raise NotImplementedError

    @property
    def entity(self) -> ContentTypeEntity | BlockTypeEntity | None:
        return None

    # ── Uniform accessors ─────────────────────────────────────────────────────

    @property
    def id(self) -> str:
        return self._record.type_id

    @property
    def label(self) -> str:
        return self._record.label

    @property
    def label_plural(self) -> str:
        return getattr(self._record, "label_plural", None) or f"{self.label}s"

    @property
    def description(self) -> str | None:
        return self._record.description

    @property
    def icon(self) -> str:
        return self._record.icon

    @property
    def category(self) -> str:
        return self._record.category

    @property
    def weight(self) -> int:
        return self._record.weight or 0

    @property
    def settings(self) -> dict[str, Any]:
        return dict(self._record.settings or {})

    @property
    def is_system(self) -> bool:
        return bool(getattr(self._record, "is_system", self.source == "code"))

    @property
    def enabled(self) -> bool:
        return bool(getattr(self._record, "enabled", True))

    @property
    def flags(self) -> dict[str, bool]:
        if self.kind != "content":
            return {}
        return {flag: bool(getattr(self._record, flag)) for flag in FLAGS}

    @property
    def table_name(self) -> str | None:
        if self.kind != "content":
            return None
        return getattr(self._record, "table_name", None) or f"{CONTENT_TABLE_PREFIX}{self.id}"

    @property
    def declared_fields(self) -> list[FieldDefinition]:
        """Fields in stored/declared order."""
        raise NotImplementedError

    @property
    def fields(self) -> list[FieldDefinition]:
        return sort_by_weight(self.declared_fields)

    def get_field(self, machine_name: str) -> FieldDefinition | None:
        for field in self.declared_fields:
            if field.machine_name == machine_name:
                return field
        return None

    def form_fields(self) -> list[FieldDefinition]:
        return sort_by_weight(self.declared_fields, self.settings.get("form_weights"))

    def display_fields(self) -> list[FieldDefinition]:
        return sort_by_weight(self.declared_fields, self.settings.get("display_weights"))

    # ── Serialisation ─────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Same shape for both sources; `fields` maps machine_name -> normalized mapping."""
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind,
            "label": self.label,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
            "source": self.source,
            "is_system": self.is_system,
            "is_mutable": self.is_mutable,
            "enabled": self.enabled,
            "weight": self.weight,
            "fields": {field.machine_name: field.to_mapping() for field in self.fields},
            "settings": self.settings,
            "entity_id": self.entity.id if self.entity is not None else None,
        }
        keys = CONTENT_KEYS if self.kind == "content" else BLOCK_KEYS
        for key in keys:
            value = getattr(self._record, key, None)
            data[key] = list(value) if isinstance(value, tuple) else value
        if self.kind == "content":
            data["label_plural"] = self.label_plural
            data["table_name"] = self.table_name
            data.update(self.flags)
        return data

    def summary(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "label_plural": self.label_plural if self.kind == "content" else None,
            "description": self.description,
            "icon": self.icon,
            "category": self.category,
            "source": self.source,
            "field_count": len(self.declared_fields),
            "is_mutable": self.is_mutable,
        }


@dataclass(frozen=True)
class CodeDefinedType(_Entry):
    descriptor: ContentTypeDescriptor | BlockTypeDescriptor

    source: ClassVar[str] = "code"
    is_mutable: ClassVar[bool] = False

    @property
    def kind(self) -> str:
        return "content" if isinstance(self.descriptor, ContentTypeDescriptor) else "block"

    @property
    def _record(self) -> Any:
        return self.descriptor

    @property
    def declared_fields(self) -> list[FieldDefinition]:
        return list(self.descriptor.fields)


@dataclass(frozen=True)
class DatabaseDefinedType(_Entry):
    row: ContentTypeEntity | BlockTypeEntity

    source: ClassVar[str] = "database"
    is_mutable: ClassVar[bool] = True

    @property
    def kind(self) -> str:
        return "content" if isinstance(self.row, ContentTypeEntity) else "block"

    @property
    def _record(self) -> Any:
        return self.row

    @property
    def entity(self) -> ContentTypeEntity | BlockTypeEntity:
        return self.row

    @property
    def declared_fields(self) -> list[FieldDefinition]:
        return parse_fields(self.row.fields)


CatalogEntry = Union[CodeDefinedType, DatabaseDefinedType]
