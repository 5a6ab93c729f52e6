"""
Content type and block type managers.

Each manager merges two sources into one catalogue: code-defined types
registered at startup from module descriptors, and database-defined types
stored as rows. Only database-defined types can be changed. For content types
every field change is mirrored on the physical `content_<type_id>` table when
schema sync is enabled; the DDL runs before the commit and any failure rolls
the session back.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings as app_settings
from app.content_types.catalog import CatalogEntry, CodeDefinedType, DatabaseDefinedType, sort_by_weight
from app.content_types.descriptors import BlockTypeDescriptor, ContentTypeDescriptor
from app.content_types.schema import RESERVED_COLUMNS, SchemaSynchronizer
from app.exceptions import ContentTypeNotFoundError, DuplicateResourceError, NotFoundError, ValidationError
from app.fields.definition import FieldDefinition, canonical_field_keys, parse_fields, validate_machine_name
from app.fields.field_types import FieldType, FieldTypeRegistry
from app.fields.validation import check_rule_params
from app.models.content_type import BlockTypeEntity, ContentTypeEntity

logger = logging.getLogger(__name__)

EntityRef = int | str

CONTENT_TYPE_KEYS = (
    "label",
    "label_plural",
    "description",
    "icon",
    "category",
    "enabled",
    "publishable",
    "revisionable",
    "translatable",
    "has_author",
    "has_taxonomy",
    "has_media",
    "title_field",
    "slug_field",
    "url_pattern",
    "weight",
)

BLOCK_TYPE_KEYS = (
    "label",
    "description",
    "icon",
    "category",
    "enabled",
    "template",
    "allowed_regions",
    "cache_ttl",
    "css_assets",
    "js_assets",
    "weight",
)


class TypeManager:
    """Shared catalogue logic; subclasses pick the entity model and descriptor class."""

    entity_model: type[ContentTypeEntity] | type[BlockTypeEntity]
    descriptor_class: type[ContentTypeDescriptor] | type[BlockTypeDescriptor]
    resource_type: str
    editable_keys: tuple[str, ...]

    def __init__(
        self,
        field_types: FieldTypeRegistry | None = None,
        schema: SchemaSynchronizer | None = None,
        schema_sync_enabled: bool | None = None,
    ) -> None:
        self.field_types = field_types or FieldTypeRegistry()
        self.schema = schema or SchemaSynchronizer(self.field_types)
        self.schema_sync_enabled = (
            app_settings.schema_sync_enabled if schema_sync_enabled is None else schema_sync_enabled
        )
        self._code_types: dict[str, CodeDefinedType] = {}

    # ── Code-defined types ────────────────────────────────────────────────────

    def register_code_type(self, descriptor: ContentTypeDescriptor | BlockTypeDescriptor) -> CodeDefinedType:
        if not isinstance(descriptor, self.descriptor_class):
            raise TypeError(f"Expected {self.descriptor_class.__name__}, got {type(descriptor).__name__}")
        if descriptor.type_id in self._code_types:
            raise DuplicateResourceError(self.resource_type, "id", descriptor.type_id)
        for field in descriptor.fields:
            self._check_field(field)
        entry = CodeDefinedType(descriptor)
        self._code_types[descriptor.type_id] = entry
        logger.debug("Registered code-defined %s '%s'", self.resource_type.lower(), descriptor.type_id)
        return entry

    def register_code_types(self, descriptors: Iterable[ContentTypeDescriptor | BlockTypeDescriptor]) -> None:
        for descriptor in descriptors:
            self.register_code_type(descriptor)

    # ── Catalogue reads ───────────────────────────────────────────────────────

    def _sort_key(self, entry: CatalogEntry) -> Any:
        return entry.label.lower()

    async def _rows(self, db: AsyncSession) -> list[Any]:
        result = await db.execute(select(self.entity_model).order_by(self.entity_model.id))
        return list(result.scalars().all())

    async def get_entries(self, db: AsyncSession) -> list[CatalogEntry]:
        """Merged catalogue entries, sorted. Code-defined ids shadow database rows with the same id."""
        entries: list[CatalogEntry] = list(self._code_types.values())
        for row in await self._rows(db):
            if row.type_id in self._code_types:
                logger.warning("Database %s '%s' is shadowed by a code-defined type", self.resource_type.lower(), row.type_id)
                continue
            entries.append(DatabaseDefinedType(row))
        return sorted(entries, key=self._sort_key)

    async def get_types(self, db: AsyncSession) -> list[dict[str, Any]]:
        return [entry.to_dict() for entry in await self.get_entries(db)]

    async def get_entry(self, db: AsyncSession, type_id: str) -> CatalogEntry | None:
        if type_id in self._code_types:
            return self._code_types[type_id]
        row = await self._row_by_type_id(db, type_id)
        return DatabaseDefinedType(row) if row is not None else None

    async def get_type(self, db: AsyncSession, type_id: str) -> dict[str, Any] | None:
        entry = await self.get_entry(db, type_id)
        return entry.to_dict() if entry is not None else None

    async def has_type(self, db: AsyncSession, type_id: str) -> bool:
        return await self.get_entry(db, type_id) is not None

    async def get_types_grouped(self, db: AsyncSession) -> dict[str, list[dict[str, Any]]]:
        grouped: dict[str, list[dict[str, Any]]] = {}
        for entry in await self.get_entries(db):
            grouped.setdefault(entry.category, []).append(entry.summary())
        return grouped

    async def get_form_fields(self, db: AsyncSession, type_id: str) -> list[FieldDefinition]:
        return (await self._require_entry(db, type_id)).form_fields()

    async def get_display_fields(self, db: AsyncSession, type_id: str) -> list[FieldDefinition]:
        return (await self._require_entry(db, type_id)).display_fields()

    async def _require_entry(self, db: AsyncSession, type_id: str) -> CatalogEntry:
        entry = await self.get_entry(db, type_id)
        if entry is None:
            raise ContentTypeNotFoundError(type_id, resource_type=self.resource_type)
        return entry

    async def _row_by_type_id(self, db: AsyncSession, type_id: str) -> Any:
        result = await db.execute(select(self.entity_model).where(self.entity_model.type_id == type_id))
        return result.scalar_one_or_none()

    async def _get_mutable_entity(self, db: AsyncSession, ref: EntityRef) -> Any:
        """Resolve a database row by primary key or type id; code-defined and unknown types are rejected."""
        if isinstance(ref, str) and not ref.isdigit():
            if ref in self._code_types:
                raise ValidationError(f"{self.resource_type} '{ref}' is defined in code and cannot be modified")
            row = await self._row_by_type_id(db, ref)
        else:
            row = await db.get(self.entity_model, int(ref))
        if row is None:
            raise ValidationError(f"Unknown {self.resource_type.lower()} '{ref}'")
        if row.type_id in self._code_types:
            raise ValidationError(f"{self.resource_type} '{row.type_id}' is defined in code and cannot be modified")
        return row

    # ── Database-defined types ────────────────────────────────────────────────

    def _entity_values(self, data: Mapping[str, Any]) -> dict[str, Any]:
        values = {key: data[key] for key in self.editable_keys if key in data}
        for key in ("allowed_regions", "css_assets", "js_assets"):
            if key in values:
                values[key] = list(values[key] or [])
        return values

    async def create_database_type(
        self, db: AsyncSession, data: Mapping[str, Any], *, is_system: bool = False
    ) -> DatabaseDefinedType:
        label = (data.get("label") or "").strip()
        if not label:
            raise ValidationError(f"{self.resource_type} label is required", field="label")
        type_id = data.get("type_id") or data.get("id")
        if not type_id:
            raise ValidationError(f"{self.resource_type} id is required", field="type_id")
        validate_machine_name(type_id)
        if await self.has_type(db, type_id):
            raise DuplicateResourceError(self.resource_type, "id", type_id)

        # Explicit nulls fall back to the column defaults
        values = {key: value for key, value in self._entity_values(data).items() if value is not None}
        values["label"] = label
        entity = self.entity_model(
            type_id=type_id,
            is_system=is_system,
            fields=[],
            settings=dict(data.get("settings") or {}),
            **values,
        )
        self._check_entity(entity)
        db.add(entity)
        try:
            await db.flush()
            await self._after_create(db, entity)
            raw_fields = data.get("fields") or []
            if not isinstance(raw_fields, list):
                raw_fields = parse_fields(raw_fields)
            for field_data in raw_fields:
                await self._append_field(db, entity, field_data)
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                raise DuplicateResourceError(self.resource_type, "id", type_id) from e
            raise ValidationError(f"Invalid {self.resource_type.lower()} data: {e.orig}") from e
        except Exception:
            await db.rollback()
            raise
        await db.refresh(entity)
        logger.info("Created %s '%s'", self.resource_type.lower(), type_id)
        return DatabaseDefinedType(entity)

    async def update_database_type(self, db: AsyncSession, ref: EntityRef, data: Mapping[str, Any]) -> DatabaseDefinedType:
        entity = await self._get_mutable_entity(db, ref)
        values = self._entity_values(data)
        self._check_not_null(values)
        if "label" in values and not values["label"].strip():
            raise ValidationError(f"{self.resource_type} label is required", field="label")
        for key in ("title_field", "slug_field"):
            if key in values and values[key] != getattr(entity, key):
                raise ValidationError(f"'{key}' cannot be changed after creation", field=key)
        for key, value in values.items():
            setattr(entity, key, value)
        if "settings" in data:
            entity.settings = {**(entity.settings or {}), **dict(data["settings"] or {})}
        await self._commit(db)
        await db.refresh(entity)
        logger.info("Updated %s '%s'", self.resource_type.lower(), entity.type_id)
        return DatabaseDefinedType(entity)

    async def delete_database_type(self, db: AsyncSession, ref: EntityRef, drop_table: bool = False) -> bool:
        entity = await self._get_mutable_entity(db, ref)
        if entity.is_system:
            raise ValidationError(f"System {self.resource_type.lower()} '{entity.type_id}' cannot be deleted")
        type_id = entity.type_id
        try:
            if drop_table:
                await self._drop_storage(db, entity)
            await db.delete(entity)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Deleted %s '%s'", self.resource_type.lower(), type_id)
        return True

    # ── Fields ────────────────────────────────────────────────────────────────

    async def add_field_to_type(
        self, db: AsyncSession, ref: EntityRef, field_data: Mapping[str, Any] | FieldDefinition
    ) -> FieldDefinition:
        entity = await self._get_mutable_entity(db, ref)
        try:
            field = await self._append_field(db, entity, field_data)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Added field '%s' to %s '%s'", field.machine_name, self.resource_type.lower(), entity.type_id)
        return field

    async def update_field_on_type(
        self, db: AsyncSession, ref: EntityRef, machine_name: str, changes: Mapping[str, Any]
    ) -> FieldDefinition:
        entity = await self._get_mutable_entity(db, ref)
        fields = parse_fields(entity.fields)
        current = next((f for f in fields if f.machine_name == machine_name), None)
        if current is None:
            raise NotFoundError("Field", machine_name)

        changes = canonical_field_keys(changes)
        if changes.get("machine_name", machine_name) != machine_name:
            raise ValidationError("Field machine name cannot be changed", field="machine_name")
        new_type = changes.get("type", current.field_type)
        if isinstance(new_type, FieldType):
            new_type = new_type.value
        if new_type != current.field_type:
            raise ValidationError("Field type cannot be changed", field="type")

        updated = FieldDefinition.from_mapping({**current.to_mapping(), **changes, "machine_name": machine_name})
        self._check_field(updated)
        entity.fields = [updated.to_mapping() if f.machine_name == machine_name else f.to_mapping() for f in fields]
        await self._commit(db)
        logger.info("Updated field '%s' on %s '%s'", machine_name, self.resource_type.lower(), entity.type_id)
        return updated

    async def remove_field_from_type(
        self, db: AsyncSession, ref: EntityRef, machine_name: str, drop_column: bool = False
    ) -> bool:
        entity = await self._get_mutable_entity(db, ref)
        fields = parse_fields(entity.fields)
        if not any(f.machine_name == machine_name for f in fields):
            return False
        try:
            if drop_column:
                await self._drop_field_storage(db, entity, machine_name)
            entity.fields = [f.to_mapping() for f in fields if f.machine_name != machine_name]
            settings = dict(entity.settings or {})
            for key in ("form_weights", "display_weights"):
                if machine_name in (settings.get(key) or {}):
                    settings[key] = {k: v for k, v in settings[key].items() if k != machine_name}
            entity.settings = settings
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Removed field '%s' from %s '%s'", machine_name, self.resource_type.lower(), entity.type_id)
        return True

    async def reorder_fields(self, db: AsyncSession, ref: EntityRef, machine_names: list[str]) -> list[FieldDefinition]:
        """Rewrite field weights to follow `machine_names`; unlisted fields keep their relative order after them."""
        entity = await self._get_mutable_entity(db, ref)
        fields = parse_fields(entity.fields)
        known = {f.machine_name for f in fields}
        unknown = [name for name in machine_names if name not in known]
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}", field="fields")

        order = list(dict.fromkeys(machine_names))
        rest = [f.machine_name for f in sort_by_weight(fields) if f.machine_name not in order]
        weights = {name: index for index, name in enumerate(order + rest)}
        reweighted = [f.replace(weight=weights[f.machine_name]) for f in fields]
        entity.fields = [f.to_mapping() for f in reweighted]
        await self._commit(db)
        return sort_by_weight(reweighted)

    async def set_form_weights(self, db: AsyncSession, ref: EntityRef, weights: Mapping[str, int]) -> None:
        await self._set_weights(db, ref, "form_weights", weights)

    async def set_display_weights(self, db: AsyncSession, ref: EntityRef, weights: Mapping[str, int]) -> None:
        await self._set_weights(db, ref, "display_weights", weights)

    async def _set_weights(self, db: AsyncSession, ref: EntityRef, key: str, weights: Mapping[str, int]) -> None:
        entity = await self._get_mutable_entity(db, ref)
        known = {f.machine_name for f in parse_fields(entity.fields)}
        unknown = [name for name in weights if name not in known]
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}", field=key)
        entity.settings = {**(entity.settings or {}), key: {name: int(w) for name, w in weights.items()}}
        await self._commit(db)

    async def _append_field(
        self, db: AsyncSession, entity: Any, field_data: Mapping[str, Any] | FieldDefinition
    ) -> FieldDefinition:
        field = FieldDefinition.from_mapping(field_data)
        self._check_field(field)

        existing = parse_fields(entity.fields)
        taken = {f.machine_name.lower() for f in existing}
        if field.machine_name.lower() in taken:
            raise DuplicateResourceError("Field", "machine_name", field.machine_name)
        if field.machine_name.lower() in self._reserved_names(entity):
            raise ValidationError(f"'{field.machine_name}' is a reserved column name", field="machine_name")

        has_weight = isinstance(field_data, FieldDefinition) or field_data.get("weight") is not None
        if not has_weight:
            field = field.replace(weight=max((f.weight for f in existing), default=-1) + 1)

        await self._add_field_storage(db, entity, field)
        entity.fields = [*[f.to_mapping() for f in existing], field.to_mapping()]
        return field

    def _check_field(self, field: FieldDefinition) -> None:
        if not self.field_types.has(field.field_type):
            raise ValidationError(f"Unknown field type '{field.field_type}'", field=field.machine_name)
        problems = check_rule_params(field)
        if problems:
            raise ValidationError(
                f"Invalid validation rules on field '{field.machine_name}'", field=field.machine_name, errors=problems
            )

    def _check_not_null(self, values: Mapping[str, Any]) -> None:
        columns = self.entity_model.__table__.columns
        for key, value in values.items():
            if value is None and key in columns and not columns[key].nullable:
                raise ValidationError(f"'{key}' cannot be null", field=key)

    async def _commit(self, db: AsyncSession) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ValidationError(f"Invalid {self.resource_type.lower()} data: {e.orig}") from e
        except Exception:
            await db.rollback()
            raise

    # ── Hooks ─────────────────────────────────────────────────────────────────

    def _check_entity(self, entity: Any) -> None:
        pass

    def _reserved_names(self, entity: Any) -> set[str]:
        return set()

    async def _after_create(self, db: AsyncSession, entity: Any) -> None:
        pass

    async def _add_field_storage(self, db: AsyncSession, entity: Any, field: FieldDefinition) -> None:
        pass

    async def _drop_field_storage(self, db: AsyncSession, entity: Any, machine_name: str) -> None:
        pass

    async def _drop_storage(self, db: AsyncSession, entity: Any) -> None:
        pass


class ContentTypeManager(TypeManager):
    entity_model = ContentTypeEntity
    descriptor_class = ContentTypeDescriptor
    resource_type = "Content type"
    editable_keys = CONTENT_TYPE_KEYS

    def _check_entity(self, entity: ContentTypeEntity) -> None:
        entity.title_field = entity.title_field or "title"
        validate_machine_name(entity.title_field)
        if entity.slug_field:
            validate_machine_name(entity.slug_field)

    def _reserved_names(self, entity: ContentTypeEntity) -> set[str]:
        return set(RESERVED_COLUMNS) | {name for name in (entity.title_field, entity.slug_field) if name}

    async def _after_create(self, db: AsyncSession, entity: ContentTypeEntity) -> None:
        if self.schema_sync_enabled:
            await self.schema.create_table(db, entity)

    async def _add_field_storage(self, db: AsyncSession, entity: ContentTypeEntity, field: FieldDefinition) -> None:
        if self.schema_sync_enabled:
            await self.schema.add_column(db, entity.table_name, field)

    async def _drop_field_storage(self, db: AsyncSession, entity: ContentTypeEntity, machine_name: str) -> None:
        if self.schema_sync_enabled:
            await self.schema.drop_column(db, entity.table_name, machine_name)

    async def _drop_storage(self, db: AsyncSession, entity: ContentTypeEntity) -> None:
        if self.schema_sync_enabled:
            await self.schema.drop_table(db, entity.table_name)

    async def ensure_default_types(self, db: AsyncSession) -> bool:
        """Create the built-in `article` type if it does not exist yet. Returns True when created."""
        if await self.has_type(db, "article"):
            return False
        await self.create_database_type(db, DEFAULT_ARTICLE, is_system=True)
        return True


class BlockManager(TypeManager):
    """Block types carry no physical table; block content lives in the block placement store."""

    entity_model = BlockTypeEntity
    descriptor_class = BlockTypeDescriptor
    resource_type = "Block type"
    editable_keys = BLOCK_TYPE_KEYS

    def _sort_key(self, entry: CatalogEntry) -> Any:
        return (entry.category.lower(), entry.label.lower())


DEFAULT_ARTICLE: dict[str, Any] = {
    "type_id": "article",
    "label": "Article",
    "label_plural": "Articles",
    "description": "Time-sensitive content like news, press releases or blog posts.",
    "icon": "📰",
    "url_pattern": "/article/{slug}",
    "fields": [
        {
            "machine_name": "body",
            "label": "Body",
            "type": FieldType.HTML.value,
            "required": True,
            "weight": 0,
        },
        {
            "machine_name": "summary",
            "label": "Summary",
            "type": FieldType.TEXTAREA.value,
            "help_text": "Short teaser shown in listings.",
            "settings": {"max_length": 500},
            "weight": 1,
        },
        {
            "machine_name": "featured_image",
            "label": "Featured image",
            "type": FieldType.IMAGE.value,
            "weight": 2,
        },
        {
            "machine_name": "tags",
            "label": "Tags",
            "type": FieldType.TAXONOMY_REFERENCE.value,
            "multiple": True,
            "cardinality": -1,
            "settings": {"vocabulary": "tags"},
            "weight": 3,
        },
    ],
}


def _is_unique_violation(error: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed", PostgreSQL: "duplicate key value violates unique constraint"
    message = str(error.orig).lower()
    return "unique" in message or "duplicate" in message
