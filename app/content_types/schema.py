"""
Physical schema synchronisation for database-defined content types.

Each content type owns a table `content_<type_id>` with a fixed set of base
columns plus one column per field. Statements run on the session's own
connection so they share its transaction where the backend allows it.
Physical field columns are always nullable: required-ness is enforced by
field validation, and existing rows need a value for a newly added column.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    Time,
    func,
    inspect,
    literal,
    text,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import SchemaSyncError
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldTypeRegistry
from app.fields.validation import TRUE_VALUES, as_int, is_integer, to_number
from app.models.content_type import ContentTypeEntity

logger = logging.getLogger(__name__)

# Base columns every content table has; field machine names may not reuse them
RESERVED_COLUMNS = frozenset(
    {
        "id",
        "uuid",
        "title",
        "slug",
        "status",
        "published_at",
        "author_id",
        "revision_id",
        "language",
        "translation_of",
        "created_at",
        "updated_at",
    }
)


class SchemaSynchronizer:
    def __init__(self, field_types: FieldTypeRegistry | None = None) -> None:
        self.field_types = field_types or FieldTypeRegistry()

    # ── Column mapping ────────────────────────────────────────────────────────

    def column_type(self, field: FieldDefinition) -> Any:
        """SQLAlchemy type for a field's storage kind; unknown field types are stored as text."""
        field_type = self.field_types.find(field.field_type)
        storage = field_type.storage_type if field_type else "text"
        if field.multiple and storage not in ("json", "text"):
            # Several values do not fit a scalar column
            storage = "json"

        if storage == "string":
            return String(field.get_int_setting("max_length", 255) or 255)
        if storage == "short_string":
            return String(100)
        if storage == "text":
            return Text()
        if storage == "integer":
            return Integer()
        if storage == "float":
            return Float()
        if storage == "decimal":
            return Numeric(field.get_int_setting("precision", 10), field.get_int_setting("scale", 2))
        if storage == "boolean":
            return Boolean()
        if storage == "date":
            return Date()
        if storage == "datetime":
            return DateTime()
        if storage == "time":
            return Time()
        return JSON()

    def build_column(self, field: FieldDefinition) -> Column:
        return Column(field.machine_name, self.column_type(field), nullable=True)

    def build_table(self, entity: ContentTypeEntity, fields: list[FieldDefinition] | None = None) -> Table:
        columns = [
            Column("id", Integer, primary_key=True, autoincrement=True),
            Column("uuid", String(36), nullable=False, unique=True),
        ]
        if entity.title_field:
            columns.append(Column(entity.title_field, String(255), nullable=False))
        if entity.slug_field:
            columns.append(Column(entity.slug_field, String(255), nullable=False, unique=True))
        for field in fields or []:
            columns.append(self.build_column(field))
        if entity.publishable:
            columns.append(Column("status", String(20), server_default="draft", index=True))
            columns.append(Column("published_at", DateTime, nullable=True))
        if entity.has_author:
            columns.append(Column("author_id", Integer, nullable=True, index=True))
        if entity.revisionable:
            columns.append(Column("revision_id", Integer, nullable=True))
        if entity.translatable:
            columns.append(Column("language", String(10), server_default="en", index=True))
            columns.append(Column("translation_of", Integer, nullable=True))
        columns.append(Column("created_at", DateTime, nullable=False, server_default=func.current_timestamp(), index=True))
        columns.append(Column("updated_at", DateTime, nullable=False, server_default=func.current_timestamp()))
        return Table(entity.table_name, MetaData(), *columns)

    # ── DDL ───────────────────────────────────────────────────────────────────

    async def _run(self, db: AsyncSession, fn, table_name: str, operation: str):
        try:
            conn = await db.connection()
            return await conn.run_sync(fn)
        except SQLAlchemyError as e:
            logger.error("Schema sync %s failed on %s: %s", operation, table_name, e)
            raise SchemaSyncError(f"Could not {operation} on '{table_name}': {e}", table=table_name, operation=operation) from e

    async def create_table(
        self, db: AsyncSession, entity: ContentTypeEntity, fields: list[FieldDefinition] | None = None
    ) -> None:
        table = self.build_table(entity, fields)
        await self._run(db, lambda sync_conn: table.create(sync_conn, checkfirst=True), table.name, "create table")
        logger.info("Created content table %s", table.name)

    async def add_column(self, db: AsyncSession, table_name: str, field: FieldDefinition) -> None:
        column = self.build_column(field)

        def _add(sync_conn):
            dialect = sync_conn.dialect
            preparer = dialect.identifier_preparer
            sql = (
                f"ALTER TABLE {preparer.quote(table_name)} "
                f"ADD COLUMN {preparer.quote(column.name)} {column.type.compile(dialect=dialect)}"
            )
            default = self.default_clause(column, field.default_value, dialect)
            if default is not None:
                sql += f" DEFAULT {default}"
            sync_conn.execute(text(sql))

        await self._run(db, _add, table_name, "add column")
        logger.info("Added column %s.%s", table_name, column.name)

    def default_clause(self, column: Column, default: Any, dialect) -> str | None:
        """
        SQL literal for a field default on `column`, or None when the default
        does not fit the column type. Temporal defaults are given as ISO strings
        and rendered in the dialect's own storage format.
        """
        value = coerce_default(column.type, default)
        if value is None:
            if default is not None:
                logger.warning("Ignoring default %r for column %s (%s)", default, column.name, column.type)
            return None
        column_type = column.type
        if isinstance(column_type, (DateTime, Date, Time)):
            processor = column_type.dialect_impl(dialect).bind_processor(dialect)
            value = processor(value) if processor else value.isoformat()
            column_type = String()
        return str(literal(value, column_type).compile(dialect=dialect, compile_kwargs={"literal_binds": True}))

    async def drop_column(self, db: AsyncSession, table_name: str, column_name: str) -> None:
        def _drop(sync_conn):
            preparer = sync_conn.dialect.identifier_preparer
            sync_conn.execute(text(f"ALTER TABLE {preparer.quote(table_name)} DROP COLUMN {preparer.quote(column_name)}"))

        await self._run(db, _drop, table_name, "drop column")
        logger.warning("Dropped column %s.%s", table_name, column_name)

    async def drop_table(self, db: AsyncSession, table_name: str) -> None:
        table = Table(table_name, MetaData())
        await self._run(db, lambda sync_conn: table.drop(sync_conn, checkfirst=True), table_name, "drop table")
        logger.warning("Dropped content table %s", table_name)

    # ── Inspection ────────────────────────────────────────────────────────────

    async def has_table(self, db: AsyncSession, table_name: str) -> bool:
        return await self._run(db, lambda sync_conn: inspect(sync_conn).has_table(table_name), table_name, "inspect")

    async def get_columns(self, db: AsyncSession, table_name: str) -> list[str]:
        """Column names of a physical table, in table order."""
        return await self._run(
            db,
            lambda sync_conn: [column["name"] for column in inspect(sync_conn).get_columns(table_name)],
            table_name,
            "inspect",
        )


def coerce_default(column_type: Any, default: Any) -> Any:
    """A field default converted to the Python type of `column_type`, or None."""
    if default is None or isinstance(default, (dict, list)) or isinstance(column_type, JSON):
        return None
    if isinstance(column_type, DateTime):
        return _parse_iso(datetime, default)
    if isinstance(column_type, Date):
        return _parse_iso(date, default)
    if isinstance(column_type, Time):
        return _parse_iso(time, default)
    if isinstance(column_type, Boolean):
        return default if isinstance(default, bool) else str(default).strip().lower() in TRUE_VALUES
    if isinstance(column_type, Integer):
        return as_int(default) if is_integer(default) else None
    if isinstance(column_type, (Float, Numeric)):
        return to_number(default)
    return str(default)


def _parse_iso(kind: type, value: Any) -> Any:
    if isinstance(value, kind):
        return value
    if kind is date and isinstance(value, datetime):
        return value.date()
    try:
        return kind.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
