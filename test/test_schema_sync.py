"""
Tests for physical content table synchronisation
"""

import pytest
from sqlalchemy import JSON, Boolean, Integer, Numeric, String, Text, text
from sqlalchemy.dialects import sqlite

from app.content_types import SchemaSynchronizer
from app.exceptions import SchemaSyncError
from app.fields.definition import FieldDefinition
from app.models import ContentTypeEntity


def make_field(**overrides):
    data = {"machine_name": "value", "label": "Value"}
    data.update(overrides)
    return FieldDefinition.from_mapping(data)


def make_entity(**overrides):
    values = {
        "type_id": "sample",
        "label": "Sample",
        "title_field": "title",
        "slug_field": "slug",
        "publishable": True,
        "revisionable": False,
        "translatable": False,
        "has_author": True,
    }
    values.update(overrides)
    return ContentTypeEntity(**values)


@pytest.fixture
def schema(field_types):
    return SchemaSynchronizer(field_types)


class TestColumnTypes:
    """Test field to column type mapping"""

    def test_string_uses_max_length(self, schema):
        column_type = schema.column_type(make_field(settings={"max_length": 80}))
        assert isinstance(column_type, String)
        assert column_type.length == 80

    def test_string_default_length(self, schema):
        assert schema.column_type(make_field()).length == 255

    @pytest.mark.parametrize(
        "field_type,expected",
        [
            ("html", Text),
            ("integer", Integer),
            ("boolean", Boolean),
            ("image", Integer),
            ("json", JSON),
            ("hologram", Text),
        ],
    )
    def test_storage_mapping(self, schema, field_type, expected):
        assert isinstance(schema.column_type(make_field(type=field_type)), expected)

    def test_select_is_short_string(self, schema):
        column_type = schema.column_type(make_field(type="select"))
        assert isinstance(column_type, String)
        assert column_type.length == 100

    def test_decimal_precision(self, schema):
        column_type = schema.column_type(make_field(type="decimal", settings={"precision": 12, "scale": 4}))
        assert isinstance(column_type, Numeric)
        assert (column_type.precision, column_type.scale) == (12, 4)

    def test_multiple_values_stored_as_json(self, schema):
        assert isinstance(schema.column_type(make_field(type="integer", multiple=True)), JSON)

    def test_columns_are_nullable(self, schema):
        assert schema.build_column(make_field(required=True)).nullable


class TestBuildTable:
    """Test base columns by feature flag"""

    def test_flags_select_columns(self, schema):
        table = schema.build_table(make_entity(revisionable=True, translatable=True, has_author=False))
        names = [c.name for c in table.columns]
        assert names[:4] == ["id", "uuid", "title", "slug"]
        assert "revision_id" in names
        assert {"language", "translation_of"} <= set(names)
        assert "author_id" not in names
        assert names[-2:] == ["created_at", "updated_at"]

    def test_no_slug(self, schema):
        table = schema.build_table(make_entity(slug_field=None, publishable=False))
        names = [c.name for c in table.columns]
        assert "slug" not in names
        assert "status" not in names

    def test_fields_added_after_base_columns(self, schema):
        table = schema.build_table(make_entity(), [make_field(machine_name="rating", type="integer")])
        assert table.name == "content_sample"
        assert "rating" in table.columns


class TestDDL:
    """Test statements against SQLite"""

    async def test_create_add_drop(self, schema, test_db):
        entity = make_entity()
        await schema.create_table(test_db, entity)
        assert await schema.has_table(test_db, "content_sample")

        await schema.add_column(test_db, "content_sample", make_field(machine_name="score", type="integer", default=3))
        assert "score" in await schema.get_columns(test_db, "content_sample")

        await schema.drop_column(test_db, "content_sample", "score")
        assert "score" not in await schema.get_columns(test_db, "content_sample")

        await schema.drop_table(test_db, "content_sample")
        assert not await schema.has_table(test_db, "content_sample")

    async def test_create_is_idempotent(self, schema, test_db):
        entity = make_entity()
        await schema.create_table(test_db, entity)
        await schema.create_table(test_db, entity)
        assert await schema.has_table(test_db, "content_sample")

    async def test_add_column_to_missing_table(self, schema, test_db):
        with pytest.raises(SchemaSyncError) as exc_info:
            await schema.add_column(test_db, "content_missing", make_field())
        assert exc_info.value.details == {"table": "content_missing", "operation": "add column"}


class TestColumnDefaults:
    """Test DEFAULT clauses rendered for added columns"""

    @pytest.fixture
    def dialect(self):
        return sqlite.dialect()

    def clause(self, schema, dialect, **field):
        definition = make_field(**field)
        return schema.default_clause(schema.build_column(definition), definition.default_value, dialect)

    def test_temporal_defaults_use_storage_format(self, schema, dialect):
        assert self.clause(schema, dialect, type="date", default="2024-01-01") == "'2024-01-01'"
        assert self.clause(schema, dialect, type="datetime", default="2024-01-01T10:30:00") == "'2024-01-01 10:30:00.000000'"
        assert self.clause(schema, dialect, type="time", default="10:30") == "'10:30:00.000000'"

    def test_unparseable_defaults_are_dropped(self, schema, dialect):
        assert self.clause(schema, dialect, type="date", default="next tuesday") is None
        assert self.clause(schema, dialect, type="integer", default="abc") is None
        assert self.clause(schema, dialect, type="float", default="inf") is None

    def test_scalar_defaults(self, schema, dialect):
        assert self.clause(schema, dialect, type="integer", default="5") == "5"
        assert self.clause(schema, dialect, type="string", default="it's") == "'it''s'"
        assert self.clause(schema, dialect, type="json", default="[]") is None

    async def test_date_default_applies_to_existing_rows(self, schema, test_db):
        await schema.create_table(test_db, make_entity())
        await test_db.execute(text("INSERT INTO content_sample (uuid, title, slug) VALUES ('u1', 'First', 'first')"))
        await schema.add_column(test_db, "content_sample", make_field(machine_name="starts", type="date", default="2024-01-01"))
        result = await test_db.execute(text("SELECT starts FROM content_sample"))
        assert result.scalar_one() == "2024-01-01"
