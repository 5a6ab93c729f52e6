"""
Tests for BlockManager
"""

import pytest

from app.content_types import BlockManager, BlockTypeDescriptor
from app.exceptions import ValidationError

CTA = {
    "type_id": "cta",
    "label": "Call to action",
    "category": "Marketing",
    "allowed_regions": ("sidebar", "footer"),
    "fields": [
        {"machine_name": "heading", "label": "Heading", "required": True},
        {"machine_name": "button_url", "label": "Button URL", "type": "url"},
    ],
}


class TestBlockCatalogue:
    """Test block type listings"""

    async def test_core_blocks_listed(self, block_manager, test_db):
        ids = [t["id"] for t in await block_manager.get_types(test_db)]
        assert {"html", "text", "image"} <= set(ids)

    async def test_sorted_by_category_then_label(self, block_manager, test_db):
        await block_manager.create_database_type(test_db, CTA)
        types = await block_manager.get_types(test_db)
        keys = [(t["category"].lower(), t["label"].lower()) for t in types]
        assert keys == sorted(keys)
        assert types[0]["category"] == "Basic"

    async def test_block_shape(self, block_manager, test_db):
        image = await block_manager.get_type(test_db, "image")
        assert image["kind"] == "block"
        assert image["cache_ttl"] == 3600
        assert "table_name" not in image
        assert list(image["fields"]) == ["image", "alt_text", "caption", "link_url", "alignment"]

    async def test_grouped(self, block_manager, test_db):
        grouped = await block_manager.get_types_grouped(test_db)
        assert [s["id"] for s in grouped["Media"]] == ["image"]
        assert grouped["Media"][0]["label_plural"] is None

    def test_default_value_on_select(self):
        descriptor = BlockTypeDescriptor(
            type_id="quote",
            label="Quote",
            fields=({"machine_name": "style", "type": "select", "default": "plain"},),
        )
        assert descriptor.fields[0].default_value == "plain"


class TestDatabaseBlockTypes:
    """Test database-defined block types"""

    async def test_create(self, block_manager, test_db):
        entry = await block_manager.create_database_type(test_db, CTA)
        assert entry.kind == "block"
        data = entry.to_dict()
        assert data["allowed_regions"] == ["sidebar", "footer"]
        assert entry.entity.can_be_placed_in("sidebar")
        assert not entry.entity.can_be_placed_in("header")

    async def test_no_physical_table(self, block_manager, test_db):
        await block_manager.create_database_type(test_db, CTA)
        assert not await block_manager.schema.has_table(test_db, "content_cta")

    async def test_reserved_content_columns_allowed(self, block_manager, test_db):
        await block_manager.create_database_type(test_db, CTA)
        field = await block_manager.add_field_to_type(test_db, "cta", {"machine_name": "title"})
        assert field.machine_name == "title"

    async def test_code_block_is_read_only(self, block_manager, test_db):
        with pytest.raises(ValidationError):
            await block_manager.update_database_type(test_db, "html", {"label": "Raw"})

    async def test_update_and_delete(self, block_manager, test_db):
        await block_manager.create_database_type(test_db, CTA)
        updated = await block_manager.update_database_type(test_db, "cta", {"cache_ttl": 60, "category": "Promo"})
        assert updated.to_dict()["cache_ttl"] == 60
        assert updated.category == "Promo"
        assert await block_manager.delete_database_type(test_db, "cta")
        assert not await block_manager.has_type(test_db, "cta")

    async def test_render_block_form(self, block_manager, widget_registry, test_db):
        await block_manager.create_database_type(test_db, CTA)
        fields = await block_manager.get_form_fields(test_db, "cta")
        result = widget_registry.render_fields(fields, {"button_url": "https://example.com"})
        html = str(result.html)
        assert 'data-field="heading"' in html
        assert 'type="url"' in html
        assert 'value="https://example.com"' in html

    async def test_independent_from_content_types(self, block_manager, content_manager, test_db):
        await block_manager.create_database_type(test_db, {"type_id": "faq", "label": "FAQ block"})
        assert not await content_manager.has_type(test_db, "faq")
