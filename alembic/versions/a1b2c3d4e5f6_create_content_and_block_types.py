"""Create content_types and block_types tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1b2c3d4e5f6"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "content_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type_id", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("label_plural", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=False, server_default="📄"),
        sa.Column("category", sa.String(length=100), nullable=False, server_default="Content"),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("publishable", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("revisionable", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("translatable", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("has_author", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("has_taxonomy", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("has_media", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("title_field", sa.String(length=100), nullable=False, server_default="title"),
        sa.Column("slug_field", sa.String(length=100), nullable=True, server_default="slug"),
        sa.Column("url_pattern", sa.String(length=255), nullable=True),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_types_id", "content_types", ["id"])
    op.create_index("ix_content_types_type_id", "content_types", ["type_id"], unique=True)

    op.create_table(
        "block_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("type_id", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=False, server_default="🧱"),
        sa.Column("category", sa.String(length=100), nullable=False, server_default="Custom"),
        sa.Column("template", sa.String(length=255), nullable=True),
        sa.Column("is_system", sa.Boolean(), nullable=False, server_default="0"),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default="1"),
        sa.Column("allowed_regions", sa.JSON(), nullable=False),
        sa.Column("cache_ttl", sa.Integer(), nullable=False, server_default="3600"),
        sa.Column("css_assets", sa.JSON(), nullable=False),
        sa.Column("js_assets", sa.JSON(), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_block_types_id", "block_types", ["id"])
    op.create_index("ix_block_types_type_id", "block_types", ["type_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_block_types_type_id", table_name="block_types")
    op.drop_index("ix_block_types_id", table_name="block_types")
    op.drop_table("block_types")
    op.drop_index("ix_content_types_type_id", table_name="content_types")
    op.drop_index("ix_content_types_id", table_name="content_types")
    op.drop_table("content_types")
