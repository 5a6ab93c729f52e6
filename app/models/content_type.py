"""Database-defined content and block types.

Each row keeps its field list as one JSON array of persisted field mappings
(see FieldDefinition.to_mapping). JSON columns are replaced, never mutated in
place, so SQLAlchemy notices the change.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from app.database import Base

CONTENT_TABLE_PREFIX = "content_"


class ContentTypeEntity(Base):
    """A content type created through the admin UI."""

    __tablename__ = "content_types"

    id = Column(Integer, primary_key=True, index=True)
    type_id = Column(String(100), unique=True, nullable=False, index=True)
    label = Column(String(255), nullable=False)
    label_plural = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    icon = Column(String(50), default="📄", nullable=False)
    category = Column(String(100), default="Content", nullable=False)

    is_system = Column(Boolean, default=False, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)

    # Feature flags
    publishable = Column(Boolean, default=True, nullable=False)
    revisionable = Column(Boolean, default=False, nullable=False)
    translatable = Column(Boolean, default=False, nullable=False)
    has_author = Column(Boolean, default=True, nullable=False)
    has_taxonomy = Column(Boolean, default=True, nullable=False)
    has_media = Column(Boolean, default=True, nullable=False)

    title_field = Column(String(100), default="title", nullable=False)
    slug_field = Column(String(100), default="slug", nullable=True)
    url_pattern = Column(String(255), nullable=True)

    fields = Column(JSON, default=list, nullable=False)
    settings = Column(JSON, default=dict, nullable=False)  # form_weights, display_weights, ...
    weight = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def source(self) -> str:
        return "database"

    @property
    def table_name(self) -> str:
        return f"{CONTENT_TABLE_PREFIX}{self.type_id}"

    def __repr__(self):
        return f"<ContentTypeEntity(id={self.id}, type_id='{self.type_id}')>"


class BlockTypeEntity(Base):
    """A block type created through the admin UI. Block content is stored elsewhere, no per-type table."""

    __tablename__ = "block_types"

    id = Column(Integer, primary_key=True, index=True)
    type_id = Column(String(100), unique=True, nullable=False, index=True)
    label = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(50), default="🧱", nullable=False)
    category = Column(String(100), default="Custom", nullable=False)
    template = Column(String(255), nullable=True)

    is_system = Column(Boolean, default=False, nullable=False)
    enabled = Column(Boolean, default=True, nullable=False)

    allowed_regions = Column(JSON, default=list, nullable=False)
    cache_ttl = Column(Integer, default=3600, nullable=False)
    css_assets = Column(JSON, default=list, nullable=False)
    js_assets = Column(JSON, default=list, nullable=False)

    fields = Column(JSON, default=list, nullable=False)
    settings = Column(JSON, default=dict, nullable=False)
    weight = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def source(self) -> str:
        return "database"

    def can_be_placed_in(self, region: str) -> bool:
        """Empty `allowed_regions` means any region."""
        return not self.allowed_regions or region in self.allowed_regions

    def __repr__(self):
        return f"<BlockTypeEntity(id={self.id}, type_id='{self.type_id}')>"
