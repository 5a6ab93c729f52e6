"""
Content and block type catalogue.

Public API:
    ContentTypeDescriptor / BlockTypeDescriptor - code-defined type declarations
    CodeDefinedType / DatabaseDefinedType       - catalogue entries (uniform read interface)
    ContentTypeManager / BlockManager           - merged catalogue plus database type editing
    SchemaSynchronizer                          - physical content table DDL
"""

from .catalog import CatalogEntry, CodeDefinedType, DatabaseDefinedType, sort_by_weight
from .descriptors import BlockTypeDescriptor, ContentTypeDescriptor
from .manager import BlockManager, ContentTypeManager, TypeManager
from .schema import RESERVED_COLUMNS, SchemaSynchronizer

__all__ = [
    "RESERVED_COLUMNS",
    "BlockManager",
    "BlockTypeDescriptor",
    "CatalogEntry",
    "CodeDefinedType",
    "ContentTypeDescriptor",
    "ContentTypeManager",
    "DatabaseDefinedType",
    "SchemaSynchronizer",
    "TypeManager",
    "sort_by_weight",
]
