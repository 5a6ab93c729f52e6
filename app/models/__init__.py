from .content_type import BlockTypeEntity, ContentTypeEntity

__all__ = [
    "BlockTypeEntity",
    "ContentTypeEntity",
]
