"""Core module: the basic page content type and the built-in block types."""

from __future__ import annotations

from app.content_types.descriptors import BlockTypeDescriptor, ContentTypeDescriptor
from app.fields.field_types import FieldType
from app.modules.base import ModuleDescriptor

PAGE = ContentTypeDescriptor(
    type_id="page",
    label="Basic Page",
    label_plural="Basic Pages",
    description="Static pages such as About or Contact.",
    icon="📄",
    has_taxonomy=False,
    revisionable=True,
    url_pattern="/{slug}",
    fields=(
        {"machine_name": "body", "label": "Body", "type": FieldType.HTML, "required": True, "weight": 0},
        {
            "machine_name": "meta_description",
            "label": "Meta description",
            "type": FieldType.TEXTAREA,
            "settings": {"max_length": 160},
            "weight": 10,
        },
    ),
)

HTML_BLOCK = BlockTypeDescriptor(
    type_id="html",
    label="HTML Block",
    description="Raw HTML markup.",
    icon="🧾",
    category="Basic",
    fields=(
        {
            "machine_name": "content",
            "label": "HTML",
            "type": FieldType.CODE,
            "required": True,
            "settings": {"language": "html"},
        },
        {"machine_name": "classes", "label": "CSS classes", "type": FieldType.STRING, "weight": 1},
    ),
)

TEXT_BLOCK = BlockTypeDescriptor(
    type_id="text",
    label="Text Block",
    description="Formatted text.",
    icon="📄",
    category="Basic",
    fields=(
        {"machine_name": "content", "label": "Content", "type": FieldType.HTML, "required": True},
        {
            "machine_name": "text_align",
            "label": "Text alignment",
            "type": FieldType.SELECT,
            "default": "left",
            "settings": {"options": {"left": "Left", "center": "Center", "right": "Right", "justify": "Justify"}},
            "weight": 1,
        },
    ),
)

IMAGE_BLOCK = BlockTypeDescriptor(
    type_id="image",
    label="Image Block",
    description="A single image with optional caption and link.",
    icon="🖼️",
    category="Media",
    fields=(
        {"machine_name": "image", "label": "Image", "type": FieldType.IMAGE, "required": True},
        {"machine_name": "alt_text", "label": "Alt text", "type": FieldType.STRING, "weight": 1},
        {"machine_name": "caption", "label": "Caption", "type": FieldType.STRING, "weight": 2},
        {"machine_name": "link_url", "label": "Link URL", "type": FieldType.URL, "weight": 3},
        {
            "machine_name": "alignment",
            "label": "Alignment",
            "type": FieldType.SELECT,
            "default": "center",
            "settings": {"options": {"left": "Left", "center": "Center", "right": "Right"}},
            "weight": 4,
        },
    ),
)


CORE_MODULE = ModuleDescriptor(
    name="core",
    description="Core content and block types",
    content_types=[PAGE],
    block_types=[HTML_BLOCK, TEXT_BLOCK, IMAGE_BLOCK],
)
