"""
Field Types

FieldType: the canonical field kinds a content type, block type or taxonomy
vocabulary can declare. Each member knows its label, category, physical storage
kind and default widget.

FieldTypeRegistry: read-only lookup object built once at startup and passed to
the widget registry and the type managers.
"""

from __future__ import annotations

import enum

from app.exceptions import FieldTypeNotFoundError


class FieldType(str, enum.Enum):
    """Supported field types for dynamic content."""

    # Text
    STRING = "string"
    TEXT = "text"
    TEXTAREA = "textarea"
    HTML = "html"
    MARKDOWN = "markdown"

    # Numeric
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"

    # Boolean
    BOOLEAN = "boolean"

    # Date/Time
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"

    # Selection
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    MULTISELECT = "multiselect"

    # Media
    IMAGE = "image"
    FILE = "file"
    GALLERY = "gallery"
    VIDEO = "video"

    # References
    ENTITY_REFERENCE = "entity_reference"
    TAXONOMY_REFERENCE = "taxonomy_reference"
    USER_REFERENCE = "user_reference"
    BLOCK_REFERENCE = "block_reference"

    # Special
    EMAIL = "email"
    URL = "url"
    PHONE = "phone"
    COLOR = "color"
    SLUG = "slug"
    JSON = "json"
    CODE = "code"

    # Layout
    LINK = "link"
    ADDRESS = "address"
    GEOLOCATION = "geolocation"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS.get(self, "")

    @property
    def category(self) -> str:
        for category, members in _CATEGORIES.items():
            if self in members:
                return category
        return "Other"

    @property
    def storage_type(self) -> str:
        return _STORAGE_TYPES[self]

    @property
    def default_widget(self) -> str:
        return _DEFAULT_WIDGETS[self]

    @property
    def supports_multiple(self) -> bool:
        return self in (FieldType.GALLERY, FieldType.MULTISELECT, FieldType.CHECKBOX)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.value,
            "label": self.label,
            "description": self.description,
            "category": self.category,
            "storage_type": self.storage_type,
            "default_widget": self.default_widget,
            "supports_multiple": self.supports_multiple,
        }


_LABELS: dict[FieldType, str] = {
    FieldType.STRING: "Text (single line)",
    FieldType.TEXT: "Text (plain)",
    FieldType.TEXTAREA: "Text (multiline)",
    FieldType.HTML: "HTML (formatted)",
    FieldType.MARKDOWN: "Markdown",
    FieldType.INTEGER: "Integer",
    FieldType.FLOAT: "Decimal",
    FieldType.DECIMAL: "Decimal (precise)",
    FieldType.BOOLEAN: "Boolean (Yes/No)",
    FieldType.DATE: "Date",
    FieldType.DATETIME: "Date and Time",
    FieldType.TIME: "Time",
    FieldType.SELECT: "Select list",
    FieldType.RADIO: "Radio buttons",
    FieldType.CHECKBOX: "Checkboxes",
    FieldType.MULTISELECT: "Multi-select",
    FieldType.IMAGE: "Image",
    FieldType.FILE: "File",
    FieldType.GALLERY: "Image Gallery",
    FieldType.VIDEO: "Video",
    FieldType.ENTITY_REFERENCE: "Content Reference",
    FieldType.TAXONOMY_REFERENCE: "Taxonomy Term",
    FieldType.USER_REFERENCE: "User Reference",
    FieldType.BLOCK_REFERENCE: "Block Reference",
    FieldType.EMAIL: "Email",
    FieldType.URL: "URL",
    FieldType.PHONE: "Phone",
    FieldType.COLOR: "Color",
    FieldType.SLUG: "URL Slug",
    FieldType.JSON: "JSON",
    FieldType.CODE: "Code",
    FieldType.LINK: "Link",
    FieldType.ADDRESS: "Address",
    FieldType.GEOLOCATION: "Geolocation",
}

_DESCRIPTIONS: dict[FieldType, str] = {
    FieldType.STRING: "A simple single-line text field",
    FieldType.TEXT: "A multi-line text area",
    FieldType.TEXTAREA: "A multi-line text area",
    FieldType.HTML: "Rich text editor with HTML support",
    FieldType.MARKDOWN: "Markdown editor with preview",
    FieldType.INTEGER: "Whole number input",
    FieldType.FLOAT: "Decimal number input",
    FieldType.DECIMAL: "Decimal number input",
    FieldType.BOOLEAN: "True/False toggle or checkbox",
    FieldType.DATE: "Date picker",
    FieldType.DATETIME: "Date and time picker",
    FieldType.TIME: "Time picker",
    FieldType.SELECT: "Dropdown select list",
    FieldType.RADIO: "Radio button group",
    FieldType.CHECKBOX: "Checkboxes for multiple selections",
    FieldType.MULTISELECT: "Multi-select dropdown",
    FieldType.IMAGE: "Image upload",
    FieldType.FILE: "File upload",
    FieldType.GALLERY: "Multiple image gallery",
    FieldType.VIDEO: "Video upload or embed",
    FieldType.ENTITY_REFERENCE: "Link to other content items",
    FieldType.TAXONOMY_REFERENCE: "Tag content with taxonomy terms",
    FieldType.USER_REFERENCE: "Link to a user account",
    FieldType.BLOCK_REFERENCE: "Embed a reusable block",
    FieldType.EMAIL: "Email address with validation",
    FieldType.URL: "Website URL with validation",
    FieldType.PHONE: "Phone number",
    FieldType.COLOR: "Color picker",
    FieldType.SLUG: "URL-friendly identifier",
    FieldType.JSON: "Raw JSON data editor",
    FieldType.CODE: "Code editor with syntax highlighting",
    FieldType.LINK: "Link with title and target",
    FieldType.ADDRESS: "Physical address fields",
    FieldType.GEOLOCATION: "Map coordinates",
}

# Category order is the order selectors display them in
_CATEGORIES: dict[str, tuple[FieldType, ...]] = {
    "Text": (FieldType.STRING, FieldType.TEXT, FieldType.TEXTAREA, FieldType.HTML, FieldType.MARKDOWN),
    "Number": (FieldType.INTEGER, FieldType.FLOAT, FieldType.DECIMAL),
    "Date/Time": (FieldType.DATE, FieldType.DATETIME, FieldType.TIME),
    "Selection": (FieldType.BOOLEAN, FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX, FieldType.MULTISELECT),
    "Media": (FieldType.IMAGE, FieldType.FILE, FieldType.GALLERY, FieldType.VIDEO),
    "Reference": (
        FieldType.ENTITY_REFERENCE,
        FieldType.TAXONOMY_REFERENCE,
        FieldType.USER_REFERENCE,
        FieldType.BLOCK_REFERENCE,
    ),
    "Special": (
        FieldType.EMAIL,
        FieldType.URL,
        FieldType.PHONE,
        FieldType.COLOR,
        FieldType.SLUG,
        FieldType.CODE,
        FieldType.JSON,
        FieldType.LINK,
        FieldType.ADDRESS,
        FieldType.GEOLOCATION,
    ),
}

_STORAGE_TYPES: dict[FieldType, str] = {
    FieldType.STRING: "string",
    FieldType.EMAIL: "string",
    FieldType.URL: "string",
    FieldType.PHONE: "string",
    FieldType.COLOR: "string",
    FieldType.SLUG: "string",
    FieldType.TEXT: "text",
    FieldType.TEXTAREA: "text",
    FieldType.HTML: "text",
    FieldType.MARKDOWN: "text",
    FieldType.CODE: "text",
    FieldType.INTEGER: "integer",
    FieldType.ENTITY_REFERENCE: "integer",
    FieldType.TAXONOMY_REFERENCE: "integer",
    FieldType.USER_REFERENCE: "integer",
    FieldType.BLOCK_REFERENCE: "integer",
    FieldType.IMAGE: "integer",  # media id
    FieldType.FILE: "integer",
    FieldType.VIDEO: "integer",
    FieldType.FLOAT: "float",
    FieldType.DECIMAL: "decimal",
    FieldType.BOOLEAN: "boolean",
    FieldType.DATE: "date",
    FieldType.DATETIME: "datetime",
    FieldType.TIME: "time",
    FieldType.SELECT: "short_string",
    FieldType.RADIO: "short_string",
    FieldType.CHECKBOX: "json",
    FieldType.MULTISELECT: "json",
    FieldType.GALLERY: "json",  # list of media ids
    FieldType.JSON: "json",
    FieldType.LINK: "json",
    FieldType.ADDRESS: "json",
    FieldType.GEOLOCATION: "json",
}

_DEFAULT_WIDGETS: dict[FieldType, str] = {
    FieldType.STRING: "text_input",
    FieldType.TEXT: "textarea",
    FieldType.TEXTAREA: "textarea",
    FieldType.HTML: "wysiwyg",
    FieldType.MARKDOWN: "markdown",
    FieldType.CODE: "code",
    FieldType.INTEGER: "number",
    FieldType.FLOAT: "decimal",
    FieldType.DECIMAL: "decimal",
    FieldType.BOOLEAN: "checkbox",
    FieldType.DATE: "date",
    FieldType.DATETIME: "datetime",
    FieldType.TIME: "time",
    FieldType.SELECT: "select",
    FieldType.RADIO: "radios",
    FieldType.CHECKBOX: "checkboxes",
    FieldType.MULTISELECT: "select",
    FieldType.IMAGE: "image",
    FieldType.FILE: "file",
    FieldType.GALLERY: "gallery",
    FieldType.VIDEO: "video",
    FieldType.ENTITY_REFERENCE: "entity_reference",
    FieldType.TAXONOMY_REFERENCE: "taxonomy",
    FieldType.USER_REFERENCE: "user_reference",
    FieldType.BLOCK_REFERENCE: "block_reference",
    FieldType.EMAIL: "email",
    FieldType.URL: "url",
    FieldType.PHONE: "phone",
    FieldType.COLOR: "color",
    FieldType.SLUG: "slug",
    FieldType.JSON: "json",
    FieldType.LINK: "link",
    FieldType.ADDRESS: "address",
    FieldType.GEOLOCATION: "geolocation",
}


def all_types() -> list[FieldType]:
    """Return every field type in declaration order."""
    return list(FieldType)


def by_id(type_id: str | FieldType) -> FieldType:
    """Return the field type for an id, raising FieldTypeNotFoundError when unknown."""
    try:
        return FieldType(type_id)
    except ValueError:
        raise FieldTypeNotFoundError(type_id) from None


def find(type_id: str | FieldType | None) -> FieldType | None:
    """Like by_id() but returns None for unknown ids."""
    try:
        return FieldType(type_id)
    except ValueError:
        return None


def grouped_by_category() -> dict[str, list[FieldType]]:
    """Return field types grouped by category, both in display order."""
    return {category: list(members) for category, members in _CATEGORIES.items()}


class FieldTypeRegistry:
    """
    Read-only field type catalogue.

    Constructed once at startup and injected into the widget registry and the
    type managers. `allowed` restricts the catalogue to a subset (used by
    deployments that hide some kinds from the admin UI).
    """

    def __init__(self, allowed: list[FieldType] | None = None) -> None:
        self._types: tuple[FieldType, ...] = tuple(allowed) if allowed is not None else tuple(FieldType)

    def all_types(self) -> list[FieldType]:
        return list(self._types)

    def by_id(self, type_id: str | FieldType) -> FieldType:
        field_type = find(type_id)
        if field_type is None or field_type not in self._types:
            raise FieldTypeNotFoundError(type_id)
        return field_type

    def find(self, type_id: str | FieldType | None) -> FieldType | None:
        field_type = find(type_id)
        return field_type if field_type in self._types else None

    def has(self, type_id: str | FieldType | None) -> bool:
        return self.find(type_id) is not None

    def grouped_by_category(self) -> dict[str, list[FieldType]]:
        grouped: dict[str, list[FieldType]] = {}
        for category, members in grouped_by_category().items():
            kept = [member for member in members if member in self._types]
            if kept:
                grouped[category] = kept
        return grouped

    def type_options(self) -> list[dict[str, str]]:
        """Id/label pairs for field-type selectors."""
        return [{"id": t.value, "label": t.label} for t in self._types]
