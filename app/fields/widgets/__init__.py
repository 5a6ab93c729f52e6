"""
Field widgets.

Public API:
    Widget          - abstract base class all widgets must subclass
    WidgetMetadata  - declarative widget metadata dataclass
    RepeaterWidget  - wraps a single-value widget for multi-value fields
    core_widgets()  - fresh instances of every built-in widget, in registration order
"""

from .base import Widget, WidgetMetadata
from .date import DateTimeWidget, DateWidget, TimeWidget
from .media import FileWidget, GalleryWidget, ImageWidget, VideoWidget
from .number import DecimalWidget, NumberWidget, RangeWidget
from .reference import BlockReferenceWidget, EntityReferenceWidget, TaxonomyWidget, UserReferenceWidget
from .repeater import RepeaterWidget
from .rich_text import CodeWidget, MarkdownWidget, WysiwygWidget
from .selection import CheckboxesWidget, CheckboxWidget, RadiosWidget, SelectWidget, SwitchWidget
from .special import AddressWidget, ColorWidget, GeolocationWidget, JsonWidget, LinkWidget, SlugWidget
from .text import (
    EmailWidget,
    HiddenWidget,
    PasswordWidget,
    PhoneWidget,
    TextareaWidget,
    TextInputWidget,
    UrlWidget,
)

CORE_WIDGET_CLASSES: tuple[type[Widget], ...] = (
    TextInputWidget,
    TextareaWidget,
    EmailWidget,
    UrlWidget,
    PhoneWidget,
    WysiwygWidget,
    MarkdownWidget,
    CodeWidget,
    NumberWidget,
    DecimalWidget,
    RangeWidget,
    CheckboxWidget,
    SwitchWidget,
    SelectWidget,
    RadiosWidget,
    CheckboxesWidget,
    DateWidget,
    DateTimeWidget,
    TimeWidget,
    ImageWidget,
    FileWidget,
    GalleryWidget,
    VideoWidget,
    EntityReferenceWidget,
    TaxonomyWidget,
    UserReferenceWidget,
    BlockReferenceWidget,
    ColorWidget,
    SlugWidget,
    JsonWidget,
    HiddenWidget,
    PasswordWidget,
    LinkWidget,
    AddressWidget,
    GeolocationWidget,
)


def core_widgets() -> list[Widget]:
    return [widget_class() for widget_class in CORE_WIDGET_CLASSES]


__all__ = [
    "Widget",
    "WidgetMetadata",
    "RepeaterWidget",
    "CORE_WIDGET_CLASSES",
    "core_widgets",
    "AddressWidget",
    "BlockReferenceWidget",
    "CheckboxWidget",
    "CheckboxesWidget",
    "CodeWidget",
    "ColorWidget",
    "DateTimeWidget",
    "DateWidget",
    "DecimalWidget",
    "EmailWidget",
    "EntityReferenceWidget",
    "FileWidget",
    "GalleryWidget",
    "GeolocationWidget",
    "HiddenWidget",
    "ImageWidget",
    "JsonWidget",
    "LinkWidget",
    "MarkdownWidget",
    "NumberWidget",
    "PasswordWidget",
    "PhoneWidget",
    "RadiosWidget",
    "RangeWidget",
    "SelectWidget",
    "SlugWidget",
    "SwitchWidget",
    "TaxonomyWidget",
    "TextareaWidget",
    "TextInputWidget",
    "TimeWidget",
    "UrlWidget",
    "UserReferenceWidget",
    "VideoWidget",
    "WysiwygWidget",
]
