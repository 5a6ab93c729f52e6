"""
Media pickers: image, file, gallery, video.

Values are media ids (or lists of ids for galleries). When the caller has
already resolved media records it can pass a mapping such as
{"id": 3, "url": "/uploads/a.png", "alt": "..."} instead and the display
renderers use the URL.
"""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import as_int, is_empty, is_integer
from app.fields.widgets.base import Widget
from app.utils.sanitize import is_safe_url

VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com")


def _media_id(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("id")
    return value


def _media_url(value: Any) -> str | None:
    if isinstance(value, dict):
        url = value.get("url") or value.get("path")
        return url if url and is_safe_url(url) else None
    if isinstance(value, str) and not is_integer(value) and is_safe_url(value):
        return value
    return None


class FileWidget(Widget):
    id = "file"
    label = "File Upload"
    category = "Media"
    icon = "📎"
    priority = 5
    supported_types = (FieldType.FILE, FieldType.IMAGE, FieldType.VIDEO)
    css_assets = ("/assets/widgets/media/picker.css",)
    js_assets = ("/assets/widgets/media/picker.js",)
    accept = "*/*"

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        element_id = attributes["id"]
        media_id = _media_id(value)
        hidden = tag("input", type="hidden", value="" if media_id is None else media_id, **attributes)
        button = tag(
            "button",
            "Choose file",
            type="button",
            class_="field-widget__media-button",
            data_target=element_id,
            data_accept=field.get_setting("allowed_extensions", self.accept),
            disabled=context.disabled,
        )
        preview = tag("div", self.preview(value), class_="field-widget__media-preview", id=f"{element_id}-preview")
        return hidden + button + preview

    def preview(self, value: Any) -> Markup:
        url = _media_url(value)
        if url:
            return tag("a", url.rsplit("/", 1)[-1], href=url, target="_blank", rel="noopener")
        if not is_empty(value):
            return tag("span", f"Media #{_media_id(value)}")
        return Markup("")

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        return f"CmsWidgets.mediaPicker({json.dumps(element_id)});"

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        media_id = _media_id(value)
        if is_empty(media_id):
            return None
        return as_int(media_id) if is_integer(media_id) else media_id

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        media_id = _media_id(value)
        if is_empty(media_id) or is_integer(media_id) or _media_url(value):
            return []
        return ["Please select a valid file"]

    def settings_schema(self) -> dict[str, Any]:
        return {
            "allowed_extensions": {"type": "string", "label": "Allowed extensions", "default": self.accept},
            "max_size": {"type": "integer", "label": "Maximum size (MB)", "default": 10},
        }

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        return RenderResult(tag("span", self.preview(value), class_="field-display field-display--file"))


class ImageWidget(FileWidget):
    id = "image"
    label = "Image Picker"
    icon = "🖼"
    priority = 10
    supported_types = (FieldType.IMAGE,)
    accept = "image/*"

    def preview(self, value: Any) -> Markup:
        url = _media_url(value)
        if url:
            alt = value.get("alt", "") if isinstance(value, dict) else ""
            return tag("img", src=url, alt=alt, loading="lazy")
        return super().preview(value)

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return Widget.render_display(self, field, value, context)
        return RenderResult(tag("figure", self.preview(value), class_="field-display field-display--image"))


class VideoWidget(FileWidget):
    id = "video"
    label = "Video"
    icon = "🎬"
    priority = 10
    supported_types = (FieldType.VIDEO,)
    accept = "video/*"

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if isinstance(value, str) and not is_integer(value) and value:
            if not any(host in value for host in VIDEO_HOSTS) and not _media_url(value):
                return ["Please enter a supported video URL"]
            return []
        return super().validate(field, value)

    def preview(self, value: Any) -> Markup:
        url = _media_url(value)
        if url and not any(host in url for host in VIDEO_HOSTS):
            return tag("video", None, src=url, controls=True, preload="metadata")
        return super().preview(value)


class GalleryWidget(ImageWidget):
    id = "gallery"
    label = "Image Gallery"
    icon = "🖼"
    priority = 10
    supported_types = (FieldType.GALLERY,)
    handles_multiple = True
    accept = "image/*"
    css_assets = ("/assets/widgets/media/picker.css", "/assets/widgets/media/gallery.css")
    js_assets = ("/assets/widgets/media/picker.js", "/assets/widgets/media/gallery.js")

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        element_id = attributes["id"]
        ids = self.prepare_value(field, value)
        hidden = tag("input", type="hidden", value=json.dumps(ids), **attributes)
        items = [tag("li", self.preview(item), data_media_id=_media_id(item)) for item in self._items(value)]
        listing = tag("ul", Markup("").join(items), class_="field-widget__gallery", id=f"{element_id}-items")
        button = tag(
            "button",
            "Add images",
            type="button",
            class_="field-widget__media-button",
            data_target=element_id,
            data_multiple="true",
            disabled=context.disabled,
        )
        return hidden + listing + button

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        limit = json.dumps(field.get_setting("max_items"))
        return f"CmsWidgets.gallery({json.dumps(element_id)}, {{maxItems: {limit}}});"

    @staticmethod
    def _items(value: Any) -> list[Any]:
        if is_empty(value):
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                value = [part for part in value.split(",") if part.strip()]
        return list(value) if isinstance(value, (list, tuple)) else [value]

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        ids = []
        for item in self._items(value):
            media_id = _media_id(item)
            if not is_empty(media_id):
                ids.append(as_int(media_id) if is_integer(media_id) else media_id)
        return ids

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        limit = field.get_int_setting("max_items", 0)
        if limit and len(self._items(value)) > limit:
            return [f"A maximum of {limit} images is allowed"]
        return []

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        items = self._items(value)
        if not items:
            return Widget.render_display(self, field, None, context)
        figures = [tag("figure", self.preview(item)) for item in items]
        return RenderResult(tag("div", Markup("").join(figures), class_="field-display field-display--gallery"))
