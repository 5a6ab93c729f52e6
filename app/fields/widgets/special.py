"""Special-purpose widgets: color, slug, JSON, link, address, geolocation."""

from __future__ import annotations

import json
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import COLOR_RE, SLUG_RE, URL_RE, is_empty, is_number
from app.fields.widgets.base import Widget
from app.utils.sanitize import is_safe_url
from app.utils.slugify import slugify


def _as_dict(value: Any) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    if isinstance(value, str) and value:
        try:
            decoded = json.loads(value)
        except ValueError:
            return {}
        return decoded if isinstance(decoded, dict) else {}
    return {}


class ColorWidget(Widget):
    id = "color"
    label = "Color Picker"
    category = "Special"
    icon = "🎨"
    priority = 10
    supported_types = (FieldType.COLOR,)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        attributes = self.base_attributes(field, context)
        current = value or field.get_setting("default_color", "#000000")
        picker = tag("input", type="color", value=current, **attributes)
        text = tag(
            "input",
            type="text",
            value=current,
            class_="field-widget__color-text",
            pattern="^#[0-9a-fA-F]{6}$",
            aria_label=f"{field.label} hex value",
            disabled=context.disabled,
            oninput="this.previousElementSibling.value = this.value",
        )
        return picker + text

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value) or COLOR_RE.match(str(value)):
            return []
        return ["Please enter a valid hex color"]

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        return None if is_empty(value) else str(value).lower()

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value) or not COLOR_RE.match(str(value)):
            return super().render_display(field, value, context)
        swatch = tag("span", None, class_="field-display__swatch", style=f"background-color: {value}")
        return RenderResult(tag("span", [swatch, " ", value], class_="field-display field-display--color"))


class SlugWidget(Widget):
    """Slug input that can follow another field on the same form (`source_field` setting)."""

    id = "slug"
    label = "URL Slug"
    category = "Special"
    icon = "🔤"
    priority = 10
    supported_types = (FieldType.SLUG, FieldType.STRING)
    js_assets = ("/assets/widgets/slug/slug.js",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return tag(
            "input",
            type="text",
            value="" if value is None else value,
            pattern="[a-z0-9]+(?:-[a-z0-9]+)*",
            data_source=field.get_setting("source_field"),
            **self.base_attributes(field, context),
        )

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        source = field.get_setting("source_field")
        if not source:
            return None
        return f"CmsWidgets.slug({json.dumps(element_id)}, {json.dumps(source)});"

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        return None if is_empty(value) else slugify(str(value))

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if is_empty(value) or SLUG_RE.match(str(value)):
            return []
        return ["Only lowercase letters, numbers and hyphens are allowed"]

    def settings_schema(self) -> dict[str, Any]:
        return {"source_field": {"type": "string", "label": "Generate from field", "default": None}}


class JsonWidget(Widget):
    id = "json"
    label = "JSON Editor"
    category = "Special"
    icon = "{}"
    priority = 10
    supported_types = (FieldType.JSON,)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        if value is not None and not isinstance(value, str):
            value = json.dumps(value, indent=2, ensure_ascii=False)
        return tag(
            "textarea",
            "" if value is None else value,
            rows=field.get_setting("rows", 10),
            spellcheck="false",
            data_editor="json",
            **self.base_attributes(field, context),
        )

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        if not isinstance(value, str) or not value.strip():
            return []
        try:
            json.loads(value)
        except ValueError as e:
            return [f"Invalid JSON: {e}"]
        return []

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        if is_empty(value):
            return super().render_display(field, value, context)
        text = value if isinstance(value, str) else json.dumps(value, indent=2, ensure_ascii=False)
        return RenderResult(tag("pre", text, class_="field-display field-display--json"))


class LinkWidget(Widget):
    """URL plus title and target; stored as {"url", "title", "target"}."""

    id = "link"
    label = "Link"
    category = "Special"
    icon = "🔗"
    priority = 10
    supported_types = (FieldType.LINK, FieldType.URL)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        data = _as_dict(value) if not isinstance(value, str) or value.startswith("{") else {"url": value}
        name = self.field_name(field, context)
        base_id = self.field_id(field, context)
        url = tag(
            "input",
            type="url",
            id=base_id,
            name=f"{name}[url]",
            value=data.get("url", ""),
            placeholder="https://",
            required=field.required,
            disabled=context.disabled,
            class_="field-widget__control",
        )
        title = tag(
            "input",
            type="text",
            id=f"{base_id}-title",
            name=f"{name}[title]",
            value=data.get("title", ""),
            placeholder="Link text",
            disabled=context.disabled,
            class_="field-widget__control",
        )
        new_tab = tag(
            "input",
            type="checkbox",
            name=f"{name}[target]",
            value="_blank",
            checked=data.get("target") == "_blank",
            disabled=context.disabled,
        )
        return tag(
            "div",
            [url, title, tag("label", [new_tab, " Open in new tab"])],
            class_="field-widget__link",
        )

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        data = _as_dict(value) if not isinstance(value, str) or value.startswith("{") else {"url": value}
        if not data.get("url"):
            return None
        if field.field_type == FieldType.URL.value:
            return data["url"]
        return {"url": data["url"], "title": data.get("title") or "", "target": data.get("target") or ""}

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        prepared = self.prepare_value(field, value)
        url = prepared.get("url") if isinstance(prepared, dict) else prepared
        if not url:
            return []
        if url.startswith("/") or (is_safe_url(url) and URL_RE.match(url)):
            return []
        return ["Please enter a valid URL"]

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        prepared = self.prepare_value(field, value)
        if not prepared:
            return super().render_display(field, None, context)
        data = prepared if isinstance(prepared, dict) else {"url": prepared}
        if not is_safe_url(data["url"]):
            return super().render_display(field, None, context)
        target = data.get("target") or None
        return RenderResult(
            tag(
                "a",
                data.get("title") or data["url"],
                href=data["url"],
                target=target,
                rel="noopener noreferrer" if target else None,
                class_="field-display field-display--link",
            )
        )


class AddressWidget(Widget):
    id = "address"
    label = "Address"
    category = "Special"
    icon = "🏠"
    priority = 10
    supported_types = (FieldType.ADDRESS,)

    PARTS = (
        ("street", "Street"),
        ("city", "City"),
        ("state", "State / Region"),
        ("postal_code", "Postal code"),
        ("country", "Country"),
    )

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        data = _as_dict(value)
        name = self.field_name(field, context)
        base_id = self.field_id(field, context)
        rows = []
        for i, (key, text) in enumerate(self.PARTS):
            control = tag(
                "input",
                type="text",
                id=base_id if i == 0 else f"{base_id}-{key.replace('_', '-')}",
                name=f"{name}[{key}]",
                value=data.get(key, ""),
                placeholder=text,
                required=field.required and key in ("street", "city", "country"),
                disabled=context.disabled,
                class_="field-widget__control",
            )
            rows.append(tag("div", control, class_=f"field-widget__address-{key.replace('_', '-')}"))
        return tag("div", Markup("").join(rows), class_="field-widget__address")

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        data = _as_dict(value)
        cleaned = {key: str(data.get(key) or "").strip() for key, _ in self.PARTS}
        return cleaned if any(cleaned.values()) else None

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        data = self.prepare_value(field, value)
        if not data:
            return super().render_display(field, None, context)
        locality = " ".join(part for part in (data["postal_code"], data["city"]) if part)
        lines = [line for line in (data["street"], locality, data["state"], data["country"]) if line]
        content = []
        for i, line in enumerate(lines):
            if i:
                content.append(Markup("<br>"))
            content.append(line)
        return RenderResult(tag("address", content, class_="field-display field-display--address"))


class GeolocationWidget(Widget):
    id = "geolocation"
    label = "Map Coordinates"
    category = "Special"
    icon = "📍"
    priority = 10
    supported_types = (FieldType.GEOLOCATION,)
    css_assets = ("/assets/widgets/geolocation/map.css",)
    js_assets = ("/assets/widgets/geolocation/map.js",)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        data = _as_dict(value)
        name = self.field_name(field, context)
        base_id = self.field_id(field, context)
        inputs = [
            tag(
                "input",
                type="number",
                step="any",
                id=base_id if key == "lat" else f"{base_id}-{key}",
                name=f"{name}[{key}]",
                value=data.get(key, ""),
                placeholder=text,
                required=field.required,
                disabled=context.disabled,
                class_="field-widget__control",
            )
            for key, text in (("lat", "Latitude"), ("lng", "Longitude"))
        ]
        canvas = tag("div", None, class_="field-widget__map", id=f"{base_id}-map")
        return tag("div", inputs + [canvas], class_="field-widget__geolocation")

    def init_script(self, field: FieldDefinition, element_id: str) -> str | None:
        zoom = json.dumps(field.get_setting("zoom", 12))
        return f"CmsWidgets.map({json.dumps(element_id)}, {{zoom: {zoom}}});"

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        data = _as_dict(value)
        if not is_number(data.get("lat")) or not is_number(data.get("lng")):
            return None
        return {"lat": float(data["lat"]), "lng": float(data["lng"])}

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        data = _as_dict(value)
        if not data:
            return []
        errors = []
        if not is_number(data.get("lat")) or not -90 <= float(data["lat"]) <= 90:
            errors.append("Latitude must be between -90 and 90")
        if not is_number(data.get("lng")) or not -180 <= float(data["lng"]) <= 180:
            errors.append("Longitude must be between -180 and 180")
        return errors

    def render_display(self, field: FieldDefinition, value: Any, context: RenderContext) -> RenderResult:
        data = self.prepare_value(field, value)
        if not data:
            return super().render_display(field, None, context)
        text = f"{data['lat']:.6f}, {data['lng']:.6f}"
        return RenderResult(
            tag("span", text, class_="field-display field-display--geolocation", data_lat=data["lat"], data_lng=data["lng"])
        )
