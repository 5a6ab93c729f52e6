"""Date and time pickers."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from markupsafe import Markup

from app.fields.context import RenderContext
from app.fields.definition import FieldDefinition
from app.fields.field_types import FieldType
from app.fields.html import tag
from app.fields.validation import is_empty
from app.fields.widgets.base import Widget


def _parse(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


class DateWidget(Widget):
    id = "date"
    label = "Date Picker"
    category = "Date/Time"
    icon = "📅"
    priority = 10
    supported_types = (FieldType.DATE,)
    input_type = "date"
    input_format = "%Y-%m-%d"
    display_format = "%Y-%m-%d"

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        return tag(
            "input",
            type=self.input_type,
            value="" if value is None else value,
            min=field.get_setting("min_date"),
            max=field.get_setting("max_date"),
            **self.base_attributes(field, context),
        )

    def format_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        return self.format_date(value, self.input_format)

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        parsed = _parse(value)
        return parsed.strftime(self.input_format) if parsed else value

    def validate(self, field: FieldDefinition, value: Any) -> list[str]:
        """Reject values outside the `min_date`/`max_date` settings."""
        if is_empty(value):
            return []
        parsed = _parse(value)
        if parsed is None:
            return []
        errors = []
        low = _parse(field.get_setting("min_date")) if field.get_setting("min_date") else None
        high = _parse(field.get_setting("max_date")) if field.get_setting("max_date") else None
        if low and parsed.replace(tzinfo=None) < low.replace(tzinfo=None):
            errors.append(f"Date must be on or after {field.get_setting('min_date')}")
        if high and parsed.replace(tzinfo=None) > high.replace(tzinfo=None):
            errors.append(f"Date must be on or before {field.get_setting('max_date')}")
        return errors

    def display_text(self, field: FieldDefinition, value: Any) -> str:
        return self.format_date(value, field.get_setting("display_format", self.display_format))

    def settings_schema(self) -> dict[str, Any]:
        return {
            "min_date": {"type": "date", "label": "Earliest date", "default": None},
            "max_date": {"type": "date", "label": "Latest date", "default": None},
            "display_format": {"type": "string", "label": "Display format", "default": self.display_format},
        }


class DateTimeWidget(DateWidget):
    id = "datetime"
    label = "Date & Time Picker"
    icon = "🕒"
    supported_types = (FieldType.DATETIME,)
    input_type = "datetime-local"
    input_format = "%Y-%m-%dT%H:%M"
    display_format = "%Y-%m-%d %H:%M"

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        parsed = _parse(value)
        return parsed.isoformat() if parsed else value


class TimeWidget(Widget):
    id = "time"
    label = "Time Picker"
    category = "Date/Time"
    icon = "⏰"
    priority = 10
    supported_types = (FieldType.TIME,)

    def build_input(self, field: FieldDefinition, value: Any, context: RenderContext) -> Markup:
        if isinstance(value, time):
            value = value.strftime("%H:%M")
        return tag(
            "input",
            type="time",
            value="" if value is None else value,
            step=field.get_setting("step"),
            **self.base_attributes(field, context),
        )

    def prepare_value(self, field: FieldDefinition, value: Any) -> Any:
        if is_empty(value):
            return None
        if isinstance(value, time):
            return value.strftime("%H:%M:%S")
        return str(value)
