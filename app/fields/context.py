"""
RenderContext and RenderResult.

A RenderContext is built per request and handed to every widget call; the
`with_*` helpers return modified copies. A RenderResult pairs rendered markup
with the assets that markup needs.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Mapping

from markupsafe import Markup

from app.config import settings
from app.fields.assets import AssetCollection

EDIT = "edit"
DISPLAY = "display"


@dataclass(frozen=True)
class RenderContext:
    mode: str = EDIT
    locale: str = field(default_factory=lambda: settings.default_locale)
    form_id: str = ""
    name_prefix: str = ""
    index: int | str | None = None
    disabled: bool = False
    readonly: bool = False
    hide_label: bool = False
    hide_help: bool = False
    errors: Mapping[str, list[str]] = field(default_factory=dict)
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, **options: Any) -> "RenderContext":
        """Build a context; unknown keyword arguments land in `options`."""
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {key: value for key, value in options.items() if key in known}
        extra = {key: value for key, value in options.items() if key not in known}
        if extra:
            kwargs["options"] = {**kwargs.get("options", {}), **extra}
        return cls(**kwargs)

    @classmethod
    def for_display(cls, **options: Any) -> "RenderContext":
        return cls.create(**{**options, "mode": DISPLAY, "readonly": True})

    @property
    def is_display(self) -> bool:
        return self.mode == DISPLAY

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    def errors_for(self, machine_name: str) -> list[str]:
        return list(self.errors.get(machine_name, []))

    def has_errors_for(self, machine_name: str) -> bool:
        return bool(self.errors.get(machine_name))

    def field_name(self, machine_name: str) -> str:
        """Form input name, e.g. `fields[title]` under the `fields` prefix."""
        if self.name_prefix:
            return f"{self.name_prefix}[{machine_name}]"
        return machine_name

    def field_id(self, machine_name: str) -> str:
        parts = [self.form_id, self.name_prefix, machine_name]
        if self.index is not None:
            parts.append(str(self.index))
        return "field-" + "-".join(part for part in parts if part).replace("_", "-").replace("[", "-").replace("]", "")

    # ── Copies ────────────────────────────────────────────────────────

    def with_mode(self, mode: str) -> "RenderContext":
        return dataclasses.replace(self, mode=mode)

    def with_form_id(self, form_id: str) -> "RenderContext":
        return dataclasses.replace(self, form_id=form_id)

    def with_name_prefix(self, prefix: str) -> "RenderContext":
        return dataclasses.replace(self, name_prefix=prefix)

    def with_index(self, index: int | str | None) -> "RenderContext":
        return dataclasses.replace(self, index=index)

    def with_disabled(self, disabled: bool = True) -> "RenderContext":
        return dataclasses.replace(self, disabled=disabled)

    def with_errors(self, errors: Mapping[str, list[str]]) -> "RenderContext":
        return dataclasses.replace(self, errors=dict(errors))

    def with_option(self, key: str, value: Any) -> "RenderContext":
        return dataclasses.replace(self, options={**self.options, key: value})

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "locale": self.locale,
            "form_id": self.form_id,
            "name_prefix": self.name_prefix,
            "index": self.index,
            "disabled": self.disabled,
            "readonly": self.readonly,
            "hide_label": self.hide_label,
            "hide_help": self.hide_help,
            "errors": {key: list(value) for key, value in self.errors.items()},
            "options": dict(self.options),
        }


@dataclass
class RenderResult:
    html: Markup = field(default_factory=lambda: Markup(""))
    assets: AssetCollection = field(default_factory=AssetCollection)

    def __post_init__(self) -> None:
        if not isinstance(self.html, Markup):
            self.html = Markup(self.html)

    @classmethod
    def empty(cls) -> "RenderResult":
        return cls()

    def combine(self, other: "RenderResult") -> "RenderResult":
        """New result with both fragments; neither input is modified."""
        return RenderResult(self.html + other.html, self.assets.copy().merge(other.assets))

    def wrap(self, before: str, after: str) -> "RenderResult":
        return RenderResult(Markup(before) + self.html + Markup(after), self.assets)

    def html_with_assets(self) -> Markup:
        return self.assets.render() + self.html

    @property
    def is_empty(self) -> bool:
        return not self.html and self.assets.is_empty

    def __str__(self) -> str:
        return str(self.html)

    def to_dict(self) -> dict[str, Any]:
        return {"html": str(self.html), "assets": self.assets.to_dict()}
