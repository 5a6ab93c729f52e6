"""
Form building on top of the widget registry.

A FormBuilder renders a set of field definitions into a complete `<form>`:
optional CSRF token, form-level errors, fields (grouped into collapsible
fieldsets by their `group` setting), and the submit/cancel actions. Like
RenderContext, the builder is immutable and every `with_*` call returns a copy.
"""

from __future__ import annotations

import dataclasses
import secrets
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from markupsafe import Markup

from app.fields.context import RenderContext, RenderResult
from app.fields.definition import FieldDefinition
from app.fields.html import tag
from app.fields.registry import WidgetRegistry
from app.utils.sanitize import is_safe_url

DEFAULT_GROUP = "General"
FORM_ERRORS_KEY = "_form"
CSRF_FIELD = "_token"

TOGGLE_SCRIPT = "this.parentElement.classList.toggle('cms-form__group--collapsed')"


@dataclass
class FormResult(RenderResult):
    """Rendered form markup plus the assets of every widget inside it."""


@dataclass(frozen=True)
class FormBuilder:
    widgets: WidgetRegistry
    id: str = "form"
    action: str = ""
    method: str = "POST"
    css_class: str = "cms-form"
    enctype: str = "multipart/form-data"
    ajax: bool = False
    group_fields: bool = True
    submit_label: str = "Save"
    cancel_url: str | None = None
    errors: Mapping[str, list[str]] = field(default_factory=dict)
    include_csrf: bool = True
    csrf_token: str | None = None

    # ── Copies ────────────────────────────────────────────────────────

    def with_id(self, form_id: str) -> "FormBuilder":
        return dataclasses.replace(self, id=form_id)

    def with_action(self, action: str) -> "FormBuilder":
        return dataclasses.replace(self, action=action)

    def with_method(self, method: str) -> "FormBuilder":
        return dataclasses.replace(self, method=method.upper())

    def with_class(self, css_class: str) -> "FormBuilder":
        return dataclasses.replace(self, css_class=css_class)

    def with_enctype(self, enctype: str) -> "FormBuilder":
        return dataclasses.replace(self, enctype=enctype)

    def with_ajax(self, ajax: bool = True) -> "FormBuilder":
        return dataclasses.replace(self, ajax=ajax)

    def with_grouping(self, group_fields: bool = True) -> "FormBuilder":
        return dataclasses.replace(self, group_fields=group_fields)

    def with_submit_label(self, label: str) -> "FormBuilder":
        return dataclasses.replace(self, submit_label=label)

    def with_cancel_url(self, url: str | None) -> "FormBuilder":
        return dataclasses.replace(self, cancel_url=url)

    def with_errors(self, errors: Mapping[str, list[str]]) -> "FormBuilder":
        return dataclasses.replace(self, errors={key: list(value) for key, value in errors.items()})

    def with_csrf_token(self, token: str) -> "FormBuilder":
        return dataclasses.replace(self, include_csrf=True, csrf_token=token)

    def without_csrf(self) -> "FormBuilder":
        return dataclasses.replace(self, include_csrf=False)

    # ── Rendering ─────────────────────────────────────────────────────

    def context(self) -> RenderContext:
        return RenderContext.create(form_id=self.id, errors=self.errors)

    def build(self, fields: Sequence[FieldDefinition], values: Mapping[str, Any] | None = None) -> FormResult:
        """Render the complete form element."""
        body = self.build_fields(fields, values)
        method = self.method.upper()

        parts = []
        if self.include_csrf and method == "POST":
            parts.append(tag("input", type="hidden", name=CSRF_FIELD, value=self.csrf_token or secrets.token_hex(32)))
        if self.errors.get(FORM_ERRORS_KEY):
            parts.append(self._form_errors(self.errors[FORM_ERRORS_KEY]))
        parts.append(tag("div", body.html, class_="cms-form__fields"))
        parts.append(self._actions())

        html = tag(
            "form",
            Markup("").join(parts),
            id=self.id,
            action=self.action,
            method=method,
            class_=self.css_class,
            enctype=self.enctype,
            data_ajax="true" if self.ajax else None,
        )
        return FormResult(html, body.assets)

    def build_fields(
        self, fields: Sequence[FieldDefinition], values: Mapping[str, Any] | None = None
    ) -> RenderResult:
        """Render the fields only, without the form element or actions."""
        values = values or {}
        context = self.context()
        if not self.group_fields:
            return self.widgets.render_fields(fields, values, context)

        combined = RenderResult()
        for index, (group, members) in enumerate(group_by_setting(fields).items()):
            content = RenderResult()
            for member in members:
                content = content.combine(self.widgets.render_field(member, values.get(member.machine_name), context))
            legend = tag(
                "legend",
                [tag("span", "▼", class_="cms-form__group-toggle"), f" {group}"],
                class_="cms-form__group-title",
                onclick=TOGGLE_SCRIPT,
            )
            classes = ["cms-form__group", "cms-form__group--collapsed" if index > 0 else ""]
            fieldset = tag("fieldset", [legend, tag("div", content.html, class_="cms-form__group-content")], class_=classes)
            combined = combined.combine(RenderResult(fieldset, content.assets))
        return combined

    def build_field(self, field_definition: FieldDefinition, value: Any = None) -> RenderResult:
        return self.widgets.render_field(field_definition, value, self.context())

    # ── Submissions ───────────────────────────────────────────────────

    def validate(self, fields: Sequence[FieldDefinition], values: Mapping[str, Any]) -> dict[str, list[str]]:
        return self.widgets.validate_fields(fields, values)

    def prepare(self, fields: Sequence[FieldDefinition], values: Mapping[str, Any]) -> dict[str, Any]:
        return self.widgets.prepare_values(fields, values)

    # ── Pieces ────────────────────────────────────────────────────────

    def _form_errors(self, errors: Sequence[str]) -> Markup:
        return tag("div", [tag("div", error, class_="cms-form__error") for error in errors], class_="cms-form__errors")

    def _actions(self) -> Markup:
        parts = [tag("button", self.submit_label, type="submit", class_="cms-form__submit")]
        if self.cancel_url and is_safe_url(self.cancel_url):
            parts.append(tag("a", "Cancel", href=self.cancel_url, class_="cms-form__cancel"))
        return tag("div", parts, class_="cms-form__actions")


def group_by_setting(fields: Sequence[FieldDefinition]) -> dict[str, list[FieldDefinition]]:
    """Fields keyed by their `group` setting, in first-seen group order."""
    groups: dict[str, list[FieldDefinition]] = {}
    for item in fields:
        group = item.get_setting("group") or DEFAULT_GROUP
        groups.setdefault(str(group), []).append(item)
    return groups
