"""Small markup helpers for widgets. Text and attribute values are escaped with markupsafe."""

from __future__ import annotations

from typing import Any, Iterable

from markupsafe import Markup, escape

VOID_TAGS = {"input", "img", "br", "hr", "link", "meta"}


def attrs(**attributes: Any) -> Markup:
    """
    Render attributes. `class_` maps to `class`, underscores become dashes
    (`data_widget` -> `data-widget`), True renders a bare attribute and
    False/None are omitted.
    """
    parts = []
    for key, value in attributes.items():
        if value is None or value is False:
            continue
        name = "class" if key == "class_" else key.rstrip("_").replace("_", "-")
        if value is True:
            parts.append(Markup(" {}").format(name))
        else:
            if isinstance(value, (list, tuple)):
                value = " ".join(str(v) for v in value if v)
            parts.append(Markup(' {}="{}"').format(name, value))
    return Markup("").join(parts)


def tag(tag_name: str, content: Any = None, /, **attributes: Any) -> Markup:
    """Render one element. Plain strings in `content` are escaped, Markup is kept."""
    opening = Markup("<{}{}>").format(tag_name, attrs(**attributes))
    if tag_name in VOID_TAGS:
        return opening
    if content is None:
        inner = Markup("")
    elif isinstance(content, (list, tuple)):
        inner = Markup("").join(escape(part) for part in content)
    else:
        inner = escape(content)
    return opening + inner + Markup("</{}>").format(tag_name)


def join(parts: Iterable[Any]) -> Markup:
    return Markup("").join(escape(part) for part in parts)


def option(value: Any, label: Any, selected: bool = False) -> Markup:
    return tag("option", label, value=value, selected=selected)
