"""
Output sanitization for stored field values

Rich text widgets store markup as typed by editors, so it goes through bleach
on the way in (prepare_value) and again on the way out (display mode). URL-ish
widgets reject script-capable schemes before a value lands in an href or src.
"""

import bleach

# Markup a wysiwyg editor can produce
RICH_TEXT_TAGS = frozenset(
    {
        "p", "br", "strong", "em", "u", "s", "h2", "h3", "h4", "h5", "h6",
        "blockquote", "code", "pre", "hr", "ul", "ol", "li", "a", "img",
        "table", "thead", "tbody", "tr", "th", "td", "div", "span",
    }
)  # fmt: skip

RICH_TEXT_ATTRS = {
    "a": ["href", "title", "target", "rel"],
    "img": ["src", "alt", "title", "width", "height"],
    "code": ["class"],
    "pre": ["class"],
    "div": ["class"],
    "span": ["class"],
    "table": ["class"],
}

URL_PROTOCOLS = frozenset({"http", "https", "mailto", "tel"})
BLOCKED_SCHEMES = ("javascript:", "data:", "vbscript:", "file:")


def sanitize_html(text: str | None, tags=None, strip: bool = False) -> str:
    """
    Clean editor markup.

    Args:
        text: Stored HTML
        tags: Allowed tags (default: RICH_TEXT_TAGS)
        strip: Remove every tag and keep only the text
    """
    if text is None:
        return ""
    if strip:
        return bleach.clean(text, tags=set(), strip=True)
    return bleach.clean(
        text,
        tags=set(tags) if tags is not None else RICH_TEXT_TAGS,
        attributes=RICH_TEXT_ATTRS,
        protocols=URL_PROTOCOLS,
        strip=True,
    )


def is_safe_url(url: str | None) -> bool:
    if not url:
        return False
    return not url.strip().lower().startswith(BLOCKED_SCHEMES)
