"""
AssetCollection: CSS files, JS files and init scripts gathered during a render pass.

Entries keep first-insertion order and exact duplicates are dropped, so merging
the same collection twice (or merging a collection into itself) changes nothing.
"""

from __future__ import annotations

from typing import Iterable

from markupsafe import Markup, escape

from app.config import settings


class AssetCollection:
    def __init__(
        self,
        css: Iterable[str] = (),
        js: Iterable[str] = (),
        init_scripts: Iterable[str] = (),
    ) -> None:
        # dicts double as ordered sets
        self._css: dict[str, None] = {}
        self._js: dict[str, None] = {}
        self._init_scripts: dict[str, None] = {}
        self.add_css(*css)
        self.add_js(*js)
        for script in init_scripts:
            self.add_init_script(script)

    def add_css(self, *paths: str) -> "AssetCollection":
        for path in paths:
            if path:
                self._css.setdefault(path, None)
        return self

    def add_js(self, *paths: str) -> "AssetCollection":
        for path in paths:
            if path:
                self._js.setdefault(path, None)
        return self

    def add_init_script(self, script: str) -> "AssetCollection":
        script = (script or "").strip()
        if script:
            self._init_scripts.setdefault(script, None)
        return self

    def merge(self, other: "AssetCollection") -> "AssetCollection":
        """Union `other` into this collection in place and return self."""
        if other is self:
            return self
        self.add_css(*other.css_files)
        self.add_js(*other.js_files)
        for script in other.init_scripts:
            self.add_init_script(script)
        return self

    def copy(self) -> "AssetCollection":
        return AssetCollection(self._css, self._js, self._init_scripts)

    @property
    def css_files(self) -> list[str]:
        return list(self._css)

    @property
    def js_files(self) -> list[str]:
        return list(self._js)

    @property
    def init_scripts(self) -> list[str]:
        return list(self._init_scripts)

    @property
    def is_empty(self) -> bool:
        return not (self._css or self._js or self._init_scripts)

    def __len__(self) -> int:
        return len(self._css) + len(self._js) + len(self._init_scripts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AssetCollection):
            return NotImplemented
        return (
            self.css_files == other.css_files
            and self.js_files == other.js_files
            and self.init_scripts == other.init_scripts
        )

    def __repr__(self) -> str:
        return f"AssetCollection(css={self.css_files!r}, js={self.js_files!r}, init_scripts={len(self._init_scripts)})"

    # ── Output ────────────────────────────────────────────────────────

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://", "//")) or not settings.asset_base_url:
            return path
        return f"{settings.asset_base_url.rstrip('/')}/{path.lstrip('/')}"

    def render_css_tags(self) -> Markup:
        return Markup("").join(
            Markup('<link rel="stylesheet" href="{}">\n').format(self._url(path)) for path in self._css
        )

    def render_js_tags(self) -> Markup:
        return Markup("").join(Markup('<script src="{}"></script>\n').format(self._url(path)) for path in self._js)

    def render_init_scripts(self) -> Markup:
        if not self._init_scripts:
            return Markup("")
        # Init scripts are trusted widget code, not user input
        body = "\n".join(self._init_scripts)
        return Markup(f'<script>\ndocument.addEventListener("DOMContentLoaded", function() {{\n{body}\n}});\n</script>\n')

    def render(self) -> Markup:
        return self.render_css_tags() + self.render_js_tags() + self.render_init_scripts()

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "css": [str(escape(self._url(path))) for path in self._css],
            "js": [str(escape(self._url(path))) for path in self._js],
            "init_scripts": self.init_scripts,
        }
