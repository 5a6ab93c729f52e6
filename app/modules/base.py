"""ModuleDescriptor: what a module contributes to the field pipeline and the type catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from app.content_types.descriptors import BlockTypeDescriptor, ContentTypeDescriptor
    from app.fields.widgets import Widget


@dataclass
class ModuleDescriptor:
    """
    Declarative description of a module.

    Attributes:
        name:          Machine-readable slug, e.g. "core", "example".
        version:       Semver string.
        description:   Human-readable description.
        widgets:       Zero-argument factory returning fresh widget instances.
        type_defaults: Field type id -> widget id overrides for the registry.
        content_types: Code-defined content types shipped by the module.
        block_types:   Code-defined block types shipped by the module.
        enabled:       Disabled modules are skipped at startup.
    """

    name: str
    version: str = "1.0.0"
    description: str = ""
    widgets: Callable[[], list["Widget"]] | None = None
    type_defaults: dict[str, str] = field(default_factory=dict)
    content_types: list["ContentTypeDescriptor"] = field(default_factory=list)
    block_types: list["BlockTypeDescriptor"] = field(default_factory=list)
    enabled: bool = True

    def create_widgets(self) -> list["Widget"]:
        return list(self.widgets()) if self.widgets else []
