"""
Modules

A module bundles widgets, per-type widget defaults and code-defined content
and block types. Modules are listed explicitly in MODULES; the widget
registry and the type managers read that list at startup.
"""

from .base import ModuleDescriptor
from .core import CORE_MODULE
from .example import EXAMPLE_MODULE

MODULES: list[ModuleDescriptor] = [CORE_MODULE, EXAMPLE_MODULE]


def enabled_modules(modules: list[ModuleDescriptor] | None = None) -> list[ModuleDescriptor]:
    return [module for module in (MODULES if modules is None else modules) if module.enabled]


__all__ = ["CORE_MODULE", "EXAMPLE_MODULE", "MODULES", "ModuleDescriptor", "enabled_modules"]
