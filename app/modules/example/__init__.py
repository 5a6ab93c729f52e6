"""Example module: demonstrates shipping custom widgets from a module."""

from app.modules.base import ModuleDescriptor

from .widgets import IconPickerWidget, RatingWidget


def create_widgets():
    return [RatingWidget(), IconPickerWidget()]


EXAMPLE_MODULE = ModuleDescriptor(
    name="example",
    description="Example module demonstrating custom field widgets",
    widgets=create_widgets,
)

__all__ = ["EXAMPLE_MODULE", "IconPickerWidget", "RatingWidget"]
