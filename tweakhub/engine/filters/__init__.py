"""Compatibility filters applied to feature catalogs before they are cached."""

from tweakhub.engine.filters.existence import ExistenceFilter
from tweakhub.engine.filters.hardware import HardwareCompatibilityFilter
from tweakhub.engine.filters.windows import WindowsCompatibilityFilter

__all__ = ["ExistenceFilter", "HardwareCompatibilityFilter", "WindowsCompatibilityFilter"]
