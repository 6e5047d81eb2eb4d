"""Composes the compatibility filters for one feature's catalog."""

from __future__ import annotations

import logging

from tweakhub.engine.filters import ExistenceFilter, HardwareCompatibilityFilter, WindowsCompatibilityFilter
from tweakhub.shared.models import SettingDefinition

logger = logging.getLogger(__name__)


class FilterPipeline:
    """Runs Windows-version, hardware and existence filters in that order.

    Hardware and existence filtering only apply to features listed in
    ``hardware_sensitive_features``; everything else is filtered by OS
    version alone.
    """

    def __init__(
        self,
        windows_filter: WindowsCompatibilityFilter,
        hardware_filter: HardwareCompatibilityFilter,
        existence_filter: ExistenceFilter,
        hardware_sensitive_features: frozenset[str] = frozenset({"power"}),
    ):
        self.windows_filter = windows_filter
        self.hardware_filter = hardware_filter
        self.existence_filter = existence_filter
        self.hardware_sensitive_features = hardware_sensitive_features

    def is_hardware_sensitive(self, feature_id: str) -> bool:
        return feature_id in self.hardware_sensitive_features

    async def _hardware_and_existence(self, settings: list[SettingDefinition]) -> list[SettingDefinition]:
        settings = await self.hardware_filter.filter_settings(settings)
        return await self.existence_filter.filter_settings(settings)

    async def filtered(self, feature_id: str, settings: list[SettingDefinition]) -> list[SettingDefinition]:
        result = self.windows_filter.filter_settings(settings, apply_filter=True)
        if self.is_hardware_sensitive(feature_id):
            result = await self._hardware_and_existence(result)
        return result

    async def bypassed(self, feature_id: str, settings: list[SettingDefinition]) -> list[SettingDefinition]:
        result = list(settings)
        if self.is_hardware_sensitive(feature_id):
            result = await self._hardware_and_existence(result)
        return self.windows_filter.filter_settings(result, apply_filter=False)

    async def run(
        self, feature_id: str, settings: list[SettingDefinition]
    ) -> tuple[list[SettingDefinition], list[SettingDefinition]]:
        """Return ``(filtered, bypassed)`` for one feature."""
        filtered = await self.filtered(feature_id, settings)
        bypassed = await self.bypassed(feature_id, settings)
        logger.debug(
            "Feature %s: %d settings, %d compatible, %d in bypass view",
            feature_id,
            len(settings),
            len(filtered),
            len(bypassed),
        )
        return filtered, bypassed
