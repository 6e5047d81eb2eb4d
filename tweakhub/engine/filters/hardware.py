"""Hardware-capability filter."""

from __future__ import annotations

import logging

from tweakhub.shared.models import SettingDefinition

logger = logging.getLogger(__name__)


class HardwareCompatibilityFilter:
    def __init__(self, capabilities):
        self.capabilities = capabilities

    async def filter_settings(self, settings: list[SettingDefinition]) -> list[SettingDefinition]:
        result = []
        for setting in settings:
            reason = await self._rejection_reason(setting)
            if reason is None:
                result.append(setting)
            else:
                logger.debug("Filtered out %s: %s", setting.id, reason)
        return result

    async def _rejection_reason(self, setting: SettingDefinition) -> str | None:
        if not setting.requires_hardware_check:
            return None
        caps = self.capabilities
        if setting.requires_battery and not await caps.has_battery():
            return "requires a battery"
        if setting.requires_lid and not await caps.has_lid():
            return "requires a lid"
        if setting.requires_desktop and (await caps.has_battery() or await caps.has_lid()):
            return "desktop only"
        if setting.requires_brightness_support and not await caps.supports_brightness():
            return "requires brightness control"
        if setting.requires_hybrid_sleep and not await caps.supports_hybrid_sleep():
            return "requires hybrid sleep"
        return None
