"""Runtime existence filter for power-scheme settings."""

from __future__ import annotations

import asyncio
import logging

from tweakhub.shared.models import PowerCfgKey, SettingDefinition

logger = logging.getLogger(__name__)


class ExistenceFilter:
    """Keeps power settings whose keys actually exist in the active scheme.

    Hidden keys that declare an enablement write are unhidden, then the
    scheme is queried once more after a short settle delay. A pass makes at
    most two bulk queries regardless of how many settings need enabling.
    """

    def __init__(self, power_backend, raw_store, scheme: str = "SCHEME_CURRENT", settle_delay: float = 0.1):
        self.power_backend = power_backend
        self.raw_store = raw_store
        self.scheme = scheme
        self.settle_delay = settle_delay

    async def _query_bulk(self) -> dict[str, tuple[int | None, int | None]]:
        values = await self.power_backend.get_all_power_settings_acdc(self.scheme)
        return {guid.lower(): acdc for guid, acdc in (values or {}).items()}

    async def filter_settings(self, settings: list[SettingDefinition]) -> list[SettingDefinition]:
        try:
            present = await self._query_bulk()
        except Exception as e:
            logger.warning("Could not get bulk power settings, skipping existence validation: %s", e)
            return list(settings)
        if not present:
            logger.warning("Could not get bulk power settings (empty result), skipping existence validation")
            return list(settings)

        to_check = [s for s in settings if s.validate_existence and s.power_cfg_keys]
        if await self._apply_enablements(to_check, present):
            await asyncio.sleep(self.settle_delay)
            try:
                present = await self._query_bulk() or present
            except Exception as e:
                logger.warning("Re-query after enabling hidden power settings failed: %s", e)

        result = []
        for setting in settings:
            if not setting.validate_existence or not setting.power_cfg_keys:
                result.append(setting)
                continue
            found = [key for key in setting.power_cfg_keys if key.setting_guid.lower() in present]
            if not found:
                logger.debug("Filtered out %s: power setting not present in %s", setting.id, self.scheme)
                continue
            if await self._any_hardware_controlled(setting, found):
                logger.info("Filtered out %s: controlled by hardware", setting.id)
                continue
            result.append(setting)
        return result

    async def _apply_enablements(self, settings: list[SettingDefinition], present: dict) -> bool:
        """Apply enablement writes for absent keys. Returns True if any write succeeded."""
        applied = False
        seen: set[str] = set()
        for setting in settings:
            for key in setting.power_cfg_keys:
                if key.setting_guid.lower() in present or key.enablement is None:
                    continue
                if key.enablement.key in seen:
                    continue
                seen.add(key.enablement.key)
                try:
                    if await self.raw_store.apply_setting(key.enablement, True):
                        applied = True
                        logger.debug("Enabled hidden power setting %s for %s", key.setting_guid, setting.id)
                except Exception as e:
                    logger.warning("Failed to enable hidden power setting %s: %s", key.setting_guid, e)
        return applied

    async def _any_hardware_controlled(self, setting: SettingDefinition, keys: list[PowerCfgKey]) -> bool:
        for key in keys:
            if not key.check_for_hardware_control:
                continue
            try:
                if await self.power_backend.is_hardware_controlled(key):
                    return True
            except Exception as e:
                # Probe failures keep the setting visible
                logger.warning("Hardware-control check failed for %s (%s): %s", setting.id, key.setting_guid, e)
        return False
