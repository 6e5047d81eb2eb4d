"""Domain services own reading and writing the settings of one feature."""

from __future__ import annotations

import logging
from typing import Any

from tweakhub.hub.options import POWER_PLAN_SETTING_ID
from tweakhub.shared.models import CUSTOM_STATE_INDEX, RawSetting, SettingDefinition
from tweakhub.shared.value_mapping import (
    current_value_from_raw,
    get_value_from_index,
    normalize_raw_value,
    ordered_option_names,
    resolve_index_to_raw_values,
)

logger = logging.getLogger(__name__)


class DomainService:
    """Base class for domain services."""

    def __init__(self, domain_name: str):
        self.domain_name = domain_name
        self.logger = logging.getLogger(f"domain.{domain_name}")

    async def get_settings(self) -> list[SettingDefinition]:
        """Return the domain's OS-compatible settings."""
        return []

    async def apply_setting(self, setting_id: str, enable: bool, value: Any = None) -> None:
        raise NotImplementedError(f"{self.domain_name} does not support applying settings")

    async def is_setting_enabled(self, setting_id: str) -> bool:
        return False

    async def get_setting_value(self, setting_id: str) -> Any:
        return None


class CatalogDomainService(DomainService):
    """Generic domain service over a registry feature and a raw value store."""

    def __init__(self, domain_name: str, registry, raw_store):
        super().__init__(domain_name)
        self.registry = registry
        self.raw_store = raw_store

    async def get_settings(self) -> list[SettingDefinition]:
        return list(self.registry.get_filtered_settings(self.domain_name))

    def get_definition(self, setting_id: str) -> SettingDefinition:
        for setting in self.registry.get_bypassed_settings(self.domain_name):
            if setting.id == setting_id:
                return setting
        raise ValueError(f"Setting {setting_id!r} is not part of domain {self.domain_name!r}")

    async def _read_raw(self, definition: SettingDefinition) -> dict[str, Any]:
        values = await self.raw_store.get_raw_values([definition])
        return values.get(definition.id, {})

    async def get_setting_value(self, setting_id: str) -> Any:
        definition = self.get_definition(setting_id)
        return current_value_from_raw(definition, await self._read_raw(definition))

    async def is_setting_enabled(self, setting_id: str) -> bool:
        definition = self.get_definition(setting_id)
        raw = await self._read_raw(definition)
        with_enabled = [rs for rs in definition.raw_settings if rs.enabled_value is not None]
        if not with_enabled:
            return False
        return all(
            normalize_raw_value(raw.get(rs.name)) == normalize_raw_value(rs.enabled_value) for rs in with_enabled
        )

    async def apply_setting(self, setting_id: str, enable: bool, value: Any = None) -> None:
        definition = self.get_definition(setting_id)
        if definition.input_type == "selection":
            writes = self._selection_writes(definition, value)
        elif definition.input_type == "numeric":
            if value is None:
                raise ValueError(f"Setting {setting_id!r} needs a numeric value")
            writes = {self._primary(definition).name: int(value)}
        else:
            writes = {
                rs.name: rs.enabled_value if enable else rs.disabled_value for rs in definition.raw_settings
            }

        by_name = {rs.name: rs for rs in definition.raw_settings}
        for name, raw_value in writes.items():
            raw_setting = by_name.get(name)
            if raw_setting is None:
                self.logger.warning("%s: mapping references unknown raw key %s", setting_id, name)
                continue
            await self.raw_store.set_value(raw_setting, raw_value)
        self.logger.info("Applied %s (enable=%s, value=%s)", setting_id, enable, value)

    def _primary(self, definition: SettingDefinition) -> RawSetting:
        primary = definition.primary_raw_setting
        if primary is None:
            raise ValueError(f"Setting {definition.id!r} has no raw settings")
        return primary

    def _selection_writes(self, definition: SettingDefinition, value: Any) -> dict[str, Any]:
        index = 0 if value is None else int(value)
        if index == CUSTOM_STATE_INDEX:
            raise ValueError(f"Cannot apply the custom state of {definition.id!r}")
        if definition.value_mappings:
            writes = resolve_index_to_raw_values(definition, index)
            if not writes:
                raise ValueError(f"Setting {definition.id!r} has no option at index {index}")
            return writes
        primary = self._primary(definition)
        if definition.named_options:
            names = ordered_option_names(definition)
            if not 0 <= index < len(names):
                raise ValueError(f"Setting {definition.id!r} has no option at index {index}")
            return {primary.name: definition.named_options[names[index]]}
        return {primary.name: get_value_from_index(definition, index)}


class PowerDomainService(CatalogDomainService):
    """Power settings, plus the power-plan selector backed by a plan provider."""

    def __init__(self, registry, raw_store, power_plan_provider, domain_name: str = "power"):
        super().__init__(domain_name, registry, raw_store)
        self.power_plan_provider = power_plan_provider

    async def get_setting_value(self, setting_id: str) -> Any:
        if setting_id != POWER_PLAN_SETTING_ID:
            return await super().get_setting_value(setting_id)
        definition = self.get_definition(setting_id)
        return await self.power_plan_provider.resolve_index(definition, await self._read_raw(definition))

    async def apply_setting(self, setting_id: str, enable: bool, value: Any = None) -> None:
        if setting_id != POWER_PLAN_SETTING_ID:
            await super().apply_setting(setting_id, enable, value)
            return
        definition = self.get_definition(setting_id)
        plan_guid = self.power_plan_provider.plan_guid(int(value or 0))
        await self.raw_store.set_value(self._primary(definition), plan_guid)
        self.logger.info("Activated power plan %s", plan_guid)
