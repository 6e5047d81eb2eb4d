"""Builds UI option lists for selection settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from tweakhub.shared.models import CUSTOM_STATE_INDEX, SettingDefinition
from tweakhub.shared.value_mapping import (
    current_value_from_raw,
    ordered_option_names,
    resolve_raw_values_to_index,
)

logger = logging.getLogger(__name__)

POWER_PLAN_SETTING_ID = "power-plan-selection"
DEFAULT_CUSTOM_STATE_DISPLAY_NAME = "Custom (User Defined)"


@dataclass
class SelectionOption:
    display_text: str
    value: int
    tooltip: str | None = None


@dataclass
class SelectionSetupResult:
    success: bool
    error_message: str | None = None
    options: list[SelectionOption] = field(default_factory=list)
    selected_value: int | None = None

    @classmethod
    def failure(cls, message: str) -> SelectionSetupResult:
        return cls(success=False, error_message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "error_message": self.error_message,
            "options": [
                {"display_text": o.display_text, "value": o.value, "tooltip": o.tooltip} for o in self.options
            ],
            "selected_value": self.selected_value,
        }


def _is_declared_index(definition: SettingDefinition, value: Any, option_count: int) -> bool:
    """True if ``value`` names one of the setting's options, or its custom state."""
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    if value == CUSTOM_STATE_INDEX:
        return definition.supports_custom_state
    return 0 <= value < option_count


class SelectionOptionBuilder:
    """Turns a selection setting and its current state into display options.

    ``build_options`` never raises; every failure is reported through the
    returned ``SelectionSetupResult``.
    """

    def __init__(
        self,
        raw_store,
        power_plan_provider=None,
        custom_state_display_name: str = DEFAULT_CUSTOM_STATE_DISPLAY_NAME,
    ):
        self.raw_store = raw_store
        self.power_plan_provider = power_plan_provider
        self.custom_state_display_name = custom_state_display_name

    async def _fetch_raw_values(self, definition: SettingDefinition) -> dict[str, Any]:
        values = await self.raw_store.get_raw_values([definition])
        return values.get(definition.id, {})

    async def build_options(self, definition: SettingDefinition, current_value: Any = None) -> SelectionSetupResult:
        try:
            if definition.id == POWER_PLAN_SETTING_ID:
                if self.power_plan_provider is None:
                    return SelectionSetupResult.failure("No power plan provider configured")
                return await self.power_plan_provider.setup_options(definition, current_value)

            if definition.input_type != "selection":
                return SelectionSetupResult.failure(f"Setting '{definition.id}' is not a selection control")

            names = list(definition.display_names) or ordered_option_names(definition)
            if not names:
                logger.warning("Setting %s has no display names or named options", definition.id)
                return SelectionSetupResult.failure(f"Invalid selection metadata for '{definition.id}'")

            if _is_declared_index(definition, current_value, len(names)):
                index = current_value
            else:
                if current_value is not None:
                    logger.debug("Ignoring undeclared index %r for %s", current_value, definition.id)
                index = current_value_from_raw(definition, await self._fetch_raw_values(definition))
                if index is None:
                    index = 0

            is_custom = definition.supports_custom_state and index == CUSTOM_STATE_INDEX
            tooltips = definition.option_tooltips
            options = [
                SelectionOption(display_text=name, value=i, tooltip=tooltips[i] if i < len(tooltips) else None)
                for i, name in enumerate(names)
            ]
            if is_custom:
                options.append(
                    SelectionOption(
                        display_text=definition.custom_state_display_name or self.custom_state_display_name,
                        value=CUSTOM_STATE_INDEX,
                    )
                )
            return SelectionSetupResult(
                success=True,
                options=options,
                selected_value=CUSTOM_STATE_INDEX if is_custom else index,
            )
        except Exception as e:
            logger.error("Error building options for %s: %s", definition.id, e)
            return SelectionSetupResult.failure(f"Error building options: {e}")

    async def resolve_index_from_raw_values(self, definition: SettingDefinition, raw_values: dict[str, Any]) -> int:
        try:
            if definition.id == POWER_PLAN_SETTING_ID and self.power_plan_provider is not None:
                return await self.power_plan_provider.resolve_index(definition, raw_values)
            return resolve_raw_values_to_index(definition, raw_values)
        except Exception as e:
            logger.warning("Could not resolve index for %s: %s", definition.id, e)
            return 0

    async def resolve_current_value(self, definition: SettingDefinition, raw_values: dict[str, Any] | None = None):
        if raw_values is None:
            raw_values = await self._fetch_raw_values(definition)
        return current_value_from_raw(definition, raw_values)
