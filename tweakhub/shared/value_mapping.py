"""Translation between selection indices and raw key/value state.

All functions are pure: they read a ``SettingDefinition`` and raw values and
never mutate either. The selection index is what a UI shows; the raw values
are what the machine actually stores (registry values, power AC/DC values).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tweakhub.shared.models import CUSTOM_STATE_INDEX, SettingDefinition

# Written by group policy alongside the real values; wins when it names a declared index.
CURRENT_POLICY_INDEX_KEY = "CurrentPolicyIndex"


def normalize_raw_value(value: Any) -> int | None:
    """Coerce a raw value to an int, or None when it is not integral."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text)
        except ValueError:
            return None
    return None


def _matches(expected: Mapping[str, int | None], normalized: Mapping[str, int | None]) -> bool:
    if not expected:
        return False
    return all(normalized.get(key) == value for key, value in expected.items())


def resolve_raw_values_to_index(definition: SettingDefinition, raw_values: Mapping[str, Any] | None) -> int:
    """Find the selection index whose expected values all match ``raw_values``.

    Entries are tried in ascending index order, so when two indices would
    both match the lower one wins. A key missing from ``raw_values`` is
    treated as None and only matches an explicit None expectation.
    """
    mappings = definition.value_mappings
    if not mappings:
        return 0

    raw_values = raw_values or {}
    policy_index = normalize_raw_value(raw_values.get(CURRENT_POLICY_INDEX_KEY))
    if policy_index is not None and policy_index in mappings:
        return policy_index

    normalized = {key: normalize_raw_value(value) for key, value in raw_values.items()}
    for index in sorted(mappings):
        if _matches(mappings[index], normalized):
            return index

    return CUSTOM_STATE_INDEX if definition.supports_custom_state else 0


def resolve_index_to_raw_values(definition: SettingDefinition, index: int) -> dict[str, int | None]:
    """Return the raw write set for ``index``; empty when the index is unknown."""
    mappings = definition.value_mappings
    if not mappings or index == CUSTOM_STATE_INDEX:
        return {}
    return dict(mappings.get(index, {}))


def get_value_from_index(definition: SettingDefinition, index: int) -> int:
    """Return the single raw value a simple selection stores for ``index``."""
    if index == CUSTOM_STATE_INDEX:
        return 0
    mappings = definition.value_mappings
    if not mappings:
        return index
    expected = mappings.get(index)
    if not expected:
        return index
    first = next(iter(expected.values()))
    return index if first is None else first


def get_index_from_display_name(definition: SettingDefinition, name: str | None) -> int:
    if not name or not definition.display_names:
        return 0
    wanted = name.casefold()
    for index, display_name in enumerate(definition.display_names):
        if display_name.casefold() == wanted:
            return index
    return 0


def ordered_option_names(definition: SettingDefinition) -> list[str]:
    """Canonical display order for a setting's named options.

    Both the option builder and the recommended-settings engine enumerate
    named options through this function, so a recommended index always
    points at the option the user sees in that position.
    """
    return sorted(definition.named_options, key=lambda name: (name.casefold(), name))


def current_value_from_raw(definition: SettingDefinition, raw_values: Mapping[str, Any] | None) -> int | None:
    """Project a setting's raw values onto the value a caller displays.

    Selections resolve to an index; everything else reports the primary raw
    setting's value. Settings without raw settings have no current value.
    """
    raw_values = raw_values or {}
    if definition.input_type == "selection":
        if definition.value_mappings:
            return resolve_raw_values_to_index(definition, raw_values)
        if definition.named_options and definition.primary_raw_setting is not None:
            current = normalize_raw_value(raw_values.get(definition.primary_raw_setting.name))
            for index, name in enumerate(ordered_option_names(definition)):
                if definition.named_options[name] == current:
                    return index
            return CUSTOM_STATE_INDEX if definition.supports_custom_state else 0
    primary = definition.primary_raw_setting
    if primary is None:
        return None
    return normalize_raw_value(raw_values.get(primary.name))


def get_index_for_named_option(definition: SettingDefinition, name: str, raw_value: int) -> int | None:
    for index, option_name in enumerate(ordered_option_names(definition)):
        if option_name == name and definition.named_options[option_name] == raw_value:
            return index
    return None
