"""Setting definition dataclasses for tweakhub catalogs.

Every catalog entry is a frozen ``SettingDefinition``. Validation runs in
``__post_init__`` so malformed catalog data fails when the catalog is loaded,
not when a UI later asks for the setting's options.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

INPUT_TYPES = frozenset({"toggle", "selection", "numeric", "command"})
SETTING_KINDS = frozenset({"optimization", "customization"})
VALUE_KINDS = frozenset({"dword", "qword", "string", "binary", "powercfg"})

CUSTOM_STATE_INDEX = -1
WINDOWS_11_MIN_BUILD = 22000


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class VersionConstraints:
    """OS-version requirements shared by every setting kind."""

    is_windows10_only: bool = False
    is_windows11_only: bool = False
    minimum_build_number: int | None = None
    maximum_build_number: int | None = None
    supported_build_ranges: tuple[tuple[int, int], ...] = ()

    def evaluate(self, is_windows11: bool, build_number: int) -> str | None:
        """Return None when the running OS satisfies these constraints.

        Otherwise return a short explanation suitable for display next to a
        setting in the bypass view. Ranges, when present, replace the
        min/max singletons entirely.
        """
        if self.is_windows10_only and is_windows11:
            return "Only available on Windows 10"
        if self.is_windows11_only and not is_windows11:
            return "Requires Windows 11"
        if self.supported_build_ranges:
            for low, high in self.supported_build_ranges:
                if low <= build_number <= high:
                    return None
            ranges = ", ".join(f"{low}-{high}" for low, high in self.supported_build_ranges)
            return f"Supported on builds {ranges} (current build {build_number})"
        if self.minimum_build_number is not None and build_number < self.minimum_build_number:
            return f"Requires build {self.minimum_build_number} or later (current build {build_number})"
        if self.maximum_build_number is not None and build_number > self.maximum_build_number:
            return f"Not supported after build {self.maximum_build_number} (current build {build_number})"
        return None

    @property
    def is_unconstrained(self) -> bool:
        return self == VersionConstraints()


@dataclass(frozen=True)
class RegistryWrite:
    """A single raw write, used to unhide power settings before probing."""

    key_path: str
    value_name: str
    value: int | str | None
    value_kind: str = "dword"

    @property
    def key(self) -> str:
        return f"{self.key_path}\\{self.value_name}"


@dataclass(frozen=True)
class PowerCfgKey:
    """Candidate power-scheme key probed by the existence filter."""

    setting_guid: str
    subgroup_guid: str = ""
    enablement: RegistryWrite | None = None
    check_for_hardware_control: bool = False

    def __post_init__(self) -> None:
        if not self.setting_guid:
            raise ValueError("setting_guid must not be empty")


@dataclass(frozen=True)
class RawSetting:
    """One underlying key a setting's state is stored in."""

    name: str
    key_path: str = ""
    enabled_value: int | str | None = None
    disabled_value: int | str | None = None
    default_value: int | str | None = None
    recommended_value: int | str | None = None
    value_kind: str = "dword"
    is_primary: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("raw setting name must not be empty")
        if self.value_kind not in VALUE_KINDS:
            raise ValueError(f"value_kind must be one of {sorted(VALUE_KINDS)}, got {self.value_kind!r}")

    @property
    def key(self) -> str:
        return f"{self.key_path}\\{self.name}" if self.key_path else self.name


@dataclass(frozen=True)
class SettingDefinition:
    """A single tunable setting as declared by a feature catalog."""

    id: str
    name: str
    domain_name: str
    input_type: str = "toggle"
    kind: str = "optimization"
    description: str = ""
    # OS version
    is_windows10_only: bool = False
    is_windows11_only: bool = False
    minimum_build_number: int | None = None
    maximum_build_number: int | None = None
    supported_build_ranges: list[tuple[int, int]] = field(default_factory=list)
    # Hardware
    requires_battery: bool = False
    requires_lid: bool = False
    requires_desktop: bool = False
    requires_brightness_support: bool = False
    requires_hybrid_sleep: bool = False
    # Runtime existence
    validate_existence: bool = True
    power_cfg_keys: list[PowerCfgKey] = field(default_factory=list)
    # State
    raw_settings: list[RawSetting] = field(default_factory=list)
    value_mappings: dict[int, dict[str, int | None]] | None = None
    supports_custom_state: bool = False
    display_names: list[str] = field(default_factory=list)
    option_tooltips: list[str] = field(default_factory=list)
    custom_state_display_name: str | None = None
    named_options: dict[str, int] = field(default_factory=dict)
    recommended_option: str | None = None
    depends_on: list[str] = field(default_factory=list)
    # Set only on bypass-view copies of settings the OS filter would reject
    compatibility_message: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id must not be empty")
        if not self.domain_name:
            raise ValueError(f"{self.id}: domain_name must not be empty")
        if self.input_type not in INPUT_TYPES:
            raise ValueError(f"{self.id}: input_type must be one of {sorted(INPUT_TYPES)}, got {self.input_type!r}")
        if self.kind not in SETTING_KINDS:
            raise ValueError(f"{self.id}: kind must be one of {sorted(SETTING_KINDS)}, got {self.kind!r}")
        self._validate_versions()
        if self.requires_desktop and (self.requires_battery or self.requires_lid):
            raise ValueError(f"{self.id}: requires_desktop cannot be combined with requires_battery/requires_lid")
        self._validate_mappings()
        option_count = max(len(self.display_names), len(self.value_mappings or {}), len(self.named_options))
        if len(self.option_tooltips) > option_count:
            raise ValueError(f"{self.id}: more option tooltips than options")
        recommended = [rs.name for rs in self.raw_settings if rs.recommended_value is not None]
        if len(recommended) > 1:
            raise ValueError(f"{self.id}: recommended_value set on more than one raw setting: {recommended}")
        if self.named_options and (self.value_mappings or self.display_names):
            raise ValueError(f"{self.id}: named_options cannot be combined with value_mappings or display_names")
        for option_name, raw in self.named_options.items():
            if not _is_int(raw):
                raise ValueError(f"{self.id}: named option {option_name!r} must map to an int, got {raw!r}")
        if self.recommended_option is not None and self.recommended_option not in self.named_options:
            raise ValueError(f"{self.id}: recommended_option {self.recommended_option!r} is not a named option")
        if self.recommended_option is not None:
            expected = self.named_options[self.recommended_option]
            for rs in self.raw_settings:
                if rs.recommended_value is not None and rs.recommended_value != expected:
                    raise ValueError(
                        f"{self.id}: recommended_value {rs.recommended_value!r} does not match "
                        f"recommended_option {self.recommended_option!r} ({expected!r})"
                    )

    def _validate_versions(self) -> None:
        if self.is_windows10_only and self.is_windows11_only:
            raise ValueError(f"{self.id}: is_windows10_only and is_windows11_only are mutually exclusive")
        low, high = self.minimum_build_number, self.maximum_build_number
        if low is not None and high is not None and low > high:
            raise ValueError(f"{self.id}: minimum_build_number {low} exceeds maximum_build_number {high}")
        for build_range in self.supported_build_ranges:
            if len(build_range) != 2 or not all(_is_int(b) for b in build_range):
                raise ValueError(f"{self.id}: build range must be a (min, max) pair of ints, got {build_range!r}")
            if build_range[0] > build_range[1]:
                raise ValueError(f"{self.id}: build range {build_range!r} has min > max")

    def _validate_mappings(self) -> None:
        if self.value_mappings is None:
            return
        for index, expected in self.value_mappings.items():
            if not _is_int(index) or index < 0:
                raise ValueError(f"{self.id}: mapping index must be an int >= 0, got {index!r}")
            if not isinstance(expected, dict):
                raise ValueError(f"{self.id}: mapping for index {index} must be a dict, got {type(expected).__name__}")
            for raw_key, raw_value in expected.items():
                if raw_value is not None and not _is_int(raw_value):
                    raise ValueError(
                        f"{self.id}: expected value for {raw_key!r} at index {index} must be an int or None"
                    )
        if self.display_names and len(self.display_names) != len(self.value_mappings):
            raise ValueError(
                f"{self.id}: {len(self.display_names)} display names for {len(self.value_mappings)} mapping indices"
            )

    @property
    def version_constraints(self) -> VersionConstraints:
        return VersionConstraints(
            is_windows10_only=self.is_windows10_only,
            is_windows11_only=self.is_windows11_only,
            minimum_build_number=self.minimum_build_number,
            maximum_build_number=self.maximum_build_number,
            supported_build_ranges=tuple(tuple(r) for r in self.supported_build_ranges),
        )

    @property
    def requires_hardware_check(self) -> bool:
        return (
            self.requires_battery
            or self.requires_lid
            or self.requires_desktop
            or self.requires_brightness_support
            or self.requires_hybrid_sleep
        )

    @property
    def primary_raw_setting(self) -> RawSetting | None:
        for raw in self.raw_settings:
            if raw.is_primary:
                return raw
        return self.raw_settings[0] if self.raw_settings else None

    @property
    def recommended_raw_setting(self) -> RawSetting | None:
        """The raw setting that carries a recommended value, if any."""
        for raw in self.raw_settings:
            if raw.recommended_value is not None:
                return raw
        return None

    def with_compatibility_message(self, message: str) -> SettingDefinition:
        return dataclasses.replace(self, compatibility_message=message)

    def summary(self) -> dict[str, Any]:
        """Compact JSON-friendly view used by the API and CLI."""
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain_name,
            "input_type": self.input_type,
            "kind": self.kind,
            "description": self.description,
            "has_recommendation": self.recommended_raw_setting is not None,
            "compatibility_message": self.compatibility_message,
        }
