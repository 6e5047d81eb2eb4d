"""In-memory machine backed by a JSON snapshot.

A snapshot describes one machine: its Windows build, hardware facts,
power-scheme values and registry values. It stands in for the real OS
collaborators so the hub, API and CLI can run anywhere.

Snapshot layout::

    {
      "windows": {"build": 22631},
      "hardware": {"has_battery": true, "has_lid": true, ...},
      "power": {
        "settings": {"<guid>": [ac, dc]},
        "hidden": {"<guid>": "<registry key that unhides it>"},
        "hardware_controlled": ["<guid>"],
        "plans": [{"guid": "...", "name": "Balanced"}],
        "active_plan": "<guid>"
      },
      "registry": {"HKCU\\\\Path\\\\Value": 1}
    }
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tweakhub.hub.options import SelectionOption, SelectionSetupResult
from tweakhub.shared.models import WINDOWS_11_MIN_BUILD, PowerCfgKey, RawSetting, RegistryWrite, SettingDefinition

logger = logging.getLogger(__name__)

POWERCFG_VALUE_KIND = "powercfg"
ACTIVE_PLAN_KEY = "ActivePowerScheme"

DEFAULT_SNAPSHOT: dict[str, Any] = {
    "windows": {"build": 22631},
    "hardware": {
        "has_battery": True,
        "has_lid": True,
        "supports_brightness": True,
        "supports_hybrid_sleep": False,
    },
    "power": {
        "settings": {
            "3c0bc021-c8a8-4e07-a973-6b14cbcb2b7e": [600, 300],
            "29f6c1db-86da-48c5-9fdb-f2b67b1f44da": [1800, 900],
            "9d7815a6-7ee4-497e-8888-515a05f02364": [0, 3600],
            "5ca83367-6e45-459f-a27b-476b1d01c936": [0, 1],
            "aded5e82-b909-4619-9949-f5d71dac0bcb": [100, 60],
        },
        "hidden": {
            "7648efa3-dd9c-4e3e-b566-50f929386280": (
                "HKLM\\SYSTEM\\CurrentControlSet\\Control\\Power\\PowerSettings\\"
                "4f971e89-eebd-4455-a8de-9e59040e7347\\7648efa3-dd9c-4e3e-b566-50f929386280\\Attributes"
            ),
        },
        "hardware_controlled": ["aded5e82-b909-4619-9949-f5d71dac0bcb"],
        "plans": [
            {"guid": "381b4222-f694-41f0-9685-ff5bb260df2e", "name": "Balanced"},
            {"guid": "8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c", "name": "High performance"},
            {"guid": "a1841308-3541-4fab-bc81-f71556f20b4a", "name": "Power saver"},
        ],
        "active_plan": "381b4222-f694-41f0-9685-ff5bb260df2e",
    },
    "registry": {
        "HKCU\\Software\\Microsoft\\Multimedia\\Audio\\UserDuckingPreference": 1,
        "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced\\HideFileExt": 1,
        "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced\\TaskbarAl": 1,
    },
}


class SnapshotWindowsVersion:
    def __init__(self, build: int):
        self.build = build

    def build_number(self) -> int:
        return self.build

    def is_windows11(self) -> bool:
        return self.build >= WINDOWS_11_MIN_BUILD


class SnapshotHardwareDetector:
    """Answers hardware questions from the snapshot; unknown facts raise."""

    def __init__(self, facts: dict[str, bool]):
        self.facts = facts

    def _fact(self, name: str) -> bool:
        if name not in self.facts:
            raise LookupError(f"snapshot has no hardware fact {name!r}")
        return bool(self.facts[name])

    def has_battery(self) -> bool:
        return self._fact("has_battery")

    def has_lid(self) -> bool:
        return self._fact("has_lid")

    def supports_brightness(self) -> bool:
        return self._fact("supports_brightness")

    def supports_hybrid_sleep(self) -> bool:
        return self._fact("supports_hybrid_sleep")


class SnapshotPowerBackend:
    """Power-scheme values of the active scheme, keyed by lower-case guid."""

    def __init__(self, power: dict[str, Any]):
        self.values: dict[str, list[int | None]] = {
            guid.lower(): list(acdc) for guid, acdc in power.get("settings", {}).items()
        }
        self.hidden: dict[str, str] = {guid.lower(): key for guid, key in power.get("hidden", {}).items()}
        self.hardware_controlled = {guid.lower() for guid in power.get("hardware_controlled", [])}
        self.plans: list[dict[str, str]] = list(power.get("plans", []))
        self.active_plan: str | None = power.get("active_plan")

    async def get_all_power_settings_acdc(self, scheme: str) -> dict[str, tuple[int | None, int | None]]:
        return {guid: (acdc[0], acdc[1]) for guid, acdc in self.values.items()}

    async def is_hardware_controlled(self, key: PowerCfgKey) -> bool:
        return key.setting_guid.lower() in self.hardware_controlled

    def reveal(self, enablement_key: str) -> None:
        """Unhide every setting whose enablement write lands on ``enablement_key``."""
        for guid, key in list(self.hidden.items()):
            if key == enablement_key:
                del self.hidden[guid]
                self.values.setdefault(guid, [0, 0])
                logger.debug("Power setting %s is now visible", guid)

    def get(self, guid: str, slot: str) -> int | None:
        acdc = self.values.get(guid.lower())
        if acdc is None:
            return None
        return acdc[0 if slot.upper() == "AC" else 1]

    def set(self, guid: str, slot: str, value: int | None) -> None:
        acdc = self.values.setdefault(guid.lower(), [None, None])
        acdc[0 if slot.upper() == "AC" else 1] = value

    def to_dict(self) -> dict[str, Any]:
        return {
            "settings": {guid: list(acdc) for guid, acdc in self.values.items()},
            "hidden": dict(self.hidden),
            "hardware_controlled": sorted(self.hardware_controlled),
            "plans": list(self.plans),
            "active_plan": self.active_plan,
        }


class SnapshotRawStore:
    """Raw key/value store over snapshot registry and power values.

    Raw settings with ``value_kind == "powercfg"`` name the AC or DC slot of
    the power setting whose guid is their ``key_path``; all others are
    registry values addressed by ``RawSetting.key``.
    """

    def __init__(self, registry: dict[str, Any], power: SnapshotPowerBackend):
        self.registry = registry
        self.power = power

    def _read(self, raw: RawSetting) -> Any:
        if raw.value_kind == POWERCFG_VALUE_KIND:
            return self.power.get(raw.key_path, raw.name)
        if raw.name == ACTIVE_PLAN_KEY:
            return self.power.active_plan
        return self.registry.get(raw.key)

    async def get_raw_values(self, settings: list[SettingDefinition]) -> dict[str, dict[str, Any]]:
        return {s.id: {raw.name: self._read(raw) for raw in s.raw_settings} for s in settings}

    async def apply_setting(self, write: RegistryWrite, enable: bool) -> bool:
        if enable:
            self.registry[write.key] = write.value
            self.power.reveal(write.key)
        else:
            self.registry.pop(write.key, None)
        return True

    async def set_value(self, raw: RawSetting, value: Any) -> None:
        if raw.value_kind == POWERCFG_VALUE_KIND:
            self.power.set(raw.key_path, raw.name, value)
        elif raw.name == ACTIVE_PLAN_KEY:
            self.power.active_plan = value
        elif value is None:
            self.registry.pop(raw.key, None)
        else:
            self.registry[raw.key] = value


class SnapshotPowerPlanProvider:
    """Power-plan options taken from the snapshot's plan list."""

    def __init__(self, power: SnapshotPowerBackend):
        self.power = power

    async def setup_options(self, definition: SettingDefinition, current_value: Any = None) -> SelectionSetupResult:
        if not self.power.plans:
            return SelectionSetupResult.failure("No power plans available")
        options = [SelectionOption(display_text=plan["name"], value=i) for i, plan in enumerate(self.power.plans)]
        if isinstance(current_value, int) and not isinstance(current_value, bool):
            selected = current_value
        else:
            selected = await self.resolve_index(definition, {ACTIVE_PLAN_KEY: self.power.active_plan})
        return SelectionSetupResult(success=True, options=options, selected_value=selected)

    async def resolve_index(self, definition: SettingDefinition, raw_values: dict[str, Any]) -> int:
        active = (raw_values.get(ACTIVE_PLAN_KEY) or "").lower()
        for index, plan in enumerate(self.power.plans):
            if plan["guid"].lower() == active:
                return index
        return 0

    def plan_guid(self, index: int) -> str:
        return self.power.plans[index]["guid"]


@dataclass
class MachineSnapshot:
    """Bundles every snapshot-backed collaborator for one machine."""

    version: SnapshotWindowsVersion
    hardware: SnapshotHardwareDetector
    power: SnapshotPowerBackend
    raw_store: SnapshotRawStore
    power_plans: SnapshotPowerPlanProvider
    path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> MachineSnapshot:
        data = copy.deepcopy(data)
        power = SnapshotPowerBackend(data.get("power", {}))
        return cls(
            version=SnapshotWindowsVersion(int(data.get("windows", {}).get("build", 0))),
            hardware=SnapshotHardwareDetector(dict(data.get("hardware", {}))),
            power=power,
            raw_store=SnapshotRawStore(dict(data.get("registry", {})), power),
            power_plans=SnapshotPowerPlanProvider(power),
            path=path,
        )

    @classmethod
    def load(cls, path: Path | str | None = None) -> MachineSnapshot:
        """Load a snapshot file, or the built-in demo machine when ``path`` is None."""
        if path is None:
            return cls.from_dict(DEFAULT_SNAPSHOT)
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        logger.info("Loaded machine snapshot from %s", path)
        return cls.from_dict(data, path=path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "windows": {"build": self.version.build},
            "hardware": dict(self.hardware.facts),
            "power": self.power.to_dict(),
            "registry": dict(self.raw_store.registry),
        }

    def save(self, path: Path | str | None = None) -> None:
        target = Path(path) if path is not None else self.path
        if target is None:
            raise ValueError("No snapshot path to save to")
        target.write_text(json.dumps(self.to_dict(), indent=2) + "\n")
        logger.info("Saved machine snapshot to %s", target)
