"""Hardware capability detection for hardware-gated settings."""

from __future__ import annotations

import asyncio
import logging
import platform
import subprocess
from pathlib import Path

import psutil

logger = logging.getLogger(__name__)

HARDWARE_FACTS = ("has_battery", "has_lid", "supports_brightness", "supports_hybrid_sleep")

# SMBIOS chassis types that have a lid (laptop, notebook, convertible, ...)
PORTABLE_CHASSIS_TYPES = frozenset({8, 9, 10, 11, 12, 14, 18, 21, 30, 31, 32})

PROBE_TIMEOUT_SECONDS = 10


def _powershell(command: str) -> str:
    result = subprocess.run(
        ["powershell", "-NoProfile", "-NonInteractive", "-Command", command],
        capture_output=True,
        text=True,
        timeout=PROBE_TIMEOUT_SECONDS,
        check=True,
    )
    return result.stdout


class SystemHardwareDetector:
    """Probes the local machine. Every method may raise; callers memoize."""

    def __init__(self, sysfs_root: Path = Path("/sys")):
        self.sysfs_root = sysfs_root
        self.is_windows = platform.system() == "Windows"

    def has_battery(self) -> bool:
        return psutil.sensors_battery() is not None

    def has_lid(self) -> bool:
        if self.is_windows:
            output = _powershell("(Get-CimInstance Win32_SystemEnclosure).ChassisTypes")
            chassis = {int(token) for token in output.split() if token.isdigit()}
        else:
            chassis_file = self.sysfs_root / "class" / "dmi" / "id" / "chassis_type"
            chassis = {int(chassis_file.read_text().strip())}
        return bool(chassis & PORTABLE_CHASSIS_TYPES)

    def supports_brightness(self) -> bool:
        if self.is_windows:
            output = _powershell(
                "Get-CimInstance -Namespace root/WMI -ClassName WmiMonitorBrightness "
                "| Select-Object -ExpandProperty CurrentBrightness"
            )
            return bool(output.strip())
        backlight = self.sysfs_root / "class" / "backlight"
        return backlight.is_dir() and any(backlight.iterdir())

    def supports_hybrid_sleep(self) -> bool:
        if self.is_windows:
            result = subprocess.run(
                ["powercfg", "/a"], capture_output=True, text=True, timeout=PROBE_TIMEOUT_SECONDS, check=True
            )
            available = result.stdout.split("not available")[0]
            return "Hybrid Sleep" in available
        disk_modes = (self.sysfs_root / "power" / "disk").read_text()
        return "suspend" in disk_modes


class HardwareCapabilityCache:
    """Evaluates each hardware fact at most once for the cache's lifetime.

    Concurrent callers asking for the same fact share a lock, so the detector
    runs once even when many filters start at the same time. A detector
    error resolves the fact to False and that answer is kept.
    """

    def __init__(self, detector):
        self.detector = detector
        self._values: dict[str, bool] = {}
        self._locks: dict[str, asyncio.Lock] = {fact: asyncio.Lock() for fact in HARDWARE_FACTS}

    async def _get(self, fact: str) -> bool:
        if fact in self._values:
            return self._values[fact]
        async with self._locks[fact]:
            if fact not in self._values:
                self._values[fact] = await self._detect(fact)
        return self._values[fact]

    async def _detect(self, fact: str) -> bool:
        probe = getattr(self.detector, fact)
        try:
            value = bool(await asyncio.to_thread(probe))
        except Exception as e:
            logger.warning("Hardware detection for %s failed, assuming absent: %s", fact, e)
            return False
        logger.debug("Hardware fact %s = %s", fact, value)
        return value

    async def has_battery(self) -> bool:
        return await self._get("has_battery")

    async def has_lid(self) -> bool:
        return await self._get("has_lid")

    async def supports_brightness(self) -> bool:
        return await self._get("supports_brightness")

    async def supports_hybrid_sleep(self) -> bool:
        return await self._get("supports_hybrid_sleep")

    async def warm_up(self) -> dict[str, bool]:
        """Resolve every fact and return them, e.g. for startup logging."""
        values = await asyncio.gather(*(self._get(fact) for fact in HARDWARE_FACTS))
        return dict(zip(HARDWARE_FACTS, values))

    def known_facts(self) -> dict[str, bool]:
        return dict(self._values)
