"""Shared fixtures for the tweakhub test suite."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from tweakhub.backends.snapshot import DEFAULT_SNAPSHOT, MachineSnapshot
from tweakhub.config import AppConfig, EngineConfig
from tweakhub.hub.core import SettingsHub


class FakeVersion:
    """Version oracle with a fixed build."""

    def __init__(self, build=22631, fail=False):
        self.build = build
        self.fail = fail

    def is_windows11(self):
        if self.fail:
            raise OSError("version query failed")
        return self.build >= 22000

    def build_number(self):
        if self.fail:
            raise OSError("version query failed")
        return self.build


class FakeCapabilities:
    """Async hardware capabilities with fixed answers."""

    def __init__(self, battery=False, lid=False, brightness=False, hybrid_sleep=False):
        self.battery = battery
        self.lid = lid
        self.brightness = brightness
        self.hybrid_sleep = hybrid_sleep

    async def has_battery(self):
        return self.battery

    async def has_lid(self):
        return self.lid

    async def supports_brightness(self):
        return self.brightness

    async def supports_hybrid_sleep(self):
        return self.hybrid_sleep


@pytest.fixture
def version_factory():
    return FakeVersion


@pytest.fixture
def capabilities_factory():
    return FakeCapabilities


@pytest.fixture
def fast_config():
    """AppConfig without settle or apply delays."""
    return AppConfig(engine=EngineConfig(settle_delay_seconds=0, apply_spacing_seconds=0))


@pytest.fixture
def snapshot():
    return MachineSnapshot.from_dict(DEFAULT_SNAPSHOT)


@pytest_asyncio.fixture
async def hub(snapshot, fast_config):
    """An initialized hub over the built-in demo machine."""
    hub = SettingsHub.from_snapshot(snapshot, fast_config)
    await hub.initialize()
    yield hub
    await hub.shutdown()


@pytest.fixture
def raw_store():
    store = MagicMock()
    store.get_raw_values = AsyncMock(return_value={})
    store.apply_setting = AsyncMock(return_value=True)
    store.set_value = AsyncMock()
    return store
