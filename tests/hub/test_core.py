"""Tests for SettingsHub wiring against the built-in demo machine."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from tweakhub.backends.snapshot import DEFAULT_SNAPSHOT, MachineSnapshot
from tweakhub.hub.core import SettingsHub
from tweakhub.hub.domains import PowerDomainService


def _ids(settings):
    return [s.id for s in settings]


# ============================================================================
# End-to-end filtering
# ============================================================================


class TestDemoMachineFiltering:
    def test_power_view(self, hub):
        ids = _ids(hub.registry.get_filtered_settings("power"))
        assert ids == [
            "power-plan-selection",
            "power-display-timeout",
            "power-sleep-timeout",
            "power-hibernate-timeout",
            "power-lid-close-action",
            "power-button-action",
        ]

    def test_hardware_excluded_from_both_views(self, hub):
        bypassed = _ids(hub.registry.get_bypassed_settings("power"))
        for setting_id in (
            "power-adaptive-brightness",
            "power-display-brightness",
            "power-hybrid-sleep",
            "power-pcie-link-state",
        ):
            assert setting_id not in bypassed

    def test_hidden_power_setting_revealed(self, hub, snapshot):
        assert "7648efa3-dd9c-4e3e-b566-50f929386280" in snapshot.power.values
        assert snapshot.power.hidden == {}

    def test_os_filtered_settings_only_in_bypass_view(self, hub):
        privacy = _ids(hub.registry.get_filtered_settings("privacy"))
        assert "privacy-cortana" not in privacy
        assert "privacy-recall-snapshots" not in privacy

        bypassed = {s.id: s for s in hub.registry.get_bypassed_settings("privacy")}
        assert bypassed["privacy-cortana"].compatibility_message == "Only available on Windows 10"
        assert bypassed["privacy-recall-snapshots"].compatibility_message is not None
        assert bypassed["privacy-advertising-id"].compatibility_message is None

        taskbar = _ids(hub.registry.get_filtered_settings("taskbar"))
        assert "taskbar-small-icons" not in taskbar
        assert "taskbar-small-icons" in _ids(hub.registry.get_bypassed_settings("taskbar"))

    def test_disabling_filter_serves_bypass_view(self, hub):
        hub.registry.set_filter_enabled(False)
        assert "privacy-cortana" in _ids(hub.registry.get_filtered_settings("privacy"))

    def test_every_bypassed_setting_is_routable(self, hub):
        for feature_id, settings in hub.registry.get_all_bypassed_settings().items():
            for setting in settings:
                assert hub.router.get_domain_service(setting.id).domain_name == feature_id

    def test_power_uses_plan_aware_service(self, hub):
        assert isinstance(hub.router.get_domain_service("power"), PowerDomainService)


# ============================================================================
# Hub lifecycle
# ============================================================================


class TestSettingsHub:
    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, snapshot, fast_config):
        hub = SettingsHub.from_snapshot(snapshot, fast_config)
        assert not hub.is_running()
        await asyncio.gather(hub.initialize(), hub.initialize())
        assert hub.is_running()
        assert hub.registry.is_initialized
        assert hub.preloader.is_preloaded

    @pytest.mark.asyncio
    async def test_health_check(self, hub):
        health = await hub.health_check()
        assert health["status"] == "ok"
        assert health["registry"] == "initialized"
        assert health["filter_enabled"] is True
        assert health["features"]["privacy"] == {"compatible": 4, "total": 6}
        assert health["features"]["power"] == {"compatible": 6, "total": 6}
        assert health["hardware"]["has_battery"] is True
        assert "timestamp" in health

    @pytest.mark.asyncio
    async def test_health_before_initialize(self, snapshot, fast_config):
        hub = SettingsHub.from_snapshot(snapshot, fast_config)
        health = await hub.health_check()
        assert health["status"] == "stopped"
        assert health["registry"] == "uninitialized"
        assert health["features"] == {}

    @pytest.mark.asyncio
    async def test_shutdown(self, hub):
        await hub.shutdown()
        assert not hub.is_running()
        assert hub.subscribers == {}

    def test_get_setting(self, hub):
        assert hub.get_setting("privacy-cortana").id == "privacy-cortana"
        assert hub.get_setting("gaming-mode") is None

    @pytest.mark.asyncio
    async def test_build_options_unknown_setting(self, hub):
        result = await hub.build_options("gaming-mode")
        assert not result.success
        assert "Unknown setting" in result.error_message

    @pytest.mark.asyncio
    async def test_build_options_custom_state(self, hub):
        result = await hub.build_options("power-lid-close-action")
        assert result.success
        assert result.selected_value == -1
        assert result.options[-1].display_text == "Different when plugged in and on battery"

    @pytest.mark.asyncio
    async def test_build_options_power_plans(self, hub):
        result = await hub.build_options("power-plan-selection")
        assert [o.display_text for o in result.options] == ["Balanced", "High performance", "Power saver"]
        assert result.selected_value == 0

    @pytest.mark.asyncio
    async def test_apply_setting_enables_prerequisite(self, hub, snapshot):
        result = await hub.apply_setting("explorer-show-protected-os-files", True)
        assert result.success
        advanced = "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced"
        assert snapshot.raw_store.registry[f"{advanced}\\Hidden"] == 1
        assert snapshot.raw_store.registry[f"{advanced}\\ShowSuperHidden"] == 1

    @pytest.mark.asyncio
    async def test_apply_unknown_setting_raises(self, hub):
        with pytest.raises(ValueError, match="No domain service found"):
            await hub.apply_setting("gaming-mode", True)

    @pytest.mark.asyncio
    async def test_apply_before_initialize_raises(self, snapshot, fast_config):
        hub = SettingsHub.from_snapshot(snapshot, fast_config)
        with pytest.raises(RuntimeError, match="not initialized"):
            await hub.apply_setting("privacy-advertising-id", True)

    @pytest.mark.asyncio
    async def test_apply_bad_index_fails_softly(self, hub):
        result = await hub.apply_setting("power-display-timeout", True, 9)
        assert not result.success
        assert "no option at index" in result.error_message

    @pytest.mark.asyncio
    async def test_recommended_settings_for_privacy(self, hub):
        settings = await hub.recommended.get_recommended_settings("privacy-advertising-id")
        assert _ids(settings) == [
            "privacy-advertising-id",
            "privacy-tailored-experiences",
            "privacy-activity-history",
            "privacy-diagnostic-data",
        ]

    @pytest.mark.asyncio
    async def test_apply_recommended_sound(self, hub, snapshot):
        results = await hub.recommended.apply_recommended_settings("sound")
        assert all(r.success for r in results)
        registry = snapshot.raw_store.registry
        assert registry["HKCU\\Software\\Microsoft\\Multimedia\\Audio\\UserDuckingPreference"] == 3
        startup = "HKLM\\SOFTWARE\\Microsoft\\Windows\\CurrentVersion\\Authentication\\LogonUI\\BootAnimation"
        assert registry[f"{startup}\\DisableStartupSound"] == 1


class TestEvents:
    @pytest.mark.asyncio
    async def test_apply_publishes_event(self, hub):
        callback = AsyncMock()
        hub.subscribe("setting_applied", callback)
        await hub.apply_setting("explorer-show-file-extensions", True)
        callback.assert_awaited_once_with(
            {"setting_id": "explorer-show-file-extensions", "enable": True, "value": None}
        )

    @pytest.mark.asyncio
    async def test_failing_subscriber_does_not_stop_others(self, hub, caplog):
        bad = AsyncMock(side_effect=RuntimeError("boom"))
        good = AsyncMock()
        hub.subscribe("evt", bad)
        hub.subscribe("evt", good)
        await hub.publish("evt", {"x": 1})
        good.assert_awaited_once_with({"x": 1})
        assert "Error in event callback for evt" in caplog.text

    @pytest.mark.asyncio
    async def test_unsubscribe(self, hub):
        callback = AsyncMock()
        hub.subscribe("evt", callback)
        hub.unsubscribe("evt", callback)
        await hub.publish("evt", {})
        callback.assert_not_awaited()


class TestCustomProviders:
    @pytest.mark.asyncio
    async def test_broken_catalog_yields_empty_feature(self, fast_config, caplog):
        def broken():
            raise ValueError("bad catalog")

        snapshot = MachineSnapshot.from_dict(DEFAULT_SNAPSHOT)
        hub = SettingsHub.from_snapshot(snapshot, fast_config, providers={"gaming": broken})
        await hub.initialize()
        assert hub.registry.get_filtered_settings("gaming") == ()
        assert "Failed to load settings for feature gaming" in caplog.text
