"""Tests for CatalogDomainService and PowerDomainService over the demo snapshot."""

import pytest

ADVANCED = "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced"
DISPLAY_GUID = "3c0bc021-c8a8-4e07-a973-6b14cbcb2b7e"


class TestCatalogDomainService:
    @pytest.mark.asyncio
    async def test_get_settings_returns_compatible_only(self, hub):
        service = hub.router.get_domain_service("privacy")
        ids = [s.id for s in await service.get_settings()]
        assert "privacy-advertising-id" in ids
        assert "privacy-cortana" not in ids

    def test_unknown_setting_for_domain(self, hub):
        service = hub.router.get_domain_service("privacy")
        with pytest.raises(ValueError, match="not part of domain"):
            service.get_definition("sound-startup-sound")

    @pytest.mark.asyncio
    async def test_toggle_apply_writes_enabled_value(self, hub, snapshot):
        await hub.router.apply_setting("explorer-show-file-extensions", True)
        assert snapshot.raw_store.registry[f"{ADVANCED}\\HideFileExt"] == 0
        assert await hub.router.is_setting_enabled("explorer-show-file-extensions") is True

        await hub.router.apply_setting("explorer-show-file-extensions", False)
        assert snapshot.raw_store.registry[f"{ADVANCED}\\HideFileExt"] == 1
        assert await hub.router.is_setting_enabled("explorer-show-file-extensions") is False

    @pytest.mark.asyncio
    async def test_selection_apply_writes_mapping(self, hub, snapshot):
        await hub.router.apply_setting("power-display-timeout", True, 2)
        assert snapshot.power.values[DISPLAY_GUID] == [1800, 900]
        assert await hub.router.get_setting_value("power-display-timeout") == 2

    @pytest.mark.asyncio
    async def test_selection_apply_custom_index_rejected(self, hub):
        with pytest.raises(ValueError, match="custom state"):
            await hub.router.apply_setting("power-display-timeout", True, -1)

    @pytest.mark.asyncio
    async def test_selection_apply_unknown_index_rejected(self, hub):
        with pytest.raises(ValueError, match="no option at index"):
            await hub.router.apply_setting("power-display-timeout", True, 9)

    @pytest.mark.asyncio
    async def test_named_option_apply_uses_canonical_order(self, hub, snapshot):
        # "Do nothing", "Mute all other sounds", "...50%", "...80%"
        await hub.router.apply_setting("sound-communication-ducking", True, 0)
        assert snapshot.raw_store.registry["HKCU\\Software\\Microsoft\\Multimedia\\Audio\\UserDuckingPreference"] == 3
        assert await hub.router.get_setting_value("sound-communication-ducking") == 0

    @pytest.mark.asyncio
    async def test_current_value_of_named_option(self, hub):
        assert await hub.router.get_setting_value("sound-communication-ducking") == 3

    @pytest.mark.asyncio
    async def test_custom_state_reported(self, hub):
        assert await hub.router.get_setting_value("power-lid-close-action") == -1

    @pytest.mark.asyncio
    async def test_none_write_deletes_value(self, hub, snapshot):
        key = "HKCU\\Software\\Classes\\CLSID\\{86ca1aa0-34aa-4e8b-a509-50c905bae2a2}\\InprocServer32\\(Default)"
        await hub.router.apply_setting("explorer-classic-context-menu", True)
        assert snapshot.raw_store.registry[key] == ""
        await hub.router.apply_setting("explorer-classic-context-menu", False)
        assert key not in snapshot.raw_store.registry

    @pytest.mark.asyncio
    async def test_bypassed_setting_is_routable(self, hub, snapshot):
        await hub.router.apply_setting("privacy-cortana", False)
        key = "HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\Windows Search\\AllowCortana"
        assert snapshot.raw_store.registry[key] == 0


class TestPowerDomainService:
    @pytest.mark.asyncio
    async def test_power_plan_value_is_plan_index(self, hub):
        assert await hub.router.get_setting_value("power-plan-selection") == 0

    @pytest.mark.asyncio
    async def test_apply_power_plan_activates_guid(self, hub, snapshot):
        await hub.router.apply_setting("power-plan-selection", True, 1)
        assert snapshot.power.active_plan == "8c5e7fda-e8bf-4a96-9a85-a6e23a8c635c"
        assert await hub.router.get_setting_value("power-plan-selection") == 1

    @pytest.mark.asyncio
    async def test_regular_power_setting_uses_catalog_path(self, hub):
        assert await hub.router.get_setting_value("power-sleep-timeout") == 1
