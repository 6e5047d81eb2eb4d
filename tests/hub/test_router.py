"""Tests for DomainRouter and SettingsPreloader."""

import asyncio
from types import MappingProxyType
from unittest.mock import AsyncMock, MagicMock

import pytest

from tweakhub.hub.core import ensure_initialized
from tweakhub.hub.domains import DomainService
from tweakhub.hub.router import DomainRouter, SettingsPreloader
from tweakhub.shared.models import SettingDefinition


def _make_service(name):
    service = DomainService(name)
    service.apply_setting = AsyncMock()
    service.is_setting_enabled = AsyncMock(return_value=True)
    service.get_setting_value = AsyncMock(return_value=3)
    return service


def _make_registry(bypassed):
    registry = MagicMock()
    registry.is_initialized = True
    registry.get_all_bypassed_settings.return_value = MappingProxyType(
        {
            feature: tuple(SettingDefinition(id=sid, name=sid, domain_name=feature) for sid in ids)
            for feature, ids in bypassed.items()
        }
    )
    return registry


@pytest.fixture
def router():
    return DomainRouter([_make_service("power"), _make_service("privacy")])


class TestDomainRouter:
    def test_domain_name_resolves_directly(self, router):
        assert router.get_domain_service("power").domain_name == "power"

    def test_setting_id_resolves_after_mapping(self, router):
        router.add_setting_mappings("privacy", ["privacy-advertising-id"])
        assert router.get_domain_service("privacy-advertising-id").domain_name == "privacy"

    def test_unknown_identifier_raises(self, router):
        with pytest.raises(ValueError, match="No domain service found"):
            router.get_domain_service("privacy-advertising-id")

    def test_mapping_to_unknown_domain_raises(self, router):
        with pytest.raises(ValueError, match="No domain service registered"):
            router.add_setting_mappings("gaming", ["gaming-mode"])

    def test_duplicate_domain_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            DomainRouter([_make_service("power"), _make_service("power")])

    def test_domain_names(self, router):
        assert router.domain_names == ["power", "privacy"]

    @pytest.mark.asyncio
    async def test_routes_calls_to_owner(self, router):
        router.add_setting_mappings("power", ["power-display-timeout"])
        await router.apply_setting("power-display-timeout", True, 2)
        service = router.get_domain_service("power")
        service.apply_setting.assert_awaited_once_with("power-display-timeout", True, 2)
        assert await router.get_setting_value("power-display-timeout") == 3
        assert await router.is_setting_enabled("power-display-timeout") is True

    @pytest.mark.asyncio
    async def test_base_service_cannot_apply(self):
        with pytest.raises(NotImplementedError):
            await DomainService("sound").apply_setting("sound-startup-sound", True)


class TestSettingsPreloader:
    @pytest.mark.asyncio
    async def test_registers_every_bypassed_setting(self, router):
        registry = _make_registry({"power": ["power-a", "power-b"], "privacy": ["privacy-a"]})
        preloader = SettingsPreloader(registry, router)
        await preloader.preload_all_settings()
        assert preloader.is_preloaded
        assert router.get_domain_service("power-b").domain_name == "power"
        assert router.get_domain_service("privacy-a").domain_name == "privacy"

    @pytest.mark.asyncio
    async def test_failing_feature_is_skipped(self, router, caplog):
        registry = _make_registry({"gaming": ["gaming-mode"], "privacy": ["privacy-a"]})
        preloader = SettingsPreloader(registry, router)
        await preloader.preload_all_settings()
        assert preloader.is_preloaded
        assert router.get_domain_service("privacy-a").domain_name == "privacy"
        assert "Failed to preload settings for feature gaming" in caplog.text

    @pytest.mark.asyncio
    async def test_runs_once_under_concurrency(self, router):
        registry = _make_registry({"power": ["power-a"]})
        preloader = SettingsPreloader(registry, router)
        await asyncio.gather(*(preloader.preload_all_settings() for _ in range(20)))
        assert registry.get_all_bypassed_settings.call_count == 1

    @pytest.mark.asyncio
    async def test_uninitialized_registry_propagates(self, router):
        registry = MagicMock()
        registry.get_all_bypassed_settings.side_effect = RuntimeError("Registry not initialized")
        with pytest.raises(RuntimeError):
            await SettingsPreloader(registry, router).preload_all_settings()


class TestEnsureInitialized:
    @pytest.mark.asyncio
    async def test_initializes_both(self, caplog):
        caplog.set_level("INFO")
        registry = MagicMock(is_initialized=False, initialize=AsyncMock())
        preloader = MagicMock(is_preloaded=False, preload_all_settings=AsyncMock())
        await ensure_initialized(registry, preloader)
        registry.initialize.assert_awaited_once()
        preloader.preload_all_settings.assert_awaited_once()
        assert "registry" in caplog.text
        assert "Preloading" in caplog.text

    @pytest.mark.asyncio
    async def test_only_preloads_when_registry_ready(self):
        registry = MagicMock(is_initialized=True, initialize=AsyncMock())
        preloader = MagicMock(is_preloaded=False, preload_all_settings=AsyncMock())
        await ensure_initialized(registry, preloader)
        registry.initialize.assert_not_awaited()
        preloader.preload_all_settings.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nothing_to_do(self, caplog):
        caplog.set_level("INFO")
        registry = MagicMock(is_initialized=True, initialize=AsyncMock())
        preloader = MagicMock(is_preloaded=True, preload_all_settings=AsyncMock())
        await ensure_initialized(registry, preloader)
        registry.initialize.assert_not_awaited()
        preloader.preload_all_settings.assert_not_awaited()
        assert caplog.text == ""
