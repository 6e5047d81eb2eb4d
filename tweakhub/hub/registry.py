"""Compatible settings registry: one filtering pass, two cached views."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from types import MappingProxyType

from tweakhub.engine.pipeline import FilterPipeline
from tweakhub.shared.models import SettingDefinition

logger = logging.getLogger(__name__)

STATE_UNINITIALIZED = "uninitialized"
STATE_INITIALIZING = "initializing"
STATE_INITIALIZED = "initialized"

FeatureProviders = Mapping[str, Callable[[], list[SettingDefinition]]]


class CompatibleSettingsRegistry:
    """Caches each feature's filtered and bypassed setting lists.

    ``initialize()`` runs the filter pipeline once per feature; concurrent
    callers wait for the first one and then return. Afterwards the cached
    tuples are read without locking. ``filter_enabled`` only chooses which of
    the two cached views ``get_filtered_settings`` answers from.
    """

    def __init__(self, pipeline: FilterPipeline, providers: FeatureProviders | None = None, filter_enabled: bool = True):
        if providers is None:
            from tweakhub.catalogs import FEATURE_PROVIDERS

            providers = FEATURE_PROVIDERS
        self.pipeline = pipeline
        self.providers = dict(providers)
        self.filter_enabled = filter_enabled
        self.state = STATE_UNINITIALIZED
        self._lock = asyncio.Lock()
        self._filtered: Mapping[str, tuple[SettingDefinition, ...]] = MappingProxyType({})
        self._bypassed: Mapping[str, tuple[SettingDefinition, ...]] = MappingProxyType({})

    @property
    def is_initialized(self) -> bool:
        return self.state == STATE_INITIALIZED

    async def initialize(self) -> None:
        if self.is_initialized:
            return
        async with self._lock:
            if self.is_initialized:
                return
            self.state = STATE_INITIALIZING
            logger.info("Initializing compatible settings registry")

            filtered: dict[str, tuple[SettingDefinition, ...]] = {}
            bypassed: dict[str, tuple[SettingDefinition, ...]] = {}
            for feature_id, provider in self.providers.items():
                try:
                    settings = list(provider())
                    strict, bypass = await self.pipeline.run(feature_id, settings)
                    filtered[feature_id] = tuple(strict)
                    bypassed[feature_id] = tuple(bypass)
                except Exception as e:
                    logger.error("Failed to load settings for feature %s: %s", feature_id, e)
                    filtered[feature_id] = ()
                    bypassed[feature_id] = ()

            self._filtered = MappingProxyType(filtered)
            self._bypassed = MappingProxyType(bypassed)
            self.state = STATE_INITIALIZED
            logger.info(
                "Settings registry initialized: %d features, %d compatible settings, %d total",
                len(filtered),
                sum(len(v) for v in filtered.values()),
                sum(len(v) for v in bypassed.values()),
            )

    def _ensure_initialized(self) -> None:
        if not self.is_initialized:
            raise RuntimeError("Registry not initialized; await initialize() first")

    def set_filter_enabled(self, enabled: bool) -> None:
        self.filter_enabled = enabled
        logger.info("Windows compatibility filter %s", "enabled" if enabled else "disabled")

    def get_filtered_settings(self, feature_id: str) -> tuple[SettingDefinition, ...]:
        self._ensure_initialized()
        view = self._filtered if self.filter_enabled else self._bypassed
        return view.get(feature_id, ())

    def get_all_filtered_settings(self) -> Mapping[str, tuple[SettingDefinition, ...]]:
        self._ensure_initialized()
        return self._filtered if self.filter_enabled else self._bypassed

    def get_bypassed_settings(self, feature_id: str) -> tuple[SettingDefinition, ...]:
        self._ensure_initialized()
        return self._bypassed.get(feature_id, ())

    def get_all_bypassed_settings(self) -> Mapping[str, tuple[SettingDefinition, ...]]:
        self._ensure_initialized()
        return self._bypassed

    def find_setting(self, setting_id: str) -> SettingDefinition | None:
        """Look a setting up by id in the bypass view (every known setting)."""
        for settings in self.get_all_bypassed_settings().values():
            for setting in settings:
                if setting.id == setting_id:
                    return setting
        return None

    def feature_ids(self) -> list[str]:
        return list(self.providers)
