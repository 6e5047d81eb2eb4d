"""tweakhub Hub - wires filters, registry, routing and option building together."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from tweakhub.config import AppConfig
from tweakhub.engine.filters import ExistenceFilter, HardwareCompatibilityFilter, WindowsCompatibilityFilter
from tweakhub.engine.hardware import HardwareCapabilityCache
from tweakhub.engine.pipeline import FilterPipeline
from tweakhub.hub.application import ApplySettingRequest, OperationResult, SettingApplicationService
from tweakhub.hub.domains import CatalogDomainService, DomainService, PowerDomainService
from tweakhub.hub.options import SelectionOptionBuilder, SelectionSetupResult
from tweakhub.hub.recommended import RecommendedSettingsEngine
from tweakhub.hub.registry import CompatibleSettingsRegistry
from tweakhub.hub.router import DomainRouter, SettingsPreloader

logger = logging.getLogger(__name__)


async def ensure_initialized(registry: CompatibleSettingsRegistry, preloader: SettingsPreloader) -> None:
    """Initialize the registry and preload routes, skipping whichever is done."""
    if not registry.is_initialized:
        logger.info("Settings registry not initialized, initializing now")
        await registry.initialize()
    if not preloader.is_preloaded:
        logger.info("Preloading setting routes")
        await preloader.preload_all_settings()


class SettingsHub:
    """Central hub owning the registry, domain services and event subscribers."""

    def __init__(
        self,
        config: AppConfig,
        version_oracle,
        hardware_detector,
        power_backend,
        raw_store,
        power_plan_provider=None,
        providers=None,
    ):
        """Build the hub from its OS-facing collaborators.

        Args:
            config: Application config
            version_oracle: Answers ``is_windows11()`` / ``build_number()``
            hardware_detector: Blocking hardware probes, memoized by the hub
            power_backend: Bulk power-scheme query and hardware-control probe
            raw_store: Reads and writes raw setting values
            power_plan_provider: Builds power-plan options (optional)
            providers: Feature-id to catalog table; defaults to the built-in catalogs
        """
        self.config = config
        self.version_oracle = version_oracle
        self.raw_store = raw_store
        self.capabilities = HardwareCapabilityCache(hardware_detector)

        engine = config.engine
        self.pipeline = FilterPipeline(
            WindowsCompatibilityFilter(version_oracle),
            HardwareCompatibilityFilter(self.capabilities),
            ExistenceFilter(
                power_backend, raw_store, scheme=engine.power_scheme, settle_delay=engine.settle_delay_seconds
            ),
            hardware_sensitive_features=engine.hardware_sensitive_features,
        )
        self.registry = CompatibleSettingsRegistry(self.pipeline, providers, filter_enabled=engine.filter_enabled)

        services: list[DomainService] = []
        for feature_id in self.registry.feature_ids():
            if feature_id == "power" and power_plan_provider is not None:
                services.append(PowerDomainService(self.registry, raw_store, power_plan_provider))
            else:
                services.append(CatalogDomainService(feature_id, self.registry, raw_store))
        self.router = DomainRouter(services)
        self.preloader = SettingsPreloader(self.registry, self.router)

        self.options = SelectionOptionBuilder(
            raw_store, power_plan_provider, custom_state_display_name=engine.custom_state_display_name
        )
        self.applier = SettingApplicationService(self.router, self.registry, hub=self)
        self.recommended = RecommendedSettingsEngine(
            self.router, version_oracle, self.applier, apply_spacing_seconds=engine.apply_spacing_seconds
        )

        self.subscribers: dict[str, set[Callable]] = {}
        self._running = False
        self._start_time: datetime | None = None
        self.logger = logging.getLogger("hub")

    @classmethod
    def from_snapshot(cls, snapshot, config: AppConfig | None = None, providers=None) -> "SettingsHub":
        """Build a hub whose collaborators all come from a ``MachineSnapshot``."""
        return cls(
            config or AppConfig(),
            version_oracle=snapshot.version,
            hardware_detector=snapshot.hardware,
            power_backend=snapshot.power,
            raw_store=snapshot.raw_store,
            power_plan_provider=snapshot.power_plans,
            providers=providers,
        )

    async def initialize(self):
        self.logger.info("Initializing tweakhub...")
        facts = await self.capabilities.warm_up()
        self.logger.info(
            "Windows build %d (Windows 11: %s), hardware: %s",
            self.version_oracle.build_number(),
            "yes" if self.version_oracle.is_windows11() else "no",
            ", ".join(f"{name}={value}" for name, value in facts.items()),
        )
        await ensure_initialized(self.registry, self.preloader)
        self._running = True
        self._start_time = datetime.now(tz=UTC)
        self.logger.info("Hub initialized successfully")

    async def shutdown(self):
        self.logger.info("Shutting down tweakhub...")
        self._running = False
        self.subscribers.clear()
        self.logger.info("Hub shutdown complete")

    def subscribe(self, event_type: str, callback: Callable):
        self.subscribers.setdefault(event_type, set()).add(callback)
        self.logger.debug(f"Subscribed to event: {event_type}")

    def unsubscribe(self, event_type: str, callback: Callable):
        if event_type in self.subscribers:
            self.subscribers[event_type].discard(callback)
            self.logger.debug(f"Unsubscribed from event: {event_type}")

    async def publish(self, event_type: str, data: dict[str, Any]):
        """Call every subscriber of ``event_type``; a failing callback does not stop the rest."""
        self.logger.debug(f"Publishing event: {event_type}")
        for callback in list(self.subscribers.get(event_type, ())):
            try:
                await callback(data)
            except Exception as e:
                self.logger.error(f"Error in event callback for {event_type}: {e}")

    def is_running(self) -> bool:
        return self._running

    def get_uptime_seconds(self) -> float:
        if self._start_time is None:
            return 0.0
        return (datetime.now(tz=UTC) - self._start_time).total_seconds()

    def get_setting(self, setting_id: str):
        """Return a setting from the bypass view, or None if no catalog declares it."""
        return self.registry.find_setting(setting_id)

    async def build_options(self, setting_id: str, current_value: Any = None) -> SelectionSetupResult:
        definition = self.get_setting(setting_id)
        if definition is None:
            return SelectionSetupResult.failure(f"Unknown setting '{setting_id}'")
        return await self.options.build_options(definition, current_value)

    async def apply_setting(self, setting_id: str, enable: bool, value: Any = None) -> OperationResult:
        return await self.applier.apply_setting(ApplySettingRequest(setting_id, enable, value))

    async def health_check(self) -> dict[str, Any]:
        features = {}
        if self.registry.is_initialized:
            bypassed = self.registry.get_all_bypassed_settings()
            for feature_id, settings in self.registry.get_all_filtered_settings().items():
                features[feature_id] = {"compatible": len(settings), "total": len(bypassed.get(feature_id, ()))}
        return {
            "status": "ok" if self._running else "stopped",
            "uptime_seconds": round(self.get_uptime_seconds()),
            "registry": self.registry.state,
            "filter_enabled": self.registry.filter_enabled,
            "features": features,
            "hardware": self.capabilities.known_facts(),
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }
