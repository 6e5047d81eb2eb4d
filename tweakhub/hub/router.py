"""Routes setting ids to the domain service that owns them."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from tweakhub.hub.domains import DomainService

logger = logging.getLogger(__name__)


class DomainRouter:
    """Resolves a domain name or setting id to its ``DomainService``.

    Domain names are known up front. Setting ids are added later by the
    preloader, from the registry's bypass view, so settings hidden by the
    OS filter can still be routed.
    """

    def __init__(self, services: Iterable[DomainService]):
        self._domains: dict[str, DomainService] = {}
        for service in services:
            if service.domain_name in self._domains:
                raise ValueError(f"Domain service {service.domain_name!r} already registered")
            self._domains[service.domain_name] = service
        self._setting_domains: dict[str, str] = {}

    @property
    def domain_names(self) -> list[str]:
        return list(self._domains)

    def add_setting_mappings(self, domain_name: str, setting_ids: Iterable[str]) -> int:
        if domain_name not in self._domains:
            raise ValueError(f"No domain service registered for {domain_name!r}")
        count = 0
        for setting_id in setting_ids:
            self._setting_domains[setting_id] = domain_name
            count += 1
        return count

    def get_domain_service(self, key: str) -> DomainService:
        service = self._domains.get(key)
        if service is not None:
            return service
        domain_name = self._setting_domains.get(key)
        if domain_name is not None:
            return self._domains[domain_name]
        raise ValueError(f"No domain service found for {key!r}")

    async def apply_setting(self, setting_id: str, enable: bool, value: Any = None) -> None:
        await self.get_domain_service(setting_id).apply_setting(setting_id, enable, value)

    async def is_setting_enabled(self, setting_id: str) -> bool:
        return await self.get_domain_service(setting_id).is_setting_enabled(setting_id)

    async def get_setting_value(self, setting_id: str) -> Any:
        return await self.get_domain_service(setting_id).get_setting_value(setting_id)


class SettingsPreloader:
    """Registers every setting id from the bypass view into the router once."""

    def __init__(self, registry, router: DomainRouter):
        self.registry = registry
        self.router = router
        self.is_preloaded = False
        self._lock = asyncio.Lock()

    async def preload_all_settings(self) -> None:
        if self.is_preloaded:
            return
        async with self._lock:
            if self.is_preloaded:
                return
            logger.info("Preloading setting routes")
            total = 0
            for feature_id, settings in self.registry.get_all_bypassed_settings().items():
                try:
                    total += self.router.add_setting_mappings(feature_id, (s.id for s in settings))
                except Exception as e:
                    logger.warning("Failed to preload settings for feature %s: %s", feature_id, e)
            self.is_preloaded = True
            logger.info("Preloaded %d setting routes", total)
