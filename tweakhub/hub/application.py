"""Generic apply port: routes an apply request to the owning domain."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApplySettingRequest:
    setting_id: str
    enable: bool
    value: Any = None
    skip_prerequisites: bool = False


@dataclass(frozen=True)
class OperationResult:
    success: bool
    setting_id: str
    error_message: str | None = None

    @classmethod
    def succeeded(cls, setting_id: str) -> OperationResult:
        return cls(success=True, setting_id=setting_id)

    @classmethod
    def failed(cls, setting_id: str, message: str) -> OperationResult:
        return cls(success=False, setting_id=setting_id, error_message=message)


class SettingApplicationService:
    """Applies settings through the router, enabling prerequisites first.

    A setting's ``depends_on`` ids are enabled before the setting itself
    unless the request asks to skip that step.
    """

    def __init__(self, router, registry, hub=None):
        self.router = router
        self.registry = registry
        self.hub = hub

    async def apply_setting(self, request: ApplySettingRequest) -> OperationResult:
        """Apply one setting. Domain failures come back as a failed result.

        Usage errors propagate: ``RuntimeError`` before the registry is
        initialized and ``ValueError`` for an id no domain service owns.
        """
        setting_id = request.setting_id
        definition = self.registry.find_setting(setting_id)
        self.router.get_domain_service(setting_id)
        try:
            if not request.skip_prerequisites and request.enable and definition is not None:
                await self._enable_prerequisites(definition)
            await self.router.apply_setting(setting_id, request.enable, request.value)
        except Exception as e:
            logger.error("Failed to apply setting %s: %s", setting_id, e)
            return OperationResult.failed(setting_id, str(e))

        if self.hub is not None:
            await self.hub.publish(
                "setting_applied",
                {"setting_id": setting_id, "enable": request.enable, "value": request.value},
            )
        return OperationResult.succeeded(setting_id)

    async def _enable_prerequisites(self, definition) -> None:
        for dependency_id in definition.depends_on:
            if await self.router.is_setting_enabled(dependency_id):
                continue
            logger.info("Enabling %s before %s", dependency_id, definition.id)
            await self.router.apply_setting(dependency_id, True, None)
