"""Applies a domain's recommended baseline in one batch."""

from __future__ import annotations

import asyncio
import logging

from tweakhub.hub.application import ApplySettingRequest, OperationResult
from tweakhub.shared.models import SettingDefinition
from tweakhub.shared.value_mapping import get_index_for_named_option

logger = logging.getLogger(__name__)


class RecommendedSettingsEngine:
    """Computes and applies recommended values for every setting in a domain.

    The domain is picked from any setting id it owns. Settings are applied
    one at a time with prerequisite checks skipped; a failing setting is
    logged and skipped, but failing to enumerate the domain raises.
    """

    def __init__(self, router, version_oracle, apply_port, apply_spacing_seconds: float = 0.15):
        self.router = router
        self.version_oracle = version_oracle
        self.apply_port = apply_port
        self.apply_spacing_seconds = apply_spacing_seconds

    async def get_recommended_settings(self, setting_id: str) -> list[SettingDefinition]:
        service = self.router.get_domain_service(setting_id)
        settings = await service.get_settings()
        is_windows11 = self.version_oracle.is_windows11()
        build = self.version_oracle.build_number()
        return [
            s
            for s in settings
            if s.recommended_raw_setting is not None and s.version_constraints.evaluate(is_windows11, build) is None
        ]

    @staticmethod
    def build_request(setting: SettingDefinition) -> ApplySettingRequest:
        raw = setting.recommended_raw_setting
        if raw is None:
            raise ValueError(f"Setting {setting.id!r} has no recommended value")
        recommended = raw.recommended_value

        if setting.input_type == "toggle":
            return ApplySettingRequest(
                setting.id, enable=recommended == raw.enabled_value, value=recommended, skip_prerequisites=True
            )
        if setting.input_type == "selection" and setting.recommended_option is not None:
            option = setting.recommended_option
            index = get_index_for_named_option(setting, option, setting.named_options[option])
            if index is None:
                raise ValueError(f"Recommended option {option!r} of {setting.id!r} has no index")
            return ApplySettingRequest(setting.id, enable=True, value=index, skip_prerequisites=True)
        return ApplySettingRequest(setting.id, enable=True, value=recommended, skip_prerequisites=True)

    async def apply_recommended_settings(self, setting_id: str) -> list[OperationResult]:
        settings = await self.get_recommended_settings(setting_id)
        logger.info("Applying %d recommended settings for the domain of %s", len(settings), setting_id)

        results: list[OperationResult] = []
        for position, setting in enumerate(settings):
            if position and self.apply_spacing_seconds:
                await asyncio.sleep(self.apply_spacing_seconds)
            try:
                result = await self.apply_port.apply_setting(self.build_request(setting))
            except Exception as e:
                logger.warning("Failed to apply recommended value for %s: %s", setting.id, e)
                results.append(OperationResult.failed(setting.id, str(e)))
                continue
            if not result.success:
                logger.warning("Failed to apply recommended value for %s: %s", setting.id, result.error_message)
            results.append(result)
        return results
