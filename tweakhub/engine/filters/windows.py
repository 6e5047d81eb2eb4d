"""OS-version filter."""

from __future__ import annotations

import logging

from tweakhub.shared.models import SettingDefinition

logger = logging.getLogger(__name__)


class WindowsCompatibilityFilter:
    """Drops settings whose version constraints the running OS does not meet.

    With ``apply_filter=False`` nothing is dropped; incompatible settings are
    returned as copies carrying ``compatibility_message`` instead. That mode
    builds the registry's bypass view.
    """

    def __init__(self, version_oracle):
        self.version_oracle = version_oracle

    def filter_settings(
        self, settings: list[SettingDefinition], apply_filter: bool = True
    ) -> list[SettingDefinition]:
        try:
            is_windows11 = self.version_oracle.is_windows11()
            build = self.version_oracle.build_number()

            result: list[SettingDefinition] = []
            rejected = 0
            for setting in settings:
                message = setting.version_constraints.evaluate(is_windows11, build)
                if message is None:
                    result.append(setting)
                elif apply_filter:
                    rejected += 1
                    logger.debug("Filtered out %s: %s", setting.id, message)
                else:
                    result.append(setting.with_compatibility_message(message))

            if rejected:
                logger.debug("Windows filter removed %d of %d settings (build %d)", rejected, len(settings), build)
            return result
        except Exception as e:
            logger.error("Error filtering settings for Windows compatibility, returning all settings: %s", e)
            return list(settings)
