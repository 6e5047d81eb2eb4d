"""Built-in feature catalogs.

``FEATURE_PROVIDERS`` is the explicit table the registry loads from: one
entry per feature id, each returning that feature's setting definitions.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from tweakhub.catalogs import explorer, power, privacy, sound, taskbar
from tweakhub.shared.models import SettingDefinition

FEATURE_PROVIDERS: dict[str, Callable[[], list[SettingDefinition]]] = {
    power.FEATURE_ID: power.get_settings,
    privacy.FEATURE_ID: privacy.get_settings,
    sound.FEATURE_ID: sound.get_settings,
    explorer.FEATURE_ID: explorer.get_settings,
    taskbar.FEATURE_ID: taskbar.get_settings,
}


def validate_catalogs(providers: Mapping[str, Callable[[], list[SettingDefinition]]] | None = None) -> list[str]:
    """Check catalog integrity. Returns a list of error strings.

    Checks for:
    1. Catalogs that fail to load (invalid definitions raise ValueError)
    2. Setting ids declared by more than one feature
    3. Settings whose domain_name differs from the feature they are listed under
    4. depends_on targets that no catalog declares
    """
    if providers is None:
        providers = FEATURE_PROVIDERS
    errors: list[str] = []
    owners: dict[str, str] = {}
    settings: list[SettingDefinition] = []

    for feature_id, provider in providers.items():
        try:
            loaded = provider()
        except Exception as e:
            errors.append(f"Feature {feature_id!r} failed to load: {e}")
            continue
        for setting in loaded:
            if setting.id in owners:
                errors.append(
                    f"Setting {setting.id!r} declared by both {owners[setting.id]!r} and {feature_id!r}"
                )
                continue
            owners[setting.id] = feature_id
            settings.append(setting)
            if setting.domain_name != feature_id:
                errors.append(
                    f"Setting {setting.id!r} listed under {feature_id!r} but declares domain {setting.domain_name!r}"
                )

    for setting in settings:
        for dep in setting.depends_on:
            if dep not in owners:
                errors.append(f"Setting {setting.id!r} depends on {dep!r}, which is not declared")

    return errors
