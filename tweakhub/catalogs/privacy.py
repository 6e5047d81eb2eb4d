"""Privacy and telemetry settings."""

from tweakhub.shared.models import RawSetting, SettingDefinition

FEATURE_ID = "privacy"


def _toggle(setting_id: str, name: str, key_path: str, value_name: str, recommended: int, **kwargs) -> SettingDefinition:
    """A 1 = on / 0 = off toggle with a recommended raw value."""
    return SettingDefinition(
        id=setting_id,
        name=name,
        domain_name=FEATURE_ID,
        input_type="toggle",
        raw_settings=[
            RawSetting(
                name=value_name,
                key_path=key_path,
                enabled_value=1,
                disabled_value=0,
                recommended_value=recommended,
                is_primary=True,
            )
        ],
        **kwargs,
    )


def get_settings() -> list[SettingDefinition]:
    return [
        _toggle(
            "privacy-advertising-id",
            "Let apps show personalized ads using my advertising ID",
            "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\AdvertisingInfo",
            "Enabled",
            recommended=0,
        ),
        _toggle(
            "privacy-tailored-experiences",
            "Tailored experiences",
            "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Privacy",
            "TailoredExperiencesWithDiagnosticDataEnabled",
            recommended=0,
        ),
        _toggle(
            "privacy-activity-history",
            "Store my activity history on this device",
            "HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\System",
            "PublishUserActivities",
            recommended=0,
        ),
        _toggle(
            "privacy-cortana",
            "Allow Cortana",
            "HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\Windows Search",
            "AllowCortana",
            recommended=0,
            is_windows10_only=True,
        ),
        SettingDefinition(
            id="privacy-recall-snapshots",
            name="Save snapshots of my screen (Recall)",
            domain_name=FEATURE_ID,
            input_type="toggle",
            is_windows11_only=True,
            minimum_build_number=26100,
            raw_settings=[
                RawSetting(
                    name="DisableAIDataAnalysis",
                    key_path="HKCU\\Software\\Policies\\Microsoft\\Windows\\WindowsAI",
                    enabled_value=0,
                    disabled_value=1,
                    recommended_value=1,
                    is_primary=True,
                )
            ],
        ),
        SettingDefinition(
            id="privacy-diagnostic-data",
            name="Diagnostic data",
            domain_name=FEATURE_ID,
            input_type="selection",
            raw_settings=[
                RawSetting(
                    name="AllowTelemetry",
                    key_path="HKLM\\SOFTWARE\\Policies\\Microsoft\\Windows\\DataCollection",
                    recommended_value=1,
                    is_primary=True,
                )
            ],
            named_options={"Off (Enterprise only)": 0, "Optional": 3, "Required only": 1},
            recommended_option="Required only",
            supports_custom_state=True,
        ),
    ]
