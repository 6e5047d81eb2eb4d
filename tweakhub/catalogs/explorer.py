"""File Explorer customizations."""

from tweakhub.shared.models import RawSetting, SettingDefinition

FEATURE_ID = "explorer"

ADVANCED_KEY = "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced"


def get_settings() -> list[SettingDefinition]:
    return [
        SettingDefinition(
            id="explorer-show-file-extensions",
            name="Show file name extensions",
            domain_name=FEATURE_ID,
            kind="customization",
            raw_settings=[
                RawSetting(
                    name="HideFileExt",
                    key_path=ADVANCED_KEY,
                    enabled_value=0,
                    disabled_value=1,
                    recommended_value=0,
                    is_primary=True,
                )
            ],
        ),
        SettingDefinition(
            id="explorer-show-hidden-files",
            name="Show hidden files and folders",
            domain_name=FEATURE_ID,
            kind="customization",
            raw_settings=[
                RawSetting(name="Hidden", key_path=ADVANCED_KEY, enabled_value=1, disabled_value=2, is_primary=True)
            ],
        ),
        SettingDefinition(
            id="explorer-show-protected-os-files",
            name="Show protected operating system files",
            domain_name=FEATURE_ID,
            kind="customization",
            depends_on=["explorer-show-hidden-files"],
            raw_settings=[
                RawSetting(
                    name="ShowSuperHidden", key_path=ADVANCED_KEY, enabled_value=1, disabled_value=0, is_primary=True
                )
            ],
        ),
        SettingDefinition(
            id="explorer-launch-to",
            name="Open File Explorer to",
            domain_name=FEATURE_ID,
            input_type="selection",
            kind="customization",
            raw_settings=[RawSetting(name="LaunchTo", key_path=ADVANCED_KEY, is_primary=True)],
            value_mappings={0: {"LaunchTo": 1}, 1: {"LaunchTo": 2}, 2: {"LaunchTo": 3}},
            display_names=["This PC", "Home", "Downloads"],
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="explorer-classic-context-menu",
            name="Use the classic context menu",
            domain_name=FEATURE_ID,
            kind="customization",
            is_windows11_only=True,
            raw_settings=[
                RawSetting(
                    name="(Default)",
                    key_path="HKCU\\Software\\Classes\\CLSID\\{86ca1aa0-34aa-4e8b-a509-50c905bae2a2}\\InprocServer32",
                    enabled_value="",
                    disabled_value=None,
                    value_kind="string",
                    is_primary=True,
                )
            ],
        ),
    ]
