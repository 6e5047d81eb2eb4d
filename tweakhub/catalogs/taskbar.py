"""Taskbar customizations."""

from tweakhub.shared.models import RawSetting, SettingDefinition

FEATURE_ID = "taskbar"

ADVANCED_KEY = "HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Explorer\\Advanced"


def get_settings() -> list[SettingDefinition]:
    return [
        SettingDefinition(
            id="taskbar-alignment",
            name="Taskbar alignment",
            domain_name=FEATURE_ID,
            input_type="selection",
            kind="customization",
            is_windows11_only=True,
            raw_settings=[RawSetting(name="TaskbarAl", key_path=ADVANCED_KEY, is_primary=True)],
            value_mappings={0: {"TaskbarAl": 0}, 1: {"TaskbarAl": 1}},
            display_names=["Left", "Center"],
        ),
        SettingDefinition(
            id="taskbar-search-box",
            name="Search on the taskbar",
            domain_name=FEATURE_ID,
            input_type="selection",
            kind="customization",
            raw_settings=[
                RawSetting(
                    name="SearchboxTaskbarMode",
                    key_path="HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Search",
                    is_primary=True,
                )
            ],
            value_mappings={
                0: {"SearchboxTaskbarMode": 0},
                1: {"SearchboxTaskbarMode": 1},
                2: {"SearchboxTaskbarMode": 2},
            },
            display_names=["Hide", "Search icon only", "Search box"],
            option_tooltips=["No search entry point on the taskbar"],
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="taskbar-widgets",
            name="Show the Widgets button",
            domain_name=FEATURE_ID,
            kind="customization",
            is_windows11_only=True,
            supported_build_ranges=[(22000, 22631)],
            raw_settings=[
                RawSetting(name="TaskbarDa", key_path=ADVANCED_KEY, enabled_value=1, disabled_value=0, is_primary=True)
            ],
        ),
        SettingDefinition(
            id="taskbar-small-icons",
            name="Use small taskbar buttons",
            domain_name=FEATURE_ID,
            kind="customization",
            is_windows10_only=True,
            raw_settings=[
                RawSetting(
                    name="TaskbarSmallIcons", key_path=ADVANCED_KEY, enabled_value=1, disabled_value=0, is_primary=True
                )
            ],
        ),
        SettingDefinition(
            id="taskbar-combine-buttons",
            name="Combine taskbar buttons",
            domain_name=FEATURE_ID,
            input_type="selection",
            kind="customization",
            raw_settings=[RawSetting(name="TaskbarGlomLevel", key_path=ADVANCED_KEY, is_primary=True)],
            value_mappings={0: {"TaskbarGlomLevel": 0}, 1: {"TaskbarGlomLevel": 1}, 2: {"TaskbarGlomLevel": 2}},
            display_names=["Always", "When taskbar is full", "Never"],
            supports_custom_state=True,
        ),
    ]
