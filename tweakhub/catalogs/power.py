"""Power scheme settings."""

from tweakhub.hub.options import POWER_PLAN_SETTING_ID
from tweakhub.shared.models import PowerCfgKey, RawSetting, RegistryWrite, SettingDefinition

FEATURE_ID = "power"

SUBGROUP_DISPLAY = "7516b95f-f776-4464-8c53-06167f40cc99"
SUBGROUP_SLEEP = "238c9fa8-0aad-41ed-83f4-97be242c8f20"
SUBGROUP_BUTTONS = "4f971e89-eebd-4455-a8de-9e59040e7347"
SUBGROUP_PCIE = "501a4d13-42af-4429-9fd1-a8218c268e20"

POWER_SETTINGS_KEY = "HKLM\\SYSTEM\\CurrentControlSet\\Control\\Power\\PowerSettings"

_LID_ACTIONS = ["Do nothing", "Sleep", "Hibernate", "Shut down"]


def _acdc(guid: str) -> list[RawSetting]:
    return [
        RawSetting(name="AC", key_path=guid, value_kind="powercfg", is_primary=True),
        RawSetting(name="DC", key_path=guid, value_kind="powercfg"),
    ]


def _timeouts(pairs: list[tuple[int, int]]) -> dict[int, dict[str, int | None]]:
    return {i: {"AC": ac, "DC": dc} for i, (ac, dc) in enumerate(pairs)}


def get_settings() -> list[SettingDefinition]:
    display_guid = "3c0bc021-c8a8-4e07-a973-6b14cbcb2b7e"
    sleep_guid = "29f6c1db-86da-48c5-9fdb-f2b67b1f44da"
    hibernate_guid = "9d7815a6-7ee4-497e-8888-515a05f02364"
    lid_guid = "5ca83367-6e45-459f-a27b-476b1d01c936"
    button_guid = "7648efa3-dd9c-4e3e-b566-50f929386280"
    adaptive_guid = "fbd9aa66-9553-4097-ba44-ed6e9d65eab8"
    brightness_guid = "aded5e82-b909-4619-9949-f5d71dac0bcb"
    hybrid_guid = "94ac6d29-73ce-41a6-809f-6363ba21b47e"
    pcie_guid = "ee12f906-d277-404b-b6da-e5fa1a576df5"

    return [
        SettingDefinition(
            id=POWER_PLAN_SETTING_ID,
            name="Power plan",
            domain_name=FEATURE_ID,
            input_type="selection",
            description="Active power scheme",
            validate_existence=False,
            raw_settings=[
                RawSetting(
                    name="ActivePowerScheme",
                    key_path="HKLM\\SYSTEM\\CurrentControlSet\\Control\\Power\\User\\PowerSchemes",
                    value_kind="string",
                    is_primary=True,
                )
            ],
        ),
        SettingDefinition(
            id="power-display-timeout",
            name="Turn off the display after",
            domain_name=FEATURE_ID,
            input_type="selection",
            power_cfg_keys=[PowerCfgKey(display_guid, SUBGROUP_DISPLAY)],
            raw_settings=_acdc(display_guid),
            value_mappings=_timeouts([(300, 180), (600, 300), (1800, 900), (0, 0)]),
            display_names=["5 minutes", "10 minutes", "30 minutes", "Never"],
            option_tooltips=["Plugged in: 5 min, on battery: 3 min", "Plugged in: 10 min, on battery: 5 min"],
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="power-sleep-timeout",
            name="Put the computer to sleep after",
            domain_name=FEATURE_ID,
            input_type="selection",
            power_cfg_keys=[PowerCfgKey(sleep_guid, SUBGROUP_SLEEP)],
            raw_settings=_acdc(sleep_guid),
            value_mappings=_timeouts([(900, 600), (1800, 900), (3600, 1800), (0, 0)]),
            display_names=["15 minutes", "30 minutes", "1 hour", "Never"],
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="power-hibernate-timeout",
            name="Hibernate on battery after",
            domain_name=FEATURE_ID,
            input_type="selection",
            requires_battery=True,
            power_cfg_keys=[PowerCfgKey(hibernate_guid, SUBGROUP_SLEEP)],
            raw_settings=_acdc(hibernate_guid),
            value_mappings=_timeouts([(0, 0), (0, 3600), (0, 10800)]),
            display_names=["Never", "1 hour", "3 hours"],
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="power-lid-close-action",
            name="When I close the lid",
            domain_name=FEATURE_ID,
            input_type="selection",
            requires_lid=True,
            power_cfg_keys=[PowerCfgKey(lid_guid, SUBGROUP_BUTTONS)],
            raw_settings=_acdc(lid_guid),
            value_mappings={i: {"AC": i, "DC": i} for i in range(len(_LID_ACTIONS))},
            display_names=list(_LID_ACTIONS),
            supports_custom_state=True,
            custom_state_display_name="Different when plugged in and on battery",
        ),
        SettingDefinition(
            id="power-button-action",
            name="When I press the power button",
            domain_name=FEATURE_ID,
            input_type="selection",
            power_cfg_keys=[
                PowerCfgKey(
                    button_guid,
                    SUBGROUP_BUTTONS,
                    enablement=RegistryWrite(
                        key_path=f"{POWER_SETTINGS_KEY}\\{SUBGROUP_BUTTONS}\\{button_guid}",
                        value_name="Attributes",
                        value=2,
                    ),
                )
            ],
            raw_settings=_acdc(button_guid),
            value_mappings={i: {"AC": i, "DC": i} for i in range(len(_LID_ACTIONS))},
            display_names=list(_LID_ACTIONS),
            supports_custom_state=True,
        ),
        SettingDefinition(
            id="power-adaptive-brightness",
            name="Adaptive brightness",
            domain_name=FEATURE_ID,
            input_type="toggle",
            requires_brightness_support=True,
            power_cfg_keys=[PowerCfgKey(adaptive_guid, SUBGROUP_DISPLAY)],
            raw_settings=[
                RawSetting(name="AC", key_path=adaptive_guid, value_kind="powercfg", enabled_value=1, disabled_value=0),
                RawSetting(name="DC", key_path=adaptive_guid, value_kind="powercfg", enabled_value=1, disabled_value=0),
            ],
        ),
        SettingDefinition(
            id="power-display-brightness",
            name="Display brightness",
            domain_name=FEATURE_ID,
            input_type="numeric",
            requires_brightness_support=True,
            power_cfg_keys=[PowerCfgKey(brightness_guid, SUBGROUP_DISPLAY, check_for_hardware_control=True)],
            raw_settings=_acdc(brightness_guid),
        ),
        SettingDefinition(
            id="power-hybrid-sleep",
            name="Allow hybrid sleep",
            domain_name=FEATURE_ID,
            input_type="toggle",
            requires_hybrid_sleep=True,
            power_cfg_keys=[PowerCfgKey(hybrid_guid, SUBGROUP_SLEEP)],
            raw_settings=[
                RawSetting(name="AC", key_path=hybrid_guid, value_kind="powercfg", enabled_value=1, disabled_value=0),
            ],
        ),
        SettingDefinition(
            id="power-pcie-link-state",
            name="PCI Express link state power management",
            domain_name=FEATURE_ID,
            input_type="selection",
            requires_desktop=True,
            power_cfg_keys=[PowerCfgKey(pcie_guid, SUBGROUP_PCIE)],
            raw_settings=_acdc(pcie_guid),
            value_mappings=_timeouts([(0, 0), (1, 1), (2, 2)]),
            display_names=["Off", "Moderate power savings", "Maximum power savings"],
        ),
    ]
