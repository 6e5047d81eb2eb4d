"""Sound settings."""

from tweakhub.shared.models import RawSetting, SettingDefinition

FEATURE_ID = "sound"


def get_settings() -> list[SettingDefinition]:
    return [
        SettingDefinition(
            id="sound-communication-ducking",
            name="When Windows detects communications activity",
            domain_name=FEATURE_ID,
            input_type="selection",
            raw_settings=[
                RawSetting(
                    name="UserDuckingPreference",
                    key_path="HKCU\\Software\\Microsoft\\Multimedia\\Audio",
                    default_value=1,
                    recommended_value=3,
                    is_primary=True,
                )
            ],
            named_options={
                "Do nothing": 3,
                "Mute all other sounds": 0,
                "Reduce the volume of other sounds by 50%": 2,
                "Reduce the volume of other sounds by 80%": 1,
            },
            recommended_option="Do nothing",
            option_tooltips=["Leave other sounds alone during calls"],
        ),
        SettingDefinition(
            id="sound-startup-sound",
            name="Play Windows startup sound",
            domain_name=FEATURE_ID,
            input_type="toggle",
            raw_settings=[
                RawSetting(
                    name="DisableStartupSound",
                    key_path="HKLM\\SOFTWARE\\Microsoft\\Windows\\CurrentVersion\\Authentication\\LogonUI\\BootAnimation",
                    enabled_value=0,
                    disabled_value=1,
                    recommended_value=1,
                    is_primary=True,
                )
            ],
        ),
        SettingDefinition(
            id="sound-system-volume-sync",
            name="Remember per-app volume levels",
            domain_name=FEATURE_ID,
            input_type="toggle",
            minimum_build_number=22621,
            raw_settings=[
                RawSetting(
                    name="DisableSharedVolumeLevels",
                    key_path="HKCU\\Software\\Microsoft\\Multimedia\\Audio",
                    enabled_value=0,
                    disabled_value=1,
                    is_primary=True,
                )
            ],
        ),
    ]
