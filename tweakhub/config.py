"""Configuration dataclasses for tweakhub.

Every value can be overridden from the environment through ``from_env``.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from tweakhub.hub.options import DEFAULT_CUSTOM_STATE_DISPLAY_NAME


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """Filtering and resolution settings."""
    power_scheme: str = "SCHEME_CURRENT"
    settle_delay_seconds: float = 0.1
    hardware_sensitive_features: frozenset[str] = field(default_factory=lambda: frozenset({"power"}))
    apply_spacing_seconds: float = 0.15
    filter_enabled: bool = True
    custom_state_display_name: str = DEFAULT_CUSTOM_STATE_DISPLAY_NAME

    @classmethod
    def from_env(cls):
        sensitive = os.environ.get("TWEAKHUB_HARDWARE_SENSITIVE_FEATURES")
        return cls(
            power_scheme=os.environ.get("TWEAKHUB_POWER_SCHEME", cls.power_scheme),
            settle_delay_seconds=float(os.environ.get("TWEAKHUB_SETTLE_DELAY", cls.settle_delay_seconds)),
            hardware_sensitive_features=(
                frozenset(f.strip() for f in sensitive.split(",") if f.strip())
                if sensitive is not None
                else frozenset({"power"})
            ),
            apply_spacing_seconds=float(os.environ.get("TWEAKHUB_APPLY_SPACING", cls.apply_spacing_seconds)),
            filter_enabled=_env_bool("TWEAKHUB_FILTER_ENABLED", cls.filter_enabled),
            custom_state_display_name=os.environ.get("TWEAKHUB_CUSTOM_STATE_NAME", cls.custom_state_display_name),
        )


@dataclass
class ServerConfig:
    """HTTP API settings."""
    host: str = "127.0.0.1"
    port: int = 8011
    api_key: str | None = None

    @classmethod
    def from_env(cls):
        return cls(
            host=os.environ.get("TWEAKHUB_HOST", cls.host),
            port=int(os.environ.get("TWEAKHUB_PORT", cls.port)),
            api_key=os.environ.get("TWEAKHUB_API_KEY") or None,
        )


@dataclass
class AppConfig:
    """Top-level config composing all sub-configs."""
    engine: EngineConfig = field(default_factory=EngineConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    snapshot_path: Path | None = None

    @classmethod
    def from_env(cls):
        snapshot = os.environ.get("TWEAKHUB_SNAPSHOT")
        return cls(
            engine=EngineConfig.from_env(),
            server=ServerConfig.from_env(),
            snapshot_path=Path(snapshot) if snapshot else None,
        )
