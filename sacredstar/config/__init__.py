"""Settings models persisted as YAML."""

from .settings import (
    CURRENT_SETTINGS_SCHEMA_VERSION,
    AspectsCfg,
    DashaCfg,
    EphemerisCfg,
    ObservabilityCfg,
    SearchCfg,
    Settings,
    config_path,
    default_settings,
    get_config_home,
    load_settings,
    save_settings,
)

__all__ = [
    "AspectsCfg",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "DashaCfg",
    "EphemerisCfg",
    "ObservabilityCfg",
    "SearchCfg",
    "Settings",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]
