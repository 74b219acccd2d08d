"""Config – client settings, loaders, and configuration errors."""

from mp_search.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    SearchSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mp_search.config.validation import (
    ConfigError,
    InvalidMappingError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidMappingError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "SearchSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
