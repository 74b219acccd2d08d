"""Config validation errors."""
from mp_search.config.validation.errors import (
    ConfigError,
    InvalidMappingError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "InvalidMappingError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
