"""Config validation errors – settings and schema bundle problems."""
from mp_search.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings or the schema bundle cannot be used as given."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"No value configured for '{setting_name}'",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"'{setting_name}' {reason}",
            detail={"setting": setting_name, "value": repr(value)},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


class InvalidMappingError(ConfigError):
    """A property of the mapping bundle is malformed, such as sub-fields on a non-text field."""
    default_code = "invalid_mapping"

    def __init__(self, field_name: str, reason: str) -> None:
        super().__init__(
            f"Mapping of field '{field_name}' is invalid: {reason}",
            detail={"field": field_name},
        )
        self.field_name = field_name
        self.reason = reason


__all__ = [
    "ConfigError",
    "InvalidMappingError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
