"""Config validation errors raised while building event store settings.

They subclass :class:`~mp_eventstore.kernel.errors.BaseError`, so they log
through ``to_dict()`` like the storage errors.
"""
from mp_eventstore.kernel.errors import BaseError


class ConfigError(BaseError):
    """Settings could not be loaded; wraps unexpected failures from the settings class."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """An ``EVENTSTORE_*`` style variable for a field without default is unset.

    ``setting_name`` is the full environment variable name.
    """
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A value is present but unusable.

    Raised by the loader for malformed booleans and integers (``setting_name``
    is the variable name) and by ``_validate`` for empty collection names or
    events and snapshots sharing a collection (``setting_name`` is the field).
    """
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "value": repr(value), "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
