"""Config – 12-factor settings and loaders."""

from mp_eventstore.config.settings import EnvSettingsLoader, Settings, SettingsLoader
from mp_eventstore.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
