"""Config settings – env-based configuration."""
from mp_eventstore.config.settings.base import Settings
from mp_eventstore.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["EnvSettingsLoader", "Settings", "SettingsLoader"]
