"""Config – 12-factor settings and loaders."""

from mp_webhooks.config.settings import (
    ClientSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ServerSettings,
    Settings,
    SettingsLoader,
)
from mp_webhooks.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ClientSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "ServerSettings",
    "Settings",
    "SettingsLoader",
]
