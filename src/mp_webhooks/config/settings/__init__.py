"""Config settings – 12-factor env-based configuration."""
from mp_webhooks.config.settings.base import Settings
from mp_webhooks.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_webhooks.config.settings.webhooks import HTTP_VERBS, ClientSettings, ServerSettings

__all__ = [
    "ClientSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "HTTP_VERBS",
    "ServerSettings",
    "Settings",
    "SettingsLoader",
]
