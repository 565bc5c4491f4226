"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
import types
import typing
from typing import Any, Mapping, TypeVar

from mp_webhooks.config.settings.base import Settings
from mp_webhooks.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables (or an explicit mapping).

    ``WEBHOOK_SERVER_TRIES=5`` populates ``ServerSettings.tries``; list and
    tuple fields are comma separated.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = getattr(settings_class, "_prefix", "").upper()
        hints = typing.get_type_hints(settings_class)
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            kwargs[field.name] = self._coerce(env_key, raw, hints.get(field.name, str))

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _coerce(self, key: str, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        origin = typing.get_origin(type_hint)
        if origin in (typing.Union, types.UnionType):
            args = [a for a in typing.get_args(type_hint) if a is not type(None)]
            if not value.strip():
                return None
            return self._coerce(key, value, args[0] if args else str)
        if type_hint is bool:
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise InvalidSettingValueError(key, value, "expected a boolean")
        if type_hint is int or type_hint is float:
            try:
                return type_hint(value)
            except ValueError as exc:
                raise InvalidSettingValueError(key, value, f"expected {type_hint.__name__}") from exc
        if origin in (list, tuple):
            items = [v.strip() for v in value.split(",") if v.strip()]
            return items if origin is list else tuple(items)
        return value


class DotenvSettingsLoader(SettingsLoader):
    """Load settings from a ``.env`` file then fall back to ``EnvSettingsLoader``."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        self._env_file = env_file
        self._override = override

    def load(self, settings_class: type[T]) -> T:
        try:
            from dotenv import load_dotenv  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError("Install 'mp-webhooks[dotenv]' to use DotenvSettingsLoader") from exc
        load_dotenv(self._env_file, override=self._override)
        return EnvSettingsLoader().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader"]
