"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
import typing


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses set ``_prefix`` (e.g. ``"WEBHOOK_SERVER"``); every field is then
    read from ``{PREFIX}_{FIELD}`` by :class:`EnvSettingsLoader`.
    """

    _prefix: typing.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


__all__ = ["Settings"]
