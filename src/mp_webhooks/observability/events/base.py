"""Observability – base class for webhook lifecycle events."""
from __future__ import annotations

import dataclasses
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Mapping

__all__ = ["WebhookEvent"]


def _serialise(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {k: _serialise(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialise(v) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _serialise(getattr(value, f.name)) for f in dataclasses.fields(value)}
    return value


@dataclasses.dataclass(frozen=True, kw_only=True)
class WebhookEvent:
    """Immutable lifecycle event published by the delivery and receipt engines."""

    name: ClassVar[str] = "webhook.event"

    occurred_at: datetime = dataclasses.field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"event": self.name}
        for f in dataclasses.fields(self):
            payload[f.name] = _serialise(getattr(self, f.name))
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)
