"""Webhook identifiers.

Webhook ids double as idempotency keys on the receiving side, so they must be
unique; ULIDs are used because they also sort by creation time.
"""

from __future__ import annotations

import re

from ulid import ULID

_ULID_RE = re.compile(r"^[0-9A-HJKMNP-TV-Z]{26}$")


def generate_webhook_id() -> str:
    """Return a new 26-character ULID string."""
    return str(ULID())


def is_valid_webhook_id(value: str) -> bool:
    """Return ``True`` if *value* is a well-formed ULID (case-insensitive)."""
    return bool(_ULID_RE.match(value.upper()))


__all__ = ["generate_webhook_id", "is_valid_webhook_id"]
