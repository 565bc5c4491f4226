"""Protocol – header names, signed content and signature header parsing.

Signed content is always ``"{id}.{timestamp}.{payload}"`` over the raw payload
bytes. Re-encoding the body (e.g. re-serialising JSON) before signing or
verifying breaks interoperability.
"""
from __future__ import annotations

import base64
from typing import Mapping

from mp_webhooks.kernel.errors import InvalidTimestampError
from mp_webhooks.protocol.version import SignatureVersion

__all__ = [
    "HEADER_ID",
    "HEADER_SIGNATURE",
    "HEADER_TIMESTAMP",
    "PROTOCOL_HEADERS",
    "format_signature",
    "get_header",
    "parse_signature_header",
    "parse_timestamp",
    "signed_content",
    "to_bytes",
]

HEADER_ID = "webhook-id"
HEADER_TIMESTAMP = "webhook-timestamp"
HEADER_SIGNATURE = "webhook-signature"

#: Headers the sender always controls; caller-supplied headers never override them.
PROTOCOL_HEADERS = frozenset({"content-type", HEADER_ID, HEADER_TIMESTAMP, HEADER_SIGNATURE})


def to_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else value.encode("utf-8")


def signed_content(webhook_id: str, timestamp: int, payload: str | bytes) -> bytes:
    """Return the exact byte string fed to signing and verification primitives."""
    return f"{webhook_id}.{timestamp}.".encode("utf-8") + to_bytes(payload)


def format_signature(version: SignatureVersion, raw_signature: bytes) -> str:
    return version.prefix() + base64.b64encode(raw_signature).decode("ascii")


def parse_signature_header(header: str) -> dict[str, list[str]]:
    """Group ``"{version},{signature}"`` tokens by version, preserving order.

    Tokens without a comma are skipped. Unknown versions are kept so callers
    can decide to ignore them.
    """
    signatures: dict[str, list[str]] = {}
    for part in header.split(" "):
        if "," not in part:
            continue
        version, signature = part.split(",", 1)
        signatures.setdefault(version, []).append(signature)
    return signatures


def parse_timestamp(value: str | None) -> int:
    """Parse a ``webhook-timestamp`` header value into Unix seconds."""
    if value is None:
        raise InvalidTimestampError("Missing webhook-timestamp header")
    stripped = value.strip()
    if not stripped.isascii() or not stripped.isdigit():
        raise InvalidTimestampError(f"Malformed webhook-timestamp header: {value!r}")
    return int(stripped)


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Case-insensitive header lookup over a plain mapping."""
    if name in headers:
        return headers[name]
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered:
            return value
    return None
