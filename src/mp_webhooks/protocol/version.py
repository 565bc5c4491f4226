"""Protocol – signature version tags."""
from __future__ import annotations

from enum import Enum


class SignatureVersion(str, Enum):
    """Standard Webhooks signature scheme identifiers."""

    V1_HMAC = "v1"
    V1A_ED25519 = "v1a"

    @classmethod
    def from_header(cls, header: str) -> "SignatureVersion | None":
        """Detect the version of a single ``"{version},{signature}"`` token."""
        if header.startswith("v1a,"):
            return cls.V1A_ED25519
        if header.startswith("v1,"):
            return cls.V1_HMAC
        return None

    def prefix(self) -> str:
        return f"{self.value},"

    def is_hmac(self) -> bool:
        return self is SignatureVersion.V1_HMAC

    def is_ed25519(self) -> bool:
        return self is SignatureVersion.V1A_ED25519


__all__ = ["SignatureVersion"]
