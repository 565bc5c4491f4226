"""Application delivery – HTTP transport port."""
from __future__ import annotations

import dataclasses
from typing import Mapping, Protocol, runtime_checkable

__all__ = ["HttpTransport", "TransportResponse"]


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@runtime_checkable
class HttpTransport(Protocol):
    """Port: send one HTTP request.

    Implementations raise :class:`~mp_webhooks.kernel.errors.TransportError`
    when no response was received (timeout, DNS, connection reset). Any
    received response, whatever its status, is returned.
    """

    async def send(
        self,
        verb: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float,
        verify_tls: bool,
    ) -> TransportResponse: ...
