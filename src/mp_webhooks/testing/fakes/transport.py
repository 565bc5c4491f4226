"""Testing fakes – ScriptedTransport."""
from __future__ import annotations

import dataclasses
from typing import Mapping

from mp_webhooks.application.delivery import TransportResponse
from mp_webhooks.kernel.errors import TransportError


@dataclasses.dataclass(frozen=True)
class SentRequest:
    verb: str
    url: str
    headers: Mapping[str, str]
    body: bytes
    timeout: float
    verify_tls: bool


class ScriptedTransport:
    """``HttpTransport`` that replays queued outcomes and records every call.

    Queue ints (status codes), :class:`TransportResponse` objects or
    exceptions. Once the script is exhausted *default_status* is returned.
    """

    def __init__(self, *script: int | TransportResponse | BaseException, default_status: int = 200) -> None:
        self._script = list(script)
        self._default = default_status
        self.requests: list[SentRequest] = []

    def queue(self, *outcomes: int | TransportResponse | BaseException) -> "ScriptedTransport":
        self._script.extend(outcomes)
        return self

    def always_fail(self, status_code: int = 500) -> "ScriptedTransport":
        self._script.clear()
        self._default = status_code
        return self

    async def send(
        self,
        verb: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float,
        verify_tls: bool,
    ) -> TransportResponse:
        self.requests.append(SentRequest(verb, url, dict(headers), body, timeout, verify_tls))
        outcome = self._script.pop(0) if self._script else self._default
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, TransportResponse):
            return outcome
        return TransportResponse(status_code=outcome)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_request(self) -> SentRequest:
        return self.requests[-1]


def connection_refused(url: str = "https://example.test/hooks") -> TransportError:
    return TransportError(url, f"Connection refused: {url}")


__all__ = ["ScriptedTransport", "SentRequest", "connection_refused"]
