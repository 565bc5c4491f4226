"""HTTP adapter – HttpxTransport."""
from __future__ import annotations

from typing import Any, Mapping

import httpx

from mp_webhooks.application.delivery import TransportResponse
from mp_webhooks.kernel.errors import TransportError


class HttpxTransport:
    """``HttpTransport`` backed by ``httpx.AsyncClient``.

    Without a shared *client* a short-lived client is opened per request,
    because ``verify`` is a client-level option in httpx and may differ from
    one webhook to the next. A shared client ignores ``verify_tls`` and uses
    its own TLS settings.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, **client_kwargs: Any) -> None:
        self._client = client
        self._client_kwargs = client_kwargs

    async def send(
        self,
        verb: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes,
        timeout: float,
        verify_tls: bool,
    ) -> TransportResponse:
        try:
            if self._client is not None:
                response = await self._client.request(
                    verb, url, headers=dict(headers), content=body, timeout=timeout
                )
            else:
                async with httpx.AsyncClient(verify=verify_tls, **self._client_kwargs) as client:
                    response = await client.request(
                        verb, url, headers=dict(headers), content=body, timeout=timeout
                    )
        except httpx.TimeoutException as exc:
            raise TransportError(url, f"Webhook request timed out after {timeout}s: {verb} {url}", cause=exc) from exc
        except httpx.HTTPError as exc:
            raise TransportError(url, f"Failed to dispatch webhook to: {url}: {exc}", cause=exc) from exc
        return TransportResponse(status_code=response.status_code, body=response.text)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()


__all__ = ["HttpxTransport"]
