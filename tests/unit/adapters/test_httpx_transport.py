"""Unit tests for HttpxTransport (respx-mocked httpx)."""
from __future__ import annotations

import asyncio

import httpx
import pytest
import respx

from mp_webhooks.adapters.http import HttpxTransport
from mp_webhooks.application.delivery import HttpTransport
from mp_webhooks.kernel.errors import TransportError

URL = "https://hooks.example.com/in"


def _send(transport: HttpxTransport, verb: str = "POST", verify_tls: bool = True):
    return asyncio.run(
        transport.send(verb, URL, {"webhook-id": "w1", "Content-Type": "application/json"}, b'{"a":1}', 3, verify_tls)
    )


# ---------------------------------------------------------------------------
# HttpxTransport
# ---------------------------------------------------------------------------
class TestHttpxTransport:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpxTransport(), HttpTransport)

    @respx.mock
    def test_success(self) -> None:
        route = respx.post(URL).mock(return_value=httpx.Response(202, text="accepted"))
        response = _send(HttpxTransport())
        assert response.status_code == 202
        assert response.body == "accepted"
        assert response.is_success
        sent = route.calls.last.request
        assert sent.headers["webhook-id"] == "w1"
        assert sent.content == b'{"a":1}'

    @respx.mock
    def test_error_status_returned_not_raised(self) -> None:
        respx.post(URL).mock(return_value=httpx.Response(500, text="boom"))
        response = _send(HttpxTransport())
        assert response.status_code == 500
        assert not response.is_success

    @respx.mock
    def test_verb_is_used(self) -> None:
        route = respx.put(URL).mock(return_value=httpx.Response(200))
        _send(HttpxTransport(), verb="PUT")
        assert route.called

    @respx.mock
    def test_timeout_maps_to_transport_error(self) -> None:
        respx.post(URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(TransportError) as exc_info:
            _send(HttpxTransport())
        assert "timed out" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.TimeoutException)

    @respx.mock
    def test_connect_error_maps_to_transport_error(self) -> None:
        respx.post(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(TransportError) as exc_info:
            _send(HttpxTransport())
        assert URL in str(exc_info.value)

    @respx.mock
    def test_shared_client(self) -> None:
        route = respx.post(URL).mock(return_value=httpx.Response(200))

        async def run() -> int:
            transport = HttpxTransport(httpx.AsyncClient())
            try:
                first = await transport.send("POST", URL, {}, b"", 3, False)
                second = await transport.send("POST", URL, {}, b"", 3, False)
            finally:
                await transport.aclose()
            return first.status_code + second.status_code

        assert asyncio.run(run()) == 400
        assert route.call_count == 2
