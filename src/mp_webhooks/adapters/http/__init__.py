"""HTTP adapter – httpx-backed transport for outbound delivery."""
from mp_webhooks.adapters.http.transport import HttpxTransport

__all__ = ["HttpxTransport"]
