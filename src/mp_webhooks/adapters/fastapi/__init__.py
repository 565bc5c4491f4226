"""FastAPI adapter – inbound webhook endpoint (requires ``mp-webhooks[fastapi]``)."""
from mp_webhooks.adapters.fastapi.router import WebhookSignatureDependency, build_webhook_router

__all__ = ["WebhookSignatureDependency", "build_webhook_router"]
