"""
mp_webhooks – Standard Webhooks signing, delivery and receipt.

Import path convention::

    from mp_webhooks.protocol import HmacSigner, HmacValidator
    from mp_webhooks.application.delivery import DeliveryEngine, WebhookCall
    from mp_webhooks.application.receipt import ReceiptEngine, ReceiverConfig
    from mp_webhooks.adapters.http import HttpxTransport
    from mp_webhooks.adapters.fastapi import build_webhook_router
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
