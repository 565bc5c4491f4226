"""Kernel types – identifier helpers."""
from mp_webhooks.kernel.types.ids import generate_webhook_id, is_valid_webhook_id

__all__ = ["generate_webhook_id", "is_valid_webhook_id"]
