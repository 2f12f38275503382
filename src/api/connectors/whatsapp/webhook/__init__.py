"""Entrada HTTP do webhook WhatsApp (GET challenge e POST de eventos)."""

from .receive import (
    InvalidJsonError,
    InvalidSignatureError,
    PayloadTooLargeError,
    WebhookDelivery,
    WebhookRequestError,
    read_webhook_delivery,
)
from .verify import WebhookChallengeError, verify_webhook_challenge

__all__ = [
    "InvalidJsonError",
    "InvalidSignatureError",
    "PayloadTooLargeError",
    "WebhookChallengeError",
    "WebhookDelivery",
    "WebhookRequestError",
    "read_webhook_delivery",
    "verify_webhook_challenge",
]
