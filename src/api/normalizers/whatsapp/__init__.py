"""Normalizer WhatsApp — extração de mensagens do webhook.

Tipos suportados: text, interactive (button_reply, list_reply) e
button (quick reply de template aprovado).
"""

from .extractor import extract_payload_messages, extract_status_updates

__all__ = [
    "extract_payload_messages",
    "extract_status_updates",
]
