"""Normalizers — conversão de payloads externos para modelos internos.

Estrutura:
- whatsapp/: extrator do webhook WhatsApp Business API
"""

from .whatsapp import extract_payload_messages, extract_status_updates

__all__ = [
    "extract_payload_messages",
    "extract_status_updates",
]
