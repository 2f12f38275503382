"""Protocolos e contratos do core da aplicação."""

from .conversation_store import (
    ConversationStoreError,
    ConversationStoreProtocol,
    MessageLogEntry,
)
from .http_client import WhatsAppHttpClientProtocol
from .messaging import MessagingGatewayProtocol
from .models import IncomingMessage, OutboundMessageRequest, OutgoingMessage, SendResult
from .normalizer import MessageNormalizerProtocol
from .record_store import RecordStoreProtocol
from .template_store import TemplateStoreProtocol

__all__ = [
    "ConversationStoreError",
    "ConversationStoreProtocol",
    "IncomingMessage",
    "MessageLogEntry",
    "MessageNormalizerProtocol",
    "MessagingGatewayProtocol",
    "OutboundMessageRequest",
    "OutgoingMessage",
    "RecordStoreProtocol",
    "SendResult",
    "TemplateStoreProtocol",
    "WhatsAppHttpClientProtocol",
]
