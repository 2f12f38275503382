"""Use cases específicos de WhatsApp."""

from .conversation_engine import ConversationFlowEngine
from .process_inbound_webhook import (
    InboundProcessingResult,
    ProcessInboundWebhookUseCase,
)

__all__ = [
    # Motor de conversa (chat API e webhook)
    "ConversationFlowEngine",
    # Pipeline do webhook
    "InboundProcessingResult",
    "ProcessInboundWebhookUseCase",
]
