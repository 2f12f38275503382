"""Base para builders de payload WhatsApp."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest

# Limites da Graph API para mensagens interativas
MAX_BODY_LENGTH = 1024
MAX_HEADER_LENGTH = 60
MAX_FOOTER_LENGTH = 60
MAX_BUTTON_TITLE_LENGTH = 20
MAX_BUTTONS = 3
MAX_LIST_ROW_TITLE_LENGTH = 24
MAX_LIST_ROW_DESCRIPTION_LENGTH = 72
MAX_LIST_BUTTON_TEXT_LENGTH = 20
MAX_FLOW_CTA_LENGTH = 20


class PayloadBuilder(Protocol):
    """Contrato dos builders por tipo de mensagem."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]: ...


def truncate(value: str | None, limit: int) -> str:
    return (value or "")[:limit]


def build_base_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Campos comuns a todo envio."""
    return {
        "messaging_product": "whatsapp",
        "recipient_type": "individual",
        "to": request.to,
    }
