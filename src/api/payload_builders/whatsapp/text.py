"""Builder para mensagens de texto."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.payload_builders.whatsapp.base import MAX_BODY_LENGTH, truncate

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest


class TextPayloadBuilder:
    """Builder para mensagens de texto simples."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        return {
            "type": "text",
            "text": {
                "preview_url": False,
                "body": truncate(request.body_text, MAX_BODY_LENGTH),
            },
        }
