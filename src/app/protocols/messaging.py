"""Protocolo do Messaging Gateway (envio via WhatsApp)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.domain.templates import MessageTemplate
    from app.protocols.models import SendResult


class MessagingGatewayProtocol(Protocol):
    """Contrato de envio outbound.

    Falhas de envio voltam como SendResult(success=False, error=...),
    nunca como exceção.
    """

    async def send_template(self, phone: str, template: MessageTemplate) -> SendResult: ...

    async def send_flow(
        self,
        phone: str,
        *,
        flow_id: str,
        body_text: str,
        button_text: str,
        flow_token: str,
        header_text: str | None = None,
        footer_text: str | None = None,
        flow_action_payload: dict[str, Any] | None = None,
    ) -> SendResult: ...
