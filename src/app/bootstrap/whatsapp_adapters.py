"""Adapters concretos para WhatsApp (wiring em app/bootstrap).

Este módulo é o único autorizado a acoplar app <-> api.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.connectors.whatsapp.http_base import HttpError
from api.connectors.whatsapp.http_client import create_whatsapp_http_client, extract_message_id
from api.normalizers.whatsapp import extract_payload_messages
from api.payload_builders.whatsapp.factory import build_full_payload
from app.constants.whatsapp import InteractiveType, MessageType
from app.protocols.messaging import MessagingGatewayProtocol
from app.protocols.models import IncomingMessage, OutboundMessageRequest, SendResult
from app.protocols.normalizer import MessageNormalizerProtocol
from config.settings import get_whatsapp_settings

if TYPE_CHECKING:
    from app.domain.templates import MessageTemplate
    from app.protocols.http_client import WhatsAppHttpClientProtocol
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)


class GraphApiNormalizer(MessageNormalizerProtocol):
    """Normalizador baseado em Graph API."""

    def normalize(self, payload: dict[str, Any]) -> list[IncomingMessage]:
        return extract_payload_messages(payload)


def template_to_request(phone: str, template: MessageTemplate) -> OutboundMessageRequest:
    """Traduz um MessageTemplate para a requisição de envio da Graph API."""
    if template.message_type is MessageType.BUTTON:
        return OutboundMessageRequest(
            to=phone,
            body_text=template.body_text,
            interactive_type=InteractiveType.BUTTON,
            header_text=template.header_text,
            footer_text=template.footer_text,
            buttons=tuple((button.id, button.title) for button in template.buttons),
        )
    if template.message_type is MessageType.LIST:
        return OutboundMessageRequest(
            to=phone,
            body_text=template.body_text,
            interactive_type=InteractiveType.LIST,
            header_text=template.header_text,
            footer_text=template.footer_text,
            list_sections=tuple(section.to_dict() for section in template.list_sections),
            list_button_text=template.list_button_text or template.footer_text,
        )
    return OutboundMessageRequest(to=phone, body_text=template.body_text)


class GraphApiMessagingGateway(MessagingGatewayProtocol):
    """Gateway de envio usando o cliente HTTP WhatsApp.

    Falhas (payload inválido, erro HTTP, erro Meta) voltam como
    SendResult(success=False); nada é levantado para o chamador.
    """

    def __init__(
        self,
        http_client: WhatsAppHttpClientProtocol | None = None,
        settings: WhatsAppSettings | None = None,
    ) -> None:
        self._settings = settings or get_whatsapp_settings()
        self._http_client = http_client or create_whatsapp_http_client(self._settings)

    async def send_template(self, phone: str, template: MessageTemplate) -> SendResult:
        return await self._send(template_to_request(phone, template), operation="send_template")

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
    ) -> SendResult:
        request = OutboundMessageRequest(
            to=phone,
            body_text=body_text,
            interactive_type=InteractiveType.FLOW,
            header_text=header_text,
            footer_text=footer_text,
            flow_id=flow_id,
            flow_token=flow_token,
            flow_cta=button_text,
            flow_action_payload=flow_action_payload,
        )
        return await self._send(request, operation="send_flow")

    async def _send(self, request: OutboundMessageRequest, *, operation: str) -> SendResult:
        try:
            payload = build_full_payload(request)
            endpoint = self._settings.get_messages_endpoint()
        except ValueError as exc:
            logger.warning("whatsapp_payload_rejected", extra={"operation": operation, "error": str(exc)})
            return SendResult(success=False, error=str(exc))

        try:
            response = await self._http_client.send_message(
                endpoint=endpoint,
                access_token=self._settings.access_token,
                payload=payload,
            )
        except (HttpError, ValueError) as exc:
            logger.error(
                "whatsapp_send_failed",
                extra={"operation": operation, "error": str(exc), "to": request.to},
            )
            return SendResult(success=False, error=str(exc))

        message_id = extract_message_id(response)
        logger.info(
            "message_sent_to_whatsapp_api",
            extra={"operation": operation, "message_id": message_id},
        )
        return SendResult(success=True, message_id=message_id)
