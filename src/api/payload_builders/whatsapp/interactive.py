"""Builders para mensagens interativas (button, list, flow).

Os limites de tamanho da Graph API são aplicados aqui por truncamento;
a API rejeita o envio inteiro quando um título excede o limite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.payload_builders.whatsapp.base import (
    MAX_BODY_LENGTH,
    MAX_BUTTON_TITLE_LENGTH,
    MAX_BUTTONS,
    MAX_FLOW_CTA_LENGTH,
    MAX_FOOTER_LENGTH,
    MAX_HEADER_LENGTH,
    MAX_LIST_BUTTON_TEXT_LENGTH,
    MAX_LIST_ROW_DESCRIPTION_LENGTH,
    MAX_LIST_ROW_TITLE_LENGTH,
    truncate,
)

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest

DEFAULT_LIST_BUTTON_TEXT = "Options"
FLOW_MESSAGE_VERSION = "3"


def _common_parts(request: OutboundMessageRequest) -> dict[str, Any]:
    parts: dict[str, Any] = {"body": {"text": truncate(request.body_text, MAX_BODY_LENGTH)}}
    if request.header_text:
        parts["header"] = {"type": "text", "text": truncate(request.header_text, MAX_HEADER_LENGTH)}
    if request.footer_text:
        parts["footer"] = {"text": truncate(request.footer_text, MAX_FOOTER_LENGTH)}
    return parts


def _wrap(interactive: dict[str, Any]) -> dict[str, Any]:
    return {"type": "interactive", "interactive": interactive}


class ButtonPayloadBuilder:
    """Reply buttons (máximo 3)."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        if not request.buttons:
            raise ValueError("button message requires at least one button")
        buttons = [
            {
                "type": "reply",
                "reply": {"id": button_id, "title": truncate(title, MAX_BUTTON_TITLE_LENGTH)},
            }
            for button_id, title in request.buttons[:MAX_BUTTONS]
        ]
        return _wrap(
            {
                "type": "button",
                **_common_parts(request),
                "action": {"buttons": buttons},
            }
        )


class ListPayloadBuilder:
    """Lista com seções e linhas."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        if not request.list_sections:
            raise ValueError("list message requires at least one section")
        sections = []
        for section in request.list_sections:
            rows = []
            for row in section.get("rows") or []:
                item: dict[str, Any] = {
                    "id": row["id"],
                    "title": truncate(row.get("title"), MAX_LIST_ROW_TITLE_LENGTH),
                }
                if row.get("description"):
                    item["description"] = truncate(
                        row["description"], MAX_LIST_ROW_DESCRIPTION_LENGTH
                    )
                rows.append(item)
            sections.append({"title": truncate(section.get("title"), MAX_LIST_ROW_TITLE_LENGTH), "rows": rows})

        button_text = request.list_button_text or DEFAULT_LIST_BUTTON_TEXT
        return _wrap(
            {
                "type": "list",
                **_common_parts(request),
                "action": {
                    "button": truncate(button_text, MAX_LIST_BUTTON_TEXT_LENGTH),
                    "sections": sections,
                },
            }
        )


class FlowPayloadBuilder:
    """Mensagem que abre um WhatsApp Flow criptografado."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        if not request.flow_id or not request.flow_token:
            raise ValueError("flow message requires flow_id and flow_token")
        parameters: dict[str, Any] = {
            "flow_message_version": FLOW_MESSAGE_VERSION,
            "flow_token": request.flow_token,
            "flow_id": request.flow_id,
            "flow_cta": truncate(request.flow_cta, MAX_FLOW_CTA_LENGTH),
            "flow_action": "navigate",
        }
        if request.flow_action_payload:
            parameters["flow_action_payload"] = request.flow_action_payload
        return _wrap(
            {
                "type": "flow",
                **_common_parts(request),
                "action": {"name": "flow", "parameters": parameters},
            }
        )
