"""Extrator de payloads WhatsApp Business API.

Converte o webhook bruto em IncomingMessage (text, button, list).
Outros tipos (mídia, localização, respostas de Flow nfm_reply) são
ignorados com log: respostas de Flow chegam pelo endpoint de data
exchange, não pelo webhook.

Não faz validação de negócio - apenas extração estrutural.
"""

from __future__ import annotations

import logging
from typing import Any

from app.protocols.models import IncomingMessage
from fsm import InputKind

from ._extraction_helpers import (
    extract_interactive_message,
    extract_template_button,
    extract_text_message,
)

logger = logging.getLogger(__name__)


def _iter_values(payload: dict[str, Any]) -> list[dict[str, Any]]:
    values: list[dict[str, Any]] = []
    for entry in payload.get("entry") or []:
        if not isinstance(entry, dict):
            continue
        for change in entry.get("changes") or []:
            if isinstance(change, dict) and isinstance(change.get("value"), dict):
                values.append(change["value"])
    return values


def _contact_names(value: dict[str, Any]) -> dict[str, str]:
    names: dict[str, str] = {}
    for contact in value.get("contacts") or []:
        if not isinstance(contact, dict):
            continue
        wa_id = contact.get("wa_id")
        name = (contact.get("profile") or {}).get("name")
        if wa_id and name:
            names[str(wa_id)] = str(name)
    return names


def _to_incoming(msg: dict[str, Any], customer_name: str | None) -> IncomingMessage | None:
    message_type = msg.get("type")
    phone = msg.get("from")
    if not phone:
        return None

    if message_type == "text":
        fields = extract_text_message(msg)
        kind = InputKind.TEXT
    elif message_type == "interactive":
        fields = extract_interactive_message(msg)
        kind = InputKind.BUTTON if fields and fields[1] else InputKind.LIST
    elif message_type == "button":
        fields = extract_template_button(msg)
        kind = InputKind.BUTTON
    else:
        fields = None
        kind = InputKind.TEXT

    if fields is None:
        logger.info("unsupported_message_type_received", extra={"message_type": message_type})
        return None

    content, button_id, list_item_id = fields
    return IncomingMessage(
        customer_phone=str(phone),
        message_type=kind,
        content=content,
        customer_name=customer_name,
        selected_button_id=button_id,
        selected_list_item_id=list_item_id,
    )


def extract_payload_messages(payload: dict[str, Any]) -> list[IncomingMessage]:
    """Extrai mensagens suportadas do payload bruto do webhook."""
    messages: list[IncomingMessage] = []
    for value in _iter_values(payload):
        names = _contact_names(value)
        for msg in value.get("messages") or []:
            if not isinstance(msg, dict):
                continue
            incoming = _to_incoming(msg, names.get(str(msg.get("from"))))
            if incoming is not None:
                messages.append(incoming)
    return messages


def extract_status_updates(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Extrai atualizações de status (delivered/read/failed) sem o telefone."""
    statuses: list[dict[str, Any]] = []
    for value in _iter_values(payload):
        for status in value.get("statuses") or []:
            if not isinstance(status, dict):
                continue
            errors = status.get("errors") or []
            first_error = errors[0] if errors and isinstance(errors[0], dict) else {}
            statuses.append(
                {
                    "message_id": status.get("id"),
                    "status": status.get("status"),
                    "error_code": first_error.get("code"),
                    "error_title": first_error.get("title") or first_error.get("message"),
                }
            )
    return statuses
