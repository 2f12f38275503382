"""Helpers de extração de campos por tipo de mensagem WhatsApp.

Separado de extractor.py para manter SRP. Cada função devolve
(content, button_id, list_item_id) ou None quando o bloco não existe.
"""

from __future__ import annotations

import re
from typing import Any

# Botões de templates aprovados chegam como type=button com o título;
# o payload nem sempre é configurado, então o título vira o ID
BUTTON_TITLE_ALIASES: dict[str, str] = {
    "हिंदी": "hindi",
    "हिन्दी": "hindi",
    "English": "english",
    "Book Site Survey": "site_survey",
    "Book site survey": "site_survey",
    "साइट सर्वे बुक करें": "site_survey",
    "Price Estimate": "price_estimate",
    "मूल्य अनुमान": "price_estimate",
    "Service & Support": "help",
    "सेवा और सहायता": "help",
    "Request callback": "callback",
    "कॉलबैक का अनुरोध": "callback",
    "Maintenance request": "maintenance",
    "रखरखाव अनुरोध": "maintenance",
    "Register issue": "other_issue",
    "समस्या दर्ज करें": "other_issue",
}

_NON_ID_CHARS = re.compile(r"[^a-z0-9_]")

ExtractedFields = tuple[str, str | None, str | None]


def extract_text_message(msg: dict[str, Any]) -> ExtractedFields | None:
    text_block = msg.get("text")
    if not isinstance(text_block, dict):
        return None
    return str(text_block.get("body") or ""), None, None


def extract_interactive_message(msg: dict[str, Any]) -> ExtractedFields | None:
    """Extrai button_reply/list_reply; outros tipos interativos retornam None."""
    interactive_block = msg.get("interactive")
    if not isinstance(interactive_block, dict):
        return None

    button_reply = interactive_block.get("button_reply")
    if isinstance(button_reply, dict) and button_reply.get("id"):
        return str(button_reply.get("title") or ""), str(button_reply["id"]), None

    list_reply = interactive_block.get("list_reply")
    if isinstance(list_reply, dict) and list_reply.get("id"):
        return str(list_reply.get("title") or ""), None, str(list_reply["id"])

    return None


def extract_template_button(msg: dict[str, Any]) -> ExtractedFields | None:
    """Quick reply de template aprovado (type=button)."""
    button_block = msg.get("button")
    if not isinstance(button_block, dict):
        return None
    title = str(button_block.get("text") or "")
    payload = str(button_block.get("payload") or title)
    button_id = BUTTON_TITLE_ALIASES.get(title) or _NON_ID_CHARS.sub("_", payload.lower())
    return title, button_id, None
