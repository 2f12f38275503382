"""Flow token — identificador opaco que volta do runtime de Flows.

Formato: base64 de JSON {phone, flowType, language, issuedAt}.
O token não é assinado: quem conhece o formato consegue forjar um
telefone. O handler de data exchange valida apenas o formato do número.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

UNKNOWN_PHONE = "unknown"


def encode_flow_token(
    phone: str,
    flow_type: str,
    language: str,
    issued_at: datetime | None = None,
) -> str:
    """Gera o token enviado junto com a mensagem de Flow."""
    payload = {
        "phone": phone,
        "flowType": str(flow_type),
        "language": str(language),
        "issuedAt": (issued_at or datetime.now(UTC)).isoformat(),
    }
    raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_flow_token(token: str | None) -> dict[str, Any] | None:
    """Decodifica o token; None para qualquer formato inválido."""
    if not token or not isinstance(token, str):
        return None
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
        payload = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def phone_from_flow_token(token: str | None) -> str:
    """Telefone do token, ou "unknown" se ausente/ilegível."""
    payload = decode_flow_token(token)
    if payload is None:
        logger.info("flow_token_undecodable")
        return UNKNOWN_PHONE
    phone = payload.get("phone")
    if not isinstance(phone, str) or not phone:
        return UNKNOWN_PHONE
    return phone
