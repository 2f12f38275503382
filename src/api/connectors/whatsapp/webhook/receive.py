"""Leitura de uma entrega POST da Meta: tamanho, assinatura e JSON.

Nada do corpo vai para os logs; os erros carregam só um `reason` curto
que a rota registra e converte em status HTTP.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..signature import SignatureResult, verify_meta_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

# Entregas da Meta trazem no máximo algumas mensagens por POST
MAX_WEBHOOK_BODY_BYTES = 1024 * 1024


class WebhookRequestError(ValueError):
    """Entrega recusada antes de chegar ao motor de conversa."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PayloadTooLargeError(WebhookRequestError):
    pass


class InvalidSignatureError(WebhookRequestError):
    pass


class InvalidJsonError(WebhookRequestError):
    pass


@dataclass(frozen=True, slots=True)
class WebhookDelivery:
    """Entrega aceita: payload já decodificado e resultado da assinatura."""

    payload: dict[str, Any]
    signature: SignatureResult
    size: int

    def to_log_dict(self) -> dict[str, Any]:
        entries = self.payload.get("entry")
        return {
            "signature_valid": self.signature.valid,
            "signature_skipped": self.signature.skipped,
            "payload_size": self.size,
            "entry_count": len(entries) if isinstance(entries, list) else 0,
        }


def read_webhook_delivery(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
    *,
    max_body_bytes: int = MAX_WEBHOOK_BODY_BYTES,
) -> WebhookDelivery:
    """Valida e decodifica o corpo de um POST do webhook.

    O tamanho é checado antes do HMAC; corpo vazio vale como objeto vazio.

    Raises:
        PayloadTooLargeError: payload_too_large
        InvalidSignatureError: missing_signature, signature_mismatch...
        InvalidJsonError: invalid_json ou payload_not_object
    """
    if len(raw_body) > max_body_bytes:
        raise PayloadTooLargeError("payload_too_large")

    signature = verify_meta_signature(raw_body, headers, secret)
    if not signature.valid:
        raise InvalidSignatureError(signature.error or "invalid_signature")

    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return WebhookDelivery(payload=payload, signature=signature, size=len(raw_body))
