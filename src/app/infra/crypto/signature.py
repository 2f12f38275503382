"""Validação de assinatura HMAC-SHA256 para webhooks e Flows."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(payload: bytes, secret: bytes) -> str:
    """Calcula o header X-Hub-Signature-256 esperado para o payload."""
    digest = hmac.new(secret, payload, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def validate_flow_signature(payload: bytes, signature: str | None, secret: bytes) -> bool:
    """Valida assinatura HMAC-SHA256 da Meta.

    Args:
        payload: Corpo bruto da requisição
        signature: Header X-Hub-Signature-256
        secret: App secret em bytes

    Returns:
        True se assinatura válida
    """
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        return False
    return hmac.compare_digest(compute_signature(payload, secret), signature)
