"""Validação do header X-Hub-Signature-256 enviado pela Meta."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.infra.crypto import validate_flow_signature

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da validação.

    skipped=True quando não há app secret configurado (desenvolvimento).
    """

    valid: bool
    skipped: bool = False
    error: str | None = None


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Valida HMAC-SHA256 do corpo bruto contra o app secret."""
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    signature = headers.get(SIGNATURE_HEADER) or headers.get("X-Hub-Signature-256")
    if not signature:
        return SignatureResult(valid=False, error="missing_signature")

    if not validate_flow_signature(raw_body, signature, secret.encode("utf-8")):
        return SignatureResult(valid=False, error="signature_mismatch")

    return SignatureResult(valid=True)
