"""Mascaramento de PII para campos de log.

Telefones nunca aparecem inteiros nos logs: apenas os 4 últimos dígitos.
"""

from __future__ import annotations

VISIBLE_PHONE_DIGITS = 4


def mask_phone(phone: str | None) -> str:
    """Mascara telefone mantendo só os últimos dígitos.

    Exemplo:
        mask_phone("+911234567890") -> "***7890"
    """
    if not phone:
        return ""
    digits = "".join(ch for ch in phone if ch.isdigit())
    if len(digits) <= VISIBLE_PHONE_DIGITS:
        return "***"
    return f"***{digits[-VISIBLE_PHONE_DIGITS:]}"
