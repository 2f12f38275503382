"""Erros e helpers de parsing para API Meta/WhatsApp."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Limites de taxa/throughput da Cloud API: transitórios mesmo em HTTP 400
TRANSIENT_META_CODES = frozenset({4, 80007, 130429, 131000, 131016, 131056})

PERMANENT_HTTP_CODES = frozenset({400, 401, 403, 404, 413})
PERMANENT_ERROR_TYPES = frozenset({"OAuthException", "InvalidRequest"})


@dataclass(frozen=True)
class WhatsAppApiError:
    """Erro retornado pela API Meta/WhatsApp."""

    error_type: str
    error_code: int
    error_message: str
    is_permanent: bool
    error_subcode: int | None = None
    fbtrace_id: str | None = None


def is_permanent_error(error_code: int, error_type: str) -> bool:
    """Classifica erro como permanente ou transitório.

    Códigos de rate limit da Meta são sempre transitórios; demais erros
    OAuth/requisição inválida são permanentes.
    """
    if error_code in TRANSIENT_META_CODES:
        return False
    if error_code in PERMANENT_HTTP_CODES:
        return True
    return error_type in PERMANENT_ERROR_TYPES


def parse_meta_error(response_data: Any) -> WhatsAppApiError | None:
    """Extrai o objeto `error` do response da Meta (None se sucesso)."""
    if not isinstance(response_data, dict):
        return None
    error_obj = response_data.get("error")
    if not error_obj or not isinstance(error_obj, dict):
        return None

    error_type = str(error_obj.get("type", "unknown"))
    try:
        error_code = int(error_obj.get("code", 0))
    except (TypeError, ValueError):
        error_code = 0

    return WhatsAppApiError(
        error_type=error_type,
        error_code=error_code,
        error_message=str(error_obj.get("message", "Unknown error")),
        is_permanent=is_permanent_error(error_code, error_type),
        error_subcode=error_obj.get("error_subcode"),
        fbtrace_id=error_obj.get("fbtrace_id"),
    )
