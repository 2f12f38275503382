"""Filters de logging para injeção de contexto e mascaramento.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: sunshine_leads)

Campos mascarados: telefones passados via `extra` (PHONE_FIELDS).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.pii import mask_phone

if TYPE_CHECKING:
    from collections.abc import Callable

# Atributos de `extra` que carregam telefone de cliente
PHONE_FIELDS: tuple[str, ...] = ("phone", "customer_phone", "from_number", "to")


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record (nunca descarta).

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class PhoneMaskingFilter(logging.Filter):
    """Mascara telefones passados em `extra` antes da formatação."""

    def __init__(self, fields: tuple[str, ...] = PHONE_FIELDS) -> None:
        super().__init__()
        self._fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for field_name in self._fields:
            value = getattr(record, field_name, None)
            if isinstance(value, str) and value and not value.startswith("***"):
                setattr(record, field_name, mask_phone(value))
        return True
