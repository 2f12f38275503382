"""Protocolo do Template Store (somente leitura para o core)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.templates import MessageTemplate


class TemplateStoreProtocol(Protocol):
    """Consulta de templates por (flow_type, language, step_key).

    Filtro None casa com qualquer valor. Ordem do resultado é a ordem
    de cadastro.
    """

    async def query(
        self,
        flow_type: str | None = None,
        language: str | None = None,
        step_key: str | None = None,
    ) -> list[MessageTemplate]: ...
