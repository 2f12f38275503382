"""Protocolos de normalização inbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .models import IncomingMessage


class MessageNormalizerProtocol(Protocol):
    """Converte o payload bruto do webhook em mensagens do cliente."""

    def normalize(self, payload: dict[str, Any]) -> list[IncomingMessage]: ...
