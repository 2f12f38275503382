"""Protocolo de domínio para Conversation Store.

Estado da conversa por telefone (um vivo por vez) e log append-only de
mensagens inbound/outbound.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.conversation import ConversationState


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class MessageLogEntry:
    """Mensagem registrada no log da conversa.

    status: "received" para inbound, "pending" para outbound ainda não
    confirmado pela Graph API.
    """

    customer_phone: str
    direction: Literal["inbound", "outbound"]
    message_type: str
    content: dict[str, Any] = field(default_factory=dict)
    status: str = "received"
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_phone": self.customer_phone,
            "direction": self.direction,
            "message_type": self.message_type,
            "content": self.content,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageLogEntry:
        created_at = data.get("created_at")
        return cls(
            customer_phone=data["customer_phone"],
            direction=data["direction"],
            message_type=data.get("message_type", ""),
            content=data.get("content") or {},
            status=data.get("status", "received"),
            created_at=datetime.fromisoformat(created_at) if created_at else _utcnow(),
        )


class ConversationStoreProtocol(ABC):
    """Contrato para armazenamento do estado de conversa.

    Invariantes:
        - No máximo um estado vivo por telefone
        - update() sempre renova last_message_at
        - Last-write-wins em escritas concorrentes
    """

    @abstractmethod
    async def get(self, phone: str) -> ConversationState | None:
        """Retorna o estado do telefone, ou None."""

    @abstractmethod
    async def create(self, state: ConversationState) -> ConversationState:
        """Persiste um estado novo (substitui qualquer anterior do telefone)."""

    @abstractmethod
    async def update(
        self,
        phone: str,
        *,
        current_step: str | None = None,
        language: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> ConversationState | None:
        """Atualiza campos informados e renova last_message_at.

        Returns:
            Estado atualizado, ou None se não existir estado para o telefone.
        """

    @abstractmethod
    async def delete(self, phone: str) -> bool:
        """Remove o estado. Retorna True se existia."""

    @abstractmethod
    async def log_message(self, entry: MessageLogEntry) -> None:
        """Acrescenta mensagem ao log da conversa."""

    @abstractmethod
    async def get_messages(self, phone: str, *, limit: int = 50) -> Sequence[MessageLogEntry]:
        """Últimas mensagens do telefone (mais antigas primeiro)."""


class ConversationStoreError(Exception):
    """Erro de persistência em ConversationStore."""
