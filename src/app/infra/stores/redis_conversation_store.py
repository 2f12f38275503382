"""Redis Conversation Store — estado de conversa e log de mensagens.

Chaves:
    conversation:{phone}      -> JSON do ConversationState
    conversation_log:{phone}  -> lista (RPUSH/LTRIM) de MessageLogEntry JSON

update() é read-modify-write sem lock: escritas concorrentes no mesmo
telefone resolvem por last-write-wins. A conclusão é protegida pelo
marcador _completeSent no contexto, não pelo store.

Falhas de Redis sobem como RedisConnectionError.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from redis.exceptions import RedisError

from app.domain.conversation import ConversationContext, ConversationState
from app.protocols.conversation_store import (
    ConversationStoreError,
    ConversationStoreProtocol,
    MessageLogEntry,
)
from config.logging import mask_phone
from fsm import parse_language
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "conversation"


class RedisConversationStore(ConversationStoreProtocol):
    """ConversationStore usando redis.asyncio.

    Args:
        redis_client: Cliente Redis assíncrono
        key_prefix: Namespace das chaves
        max_log_entries: Entradas mantidas no log por telefone
    """

    def __init__(
        self,
        redis_client: AsyncRedis,
        *,
        key_prefix: str = DEFAULT_PREFIX,
        max_log_entries: int = 500,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix
        self._max_log_entries = max_log_entries

    def _state_key(self, phone: str) -> str:
        return f"{self._prefix}:{phone}"

    def _log_key(self, phone: str) -> str:
        return f"{self._prefix}_log:{phone}"

    # ──────────────────────────────────────────────────────────────
    # Estado
    # ──────────────────────────────────────────────────────────────

    async def get(self, phone: str) -> ConversationState | None:
        try:
            data = await self._redis.get(self._state_key(phone))
        except RedisError as exc:
            raise RedisConnectionError("Falha ao ler conversa no Redis") from exc
        if data is None:
            return None
        try:
            return ConversationState.from_dict(json.loads(data))
        except (json.JSONDecodeError, KeyError, ValueError) as exc:
            logger.warning(
                "conversation_load_error",
                extra={"phone": mask_phone(phone), "error": str(exc)},
            )
            raise ConversationStoreError(f"Corrupted conversation state: {exc}") from exc

    async def create(self, state: ConversationState) -> ConversationState:
        await self._write_state(state)
        logger.debug(
            "conversation_created",
            extra={"phone": mask_phone(state.customer_phone), "step": state.current_step},
        )
        return state

    async def update(
        self,
        phone: str,
        *,
        current_step: str | None = None,
        language: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> ConversationState | None:
        state = await self.get(phone)
        if state is None:
            return None
        if current_step is not None:
            state.current_step = current_step
        if language is not None:
            state.language = parse_language(language)
        if context is not None:
            state.context = ConversationContext.from_dict(context)
        state.last_message_at = datetime.now(UTC)
        await self._write_state(state)
        return state

    async def delete(self, phone: str) -> bool:
        try:
            return bool(await self._redis.delete(self._state_key(phone)))
        except RedisError as exc:
            raise RedisConnectionError("Falha ao remover conversa no Redis") from exc

    async def _write_state(self, state: ConversationState) -> None:
        try:
            await self._redis.set(self._state_key(state.customer_phone), json.dumps(state.to_dict()))
        except RedisError as exc:
            raise RedisConnectionError("Falha ao gravar conversa no Redis") from exc

    # ──────────────────────────────────────────────────────────────
    # Log de mensagens
    # ──────────────────────────────────────────────────────────────

    async def log_message(self, entry: MessageLogEntry) -> None:
        key = self._log_key(entry.customer_phone)
        try:
            await self._redis.rpush(key, json.dumps(entry.to_dict(), ensure_ascii=False))
            await self._redis.ltrim(key, -self._max_log_entries, -1)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao gravar log de mensagem no Redis") from exc

    async def get_messages(self, phone: str, *, limit: int = 50) -> Sequence[MessageLogEntry]:
        try:
            raw_entries = await self._redis.lrange(self._log_key(phone), -limit, -1)
        except RedisError as exc:
            raise RedisConnectionError("Falha ao ler log de mensagens no Redis") from exc
        entries: list[MessageLogEntry] = []
        for raw in raw_entries:
            try:
                entries.append(MessageLogEntry.from_dict(json.loads(raw)))
            except (json.JSONDecodeError, KeyError) as exc:
                logger.warning(
                    "conversation_log_entry_skipped",
                    extra={"phone": mask_phone(phone), "error": str(exc)},
                )
        return entries
