"""Factories de stores baseadas em configuração de ambiente."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client
from app.infra.stores import (
    MemoryConversationStore,
    MemoryRecordStore,
    MemoryTemplateStore,
    RedisConversationStore,
)
from config.settings import get_base_settings, get_conversation_settings

if TYPE_CHECKING:
    from app.protocols.conversation_store import ConversationStoreProtocol
    from config.settings import ConversationSettings

logger = logging.getLogger(__name__)


def create_conversation_store(
    settings: ConversationSettings | None = None,
) -> ConversationStoreProtocol:
    """Cria store de conversa baseado na configuração.

    Lê CONVERSATION_STORE_BACKEND:
    - "memory": MemoryConversationStore (dev only)
    - "redis": RedisConversationStore (staging/production)
    """
    conversation = settings or get_conversation_settings()

    if conversation.store_backend == "redis":
        store: ConversationStoreProtocol = RedisConversationStore(
            create_async_redis_client(),
            key_prefix=conversation.redis_key_prefix,
            max_log_entries=conversation.message_log_max_entries,
        )
        logger.info("conversation_store_created", extra={"backend": "redis"})
        return store

    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    store = MemoryConversationStore(max_log_entries=conversation.message_log_max_entries)
    logger.info("conversation_store_created", extra={"backend": "memory"})
    return store


def create_template_store(settings: ConversationSettings | None = None) -> MemoryTemplateStore:
    """Cria TemplateStore semeado do catálogo YAML."""
    conversation = settings or get_conversation_settings()
    store = MemoryTemplateStore.from_catalog(conversation.template_catalog_path)
    logger.info(
        "template_store_created",
        extra={"template_count": len(store), "catalog": conversation.template_catalog_path},
    )
    return store


def create_record_store() -> MemoryRecordStore:
    """Cria RecordStore (apenas memória; persistência relacional é externa)."""
    logger.info("record_store_created", extra={"backend": "memory"})
    return MemoryRecordStore()
