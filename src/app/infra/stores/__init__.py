"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: ConversationStore e RecordStore em memória
    - redis_conversation_store: ConversationStore usando redis.asyncio
    - template_store: TemplateStore semeado do catálogo YAML
"""

from __future__ import annotations

from app.infra.stores.memory_stores import MemoryConversationStore, MemoryRecordStore
from app.infra.stores.redis_conversation_store import RedisConversationStore
from app.infra.stores.template_store import (
    MemoryTemplateStore,
    TemplateCatalogError,
    load_template_catalog,
)

__all__ = [
    "MemoryConversationStore",
    "MemoryRecordStore",
    "MemoryTemplateStore",
    "RedisConversationStore",
    "TemplateCatalogError",
    "load_template_catalog",
]
