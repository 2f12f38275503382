"""Settings de conversa e catálogo de templates.

Backend do ConversationStore e caminho do catálogo YAML de templates.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

ConversationStoreBackend = Literal["memory", "redis"]

# src/config/templates/campaign.yaml
DEFAULT_TEMPLATE_CATALOG_PATH = str(
    Path(__file__).resolve().parents[2] / "templates" / "campaign.yaml"
)


@dataclass(frozen=True)
class ConversationSettings:
    """Configurações de armazenamento de conversa.

    Attributes:
        store_backend: Backend do ConversationStore (memory|redis)
        redis_key_prefix: Prefixo das chaves de estado no Redis
        message_log_max_entries: Tamanho máximo do log de mensagens por telefone
        template_catalog_path: Caminho do YAML que semeia o TemplateStore
    """

    store_backend: ConversationStoreBackend = "memory"
    redis_key_prefix: str = "conversation"
    message_log_max_entries: int = 500
    template_catalog_path: str = DEFAULT_TEMPLATE_CATALOG_PATH

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de conversa.

        Args:
            base: BaseSettings para verificar ambiente e REDIS_URL.
        """
        errors: list[str] = []

        if self.store_backend not in {"memory", "redis"}:
            errors.append(f"CONVERSATION_STORE_BACKEND inválido: {self.store_backend}")

        if self.store_backend == "memory" and not base.is_development:
            errors.append("CONVERSATION_STORE_BACKEND=memory proibido em staging/production")

        if self.store_backend == "redis" and not base.redis_url:
            errors.append("REDIS_URL obrigatório quando CONVERSATION_STORE_BACKEND=redis")

        if self.message_log_max_entries < 1:
            errors.append("CONVERSATION_LOG_MAX_ENTRIES deve ser >= 1")

        if not Path(self.template_catalog_path).is_file():
            errors.append(f"TEMPLATE_CATALOG_PATH não encontrado: {self.template_catalog_path}")

        return errors


def _load_conversation_from_env() -> ConversationSettings:
    backend_str = os.getenv("CONVERSATION_STORE_BACKEND", "memory").lower()
    backend: ConversationStoreBackend = "redis" if backend_str == "redis" else "memory"
    return ConversationSettings(
        store_backend=backend,
        redis_key_prefix=os.getenv("CONVERSATION_REDIS_KEY_PREFIX", "conversation"),
        message_log_max_entries=int(os.getenv("CONVERSATION_LOG_MAX_ENTRIES", "500")),
        template_catalog_path=os.getenv(
            "TEMPLATE_CATALOG_PATH", DEFAULT_TEMPLATE_CATALOG_PATH
        ),
    )


@lru_cache(maxsize=1)
def get_conversation_settings() -> ConversationSettings:
    """Retorna instância cacheada de ConversationSettings."""
    return _load_conversation_from_env()
