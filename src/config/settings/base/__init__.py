"""Agregador de settings base."""

from __future__ import annotations

from config.settings.base.conversation import (
    DEFAULT_TEMPLATE_CATALOG_PATH,
    ConversationSettings,
    ConversationStoreBackend,
    get_conversation_settings,
)
from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)

__all__ = [
    "DEFAULT_TEMPLATE_CATALOG_PATH",
    "BaseSettings",
    "ConversationSettings",
    "ConversationStoreBackend",
    "Environment",
    "get_base_settings",
    "get_conversation_settings",
]
