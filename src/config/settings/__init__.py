"""Agregador de settings do Sunshine Leads.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    DEFAULT_TEMPLATE_CATALOG_PATH,
    BaseSettings,
    ConversationSettings,
    ConversationStoreBackend,
    Environment,
    get_base_settings,
    get_conversation_settings,
)
from config.settings.whatsapp import (
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    "DEFAULT_TEMPLATE_CATALOG_PATH",
    "GRAPH_API_BASE_URL",
    "GRAPH_API_VERSION",
    "BaseSettings",
    "ConversationSettings",
    "ConversationStoreBackend",
    "Environment",
    "WhatsAppSettings",
    "get_base_settings",
    "get_conversation_settings",
    "get_whatsapp_settings",
]
