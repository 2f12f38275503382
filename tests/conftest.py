"""Configuração do pytest para o projeto Sunshine Leads."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
root_path = Path(__file__).parent.parent
src_path = root_path / "src"
for path in (src_path, root_path):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from app.infra.stores import (  # noqa: E402
    MemoryConversationStore,
    MemoryRecordStore,
    MemoryTemplateStore,
)
from config.settings.base.conversation import DEFAULT_TEMPLATE_CATALOG_PATH  # noqa: E402


@pytest.fixture
def template_store() -> MemoryTemplateStore:
    """Catálogo real de templates (config/templates/campaign.yaml)."""
    return MemoryTemplateStore.from_catalog(DEFAULT_TEMPLATE_CATALOG_PATH)


@pytest.fixture
def conversation_store() -> MemoryConversationStore:
    return MemoryConversationStore()


@pytest.fixture
def record_store() -> MemoryRecordStore:
    return MemoryRecordStore()
