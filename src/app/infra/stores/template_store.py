"""Template Store em memória, semeado a partir do catálogo YAML.

Formato do catálogo (config/templates/campaign.yaml):

    templates:
      - name: SP_CAMPAIGN_ENTRY_EN_V1
        flow_type: campaign
        language: en
        step_key: campaign_entry
        message_type: button
        body_text: "..."
        buttons:
          - {id: hindi, title: "हिन्दी", next_step: main_menu}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from app.domain.templates import MessageTemplate

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class TemplateCatalogError(Exception):
    """Catálogo de templates inválido (YAML, campos ou chave duplicada)."""


def load_template_catalog(path: str | Path) -> list[MessageTemplate]:
    """Lê o catálogo YAML e converte em MessageTemplate.

    Raises:
        TemplateCatalogError: Se o arquivo não existir ou for inválido.
    """
    catalog_path = Path(path)
    try:
        raw: Any = yaml.safe_load(catalog_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise TemplateCatalogError(f"Falha ao ler catálogo {catalog_path}: {exc}") from exc

    entries = raw.get("templates") if isinstance(raw, dict) else None
    if not isinstance(entries, list):
        raise TemplateCatalogError(f"Catálogo sem lista 'templates': {catalog_path}")

    templates: list[MessageTemplate] = []
    for index, entry in enumerate(entries):
        try:
            templates.append(MessageTemplate.from_dict(entry))
        except (KeyError, TypeError, ValueError) as exc:
            raise TemplateCatalogError(f"Template #{index} inválido: {exc}") from exc
    return templates


class MemoryTemplateStore:
    """TemplateStore em memória com unicidade por (flow_type, language, step_key)."""

    def __init__(self, templates: Iterable[MessageTemplate] = ()) -> None:
        self._templates: dict[tuple[str, str, str], MessageTemplate] = {}
        for template in templates:
            self.add(template)

    @classmethod
    def from_catalog(cls, path: str | Path) -> MemoryTemplateStore:
        store = cls(load_template_catalog(path))
        logger.info("template_catalog_loaded", extra={"template_count": len(store)})
        return store

    def __len__(self) -> int:
        return len(self._templates)

    def add(self, template: MessageTemplate) -> None:
        """Cadastra template.

        Raises:
            TemplateCatalogError: Se a chave já estiver cadastrada.
        """
        if template.key in self._templates:
            raise TemplateCatalogError(f"Template duplicado: {'/'.join(template.key)}")
        self._templates[template.key] = template

    async def query(
        self,
        flow_type: str | None = None,
        language: str | None = None,
        step_key: str | None = None,
    ) -> list[MessageTemplate]:
        return [
            template
            for template in self._templates.values()
            if (flow_type is None or template.flow_type == flow_type)
            and (language is None or template.language == language)
            and (step_key is None or template.step_key == step_key)
        ]
