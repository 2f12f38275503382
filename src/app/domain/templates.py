"""MessageTemplate — mensagem servida em cada step da conversa.

Único por (flow_type, language, step_key). O template é a fonte de
verdade de quais botões/itens são válidos no step e para onde cada
escolha leva (next_step).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.constants.whatsapp import MessageType
from fsm import InputKind, StepOption


@dataclass(frozen=True, slots=True)
class TemplateButton:
    id: str
    title: str
    next_step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "nextStep": self.next_step}


@dataclass(frozen=True, slots=True)
class ListRow:
    id: str
    title: str
    description: str | None = None
    next_step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "nextStep": self.next_step,
        }


@dataclass(frozen=True, slots=True)
class ListSection:
    title: str
    rows: tuple[ListRow, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "rows": [row.to_dict() for row in self.rows]}


@dataclass(frozen=True, slots=True)
class MessageTemplate:
    """Template de mensagem de um step.

    Attributes:
        flow_type: Tipo de fluxo ("campaign")
        language: Idioma do template ("en" | "hi")
        step_key: Step servido pelo template
        message_type: text, button ou list
        body_text: Corpo da mensagem
        buttons: Botões (message_type=button)
        list_sections: Seções com linhas (message_type=list)
        list_button_text: Texto do botão que abre a lista
        name: Nome do template no catálogo (ex: SP_MAIN_EN_V2)
    """

    flow_type: str
    language: str
    step_key: str
    message_type: MessageType
    body_text: str
    header_text: str | None = None
    footer_text: str | None = None
    buttons: tuple[TemplateButton, ...] = ()
    list_sections: tuple[ListSection, ...] = ()
    list_button_text: str | None = None
    name: str | None = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.flow_type, self.language, self.step_key)

    def options(self) -> list[StepOption]:
        """Opções selecionáveis do template (botões ou linhas da lista)."""
        if self.message_type is MessageType.BUTTON:
            return [StepOption(b.id, b.title, b.next_step) for b in self.buttons]
        if self.message_type is MessageType.LIST:
            return [
                StepOption(row.id, row.title, row.next_step)
                for section in self.list_sections
                for row in section.rows
            ]
        return []

    def options_for(self, kind: InputKind) -> list[StepOption]:
        """Opções que aceitam a entrada: botões só para BUTTON, linhas só para LIST."""
        if kind is InputKind.BUTTON and self.message_type is not MessageType.BUTTON:
            return []
        if kind is InputKind.LIST and self.message_type is not MessageType.LIST:
            return []
        return self.options()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "flowType": self.flow_type,
            "language": self.language,
            "stepKey": self.step_key,
            "messageType": str(self.message_type),
            "bodyText": self.body_text,
            "headerText": self.header_text,
            "footerText": self.footer_text,
            "buttons": [button.to_dict() for button in self.buttons],
            "listSections": [section.to_dict() for section in self.list_sections],
            "listButtonText": self.list_button_text,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageTemplate:
        """Cria a partir da forma do catálogo YAML (snake_case).

        Raises:
            ValueError: Se campos obrigatórios faltarem ou o tipo for inválido.
        """
        for required in ("flow_type", "language", "step_key", "message_type", "body_text"):
            if not data.get(required):
                raise ValueError(f"Template sem campo obrigatório: {required}")

        buttons = tuple(
            TemplateButton(
                id=str(item["id"]),
                title=str(item["title"]),
                next_step=item.get("next_step"),
            )
            for item in data.get("buttons") or []
        )
        sections = tuple(
            ListSection(
                title=str(section.get("title", "")),
                rows=tuple(
                    ListRow(
                        id=str(row["id"]),
                        title=str(row["title"]),
                        description=row.get("description"),
                        next_step=row.get("next_step"),
                    )
                    for row in section.get("rows") or []
                ),
            )
            for section in data.get("list_sections") or []
        )
        return cls(
            flow_type=str(data["flow_type"]),
            language=str(data["language"]),
            step_key=str(data["step_key"]),
            message_type=MessageType(data["message_type"]),
            body_text=str(data["body_text"]),
            header_text=data.get("header_text"),
            footer_text=data.get("footer_text"),
            buttons=buttons,
            list_sections=sections,
            list_button_text=data.get("list_button_text"),
            name=data.get("name"),
        )
