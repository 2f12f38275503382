"""
Tipos e estruturas de dados para transições de passo.

A função de transição é pura: recebe o passo atual, a entrada do
cliente e as opções do template, e devolve `Advance` ou `Restart`.
Restart é um valor (com motivo explícito), não uma exceção.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from fsm.states.steps import Language


class InputKind(StrEnum):
    """Tipo de entrada recebida do cliente."""

    TEXT = "text"
    BUTTON = "button"
    LIST = "list"


class RestartReason(StrEnum):
    """Motivos pelos quais a conversa volta ao passo inicial."""

    UNKNOWN_BUTTON = "unknown_button"
    UNKNOWN_LIST_ITEM = "unknown_list_item"
    UNEXPECTED_TEXT = "unexpected_text"
    INVALID_LANGUAGE_CHOICE = "invalid_language_choice"
    MISSING_TEMPLATE = "missing_template"
    CONVERSATION_COMPLETED = "conversation_completed"
    CORRUPTED_STATE = "corrupted_state"


@dataclass(frozen=True, slots=True)
class TransitionInput:
    """
    Entrada normalizada para a função de transição.

    Attributes:
        kind: text, button ou list
        content: Texto livre (ou título do botão, quando vier do webhook)
        option_id: ID do botão/item selecionado (None para texto)
    """

    kind: InputKind
    content: str = ""
    option_id: str | None = None


@dataclass(frozen=True, slots=True)
class StepOption:
    """Opção (botão ou linha de lista) declarada no template do passo."""

    id: str
    title: str
    next_step: str | None = None


@dataclass(frozen=True, slots=True)
class Advance:
    """
    Entrada aceita: a conversa avança (ou permanece) no passo indicado.

    Attributes:
        next_step: Passo resultante
        language: Novo idioma, quando a entrada o define (None = inalterado)
        option: Opção selecionada, quando a entrada foi botão/lista
    """

    next_step: str
    language: Language | None = None
    option: StepOption | None = None

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "outcome": "advance",
            "next_step": self.next_step,
            "language": self.language.value if self.language else None,
        }


@dataclass(frozen=True, slots=True)
class Restart:
    """Entrada não reconhecida: descartar estado e voltar ao início."""

    reason: RestartReason
    detail: str = ""

    def to_log_dict(self) -> dict[str, Any]:
        return {
            "outcome": "restart",
            "reason": self.reason.value,
            "detail": self.detail,
        }


TransitionOutcome = Advance | Restart
