"""ConversationState — estado da conversa por telefone.

Um estado vivo por telefone (chave única). O contexto guarda, por step
visitado, a resposta do cliente:

    {
        "survey_name": {"text": "Ravi"},
        "main_menu": {"itemId": "help", "itemTitle": "Help"},
        "campaign_entry": {"buttonId": "hindi", "buttonTitle": "हिन्दी"},
        "_completeSent": true,
        "_completedFrom": {"kind": "text", "content": "10 AM", "optionId": ""}
    }

O formato serializado é o mapa aberto acima, para que linhas já
persistidas continuem legíveis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm import CAMPAIGN_FLOW_TYPE, INITIAL_STEP, Language, parse_language

COMPLETE_SENT_KEY = "_completeSent"
COMPLETED_FROM_KEY = "_completedFrom"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class ButtonAnswer:
    button_id: str
    button_title: str | None = None

    @property
    def value(self) -> str:
        return self.button_title or self.button_id

    def to_dict(self) -> dict[str, Any]:
        return {"buttonId": self.button_id, "buttonTitle": self.button_title}


@dataclass(frozen=True, slots=True)
class ListAnswer:
    item_id: str
    item_title: str | None = None

    @property
    def value(self) -> str:
        return self.item_title or self.item_id

    def to_dict(self) -> dict[str, Any]:
        return {"itemId": self.item_id, "itemTitle": self.item_title}


@dataclass(frozen=True, slots=True)
class TextAnswer:
    text: str

    @property
    def value(self) -> str:
        return self.text

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


StepAnswer = ButtonAnswer | ListAnswer | TextAnswer


def answer_from_dict(data: Any) -> StepAnswer | None:
    """Converte a forma serializada de uma resposta (None se irreconhecível)."""
    if not isinstance(data, dict):
        return None
    if "buttonId" in data:
        return ButtonAnswer(str(data["buttonId"]), data.get("buttonTitle"))
    if "itemId" in data:
        return ListAnswer(str(data["itemId"]), data.get("itemTitle"))
    if "text" in data:
        return TextAnswer(str(data["text"]))
    return None


@dataclass
class ConversationContext:
    """Respostas por step + marcadores de conclusão."""

    answers: dict[str, StepAnswer] = field(default_factory=dict)
    complete_sent: bool = False
    completed_from: dict[str, str] | None = None

    def record(self, step: str, answer: StepAnswer) -> None:
        self.answers[str(step)] = answer

    def answer_for(self, step: str) -> StepAnswer | None:
        return self.answers.get(str(step))

    def value_for(self, step: str) -> str | None:
        """Texto digitado ou título da opção escolhida no step."""
        answer = self.answer_for(step)
        return answer.value if answer is not None else None

    def mark_complete(self, fingerprint: dict[str, str]) -> None:
        self.complete_sent = True
        self.completed_from = dict(fingerprint)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {step: answer.to_dict() for step, answer in self.answers.items()}
        if self.complete_sent:
            data[COMPLETE_SENT_KEY] = True
        if self.completed_from is not None:
            data[COMPLETED_FROM_KEY] = dict(self.completed_from)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ConversationContext:
        data = data or {}
        answers: dict[str, StepAnswer] = {}
        for key, raw in data.items():
            if key.startswith("_"):
                continue
            answer = answer_from_dict(raw)
            if answer is not None:
                answers[key] = answer
        completed_from = data.get(COMPLETED_FROM_KEY)
        return cls(
            answers=answers,
            complete_sent=bool(data.get(COMPLETE_SENT_KEY, False)),
            completed_from=dict(completed_from) if isinstance(completed_from, dict) else None,
        )


@dataclass
class ConversationState:
    """Estado da conversa de um cliente.

    Attributes:
        customer_phone: Telefone do cliente (chave única)
        customer_name: Nome do perfil WhatsApp, se conhecido
        flow_type: Sempre "campaign"
        current_step: Step atual da máquina de estados
        language: Idioma escolhido (None até a escolha em campaign_entry)
        context: Respostas acumuladas e marcadores de conclusão
    """

    customer_phone: str
    customer_name: str | None = None
    flow_type: str = CAMPAIGN_FLOW_TYPE
    current_step: str = str(INITIAL_STEP)
    language: Language | None = None
    context: ConversationContext = field(default_factory=ConversationContext)
    created_at: datetime = field(default_factory=_utcnow)
    last_message_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def fresh(cls, customer_phone: str, customer_name: str | None = None) -> ConversationState:
        """Estado novo em campaign_entry, idioma indefinido."""
        return cls(customer_phone=customer_phone, customer_name=customer_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_phone": self.customer_phone,
            "customer_name": self.customer_name,
            "flow_type": self.flow_type,
            "current_step": self.current_step,
            "language": str(self.language) if self.language else None,
            "context": self.context.to_dict(),
            "created_at": self.created_at.isoformat(),
            "last_message_at": self.last_message_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationState:
        created_at = data.get("created_at")
        last_message_at = data.get("last_message_at")
        return cls(
            customer_phone=data["customer_phone"],
            customer_name=data.get("customer_name"),
            flow_type=data.get("flow_type") or CAMPAIGN_FLOW_TYPE,
            current_step=data.get("current_step") or str(INITIAL_STEP),
            language=parse_language(data.get("language")),
            context=ConversationContext.from_dict(data.get("context")),
            created_at=datetime.fromisoformat(created_at) if created_at else _utcnow(),
            last_message_at=(
                datetime.fromisoformat(last_message_at) if last_message_at else _utcnow()
            ),
        )
