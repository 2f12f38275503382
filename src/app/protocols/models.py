"""Modelos de entrada/saída do motor de conversa e do gateway."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fsm import InputKind, TransitionInput

if TYPE_CHECKING:
    from app.domain.templates import MessageTemplate


@dataclass(frozen=True, slots=True)
class IncomingMessage:
    """Mensagem do cliente já normalizada (webhook ou API de chat).

    Attributes:
        customer_phone: Telefone do cliente
        message_type: text, button ou list
        content: Texto digitado ou título da opção
        customer_name: Nome do perfil WhatsApp (opcional)
        selected_button_id: ID do botão (message_type=button)
        selected_list_item_id: ID do item (message_type=list)
    """

    customer_phone: str
    message_type: InputKind
    content: str = ""
    customer_name: str | None = None
    selected_button_id: str | None = None
    selected_list_item_id: str | None = None

    @property
    def option_id(self) -> str | None:
        if self.message_type is InputKind.BUTTON:
            return self.selected_button_id
        if self.message_type is InputKind.LIST:
            return self.selected_list_item_id
        return None

    def to_transition_input(self) -> TransitionInput:
        return TransitionInput(kind=self.message_type, content=self.content, option_id=self.option_id)

    def fingerprint(self) -> dict[str, str]:
        """Identidade da entrada, usada para reconhecer reentregas."""
        return {
            "kind": str(self.message_type),
            "content": self.content,
            "optionId": self.option_id or "",
        }

    def log_content(self) -> dict[str, Any]:
        return {
            "text": self.content,
            "buttonId": self.selected_button_id,
            "listItemId": self.selected_list_item_id,
        }


@dataclass(frozen=True, slots=True)
class OutgoingMessage:
    """Decisão do motor para uma mensagem recebida.

    Attributes:
        template: Template a enviar (None quando nada deve ser enviado)
        should_send: Se o chamador deve enviar o template
        error: Mensagem de erro (caminho suave, sem exceção)
        is_flow: A entrada disparou um Flow criptografado
        flow_sent: O Flow foi enviado com sucesso
        restart_reason: Motivo do restart, quando houve
    """

    template: MessageTemplate | None = None
    should_send: bool = False
    error: str | None = None
    is_flow: bool = False
    flow_sent: bool = False
    restart_reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "template": self.template.to_dict() if self.template else None,
            "shouldSend": self.should_send,
        }
        if self.error:
            data["error"] = self.error
        if self.is_flow:
            data["isFlow"] = True
            data["flowSent"] = self.flow_sent
        if self.restart_reason:
            data["restartReason"] = self.restart_reason
        return data


@dataclass(frozen=True, slots=True)
class SendResult:
    """Resultado de envio pelo gateway."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class OutboundMessageRequest:
    """Requisição de envio já resolvida, independente do formato Meta.

    interactive_type define o builder: None para texto simples,
    "button", "list" ou "flow" para mensagens interativas.
    """

    to: str
    body_text: str
    interactive_type: str | None = None
    header_text: str | None = None
    footer_text: str | None = None
    buttons: tuple[tuple[str, str], ...] = ()
    list_sections: tuple[dict[str, Any], ...] = ()
    list_button_text: str | None = None
    flow_id: str | None = None
    flow_token: str | None = None
    flow_cta: str | None = None
    flow_action_payload: dict[str, Any] | None = None
