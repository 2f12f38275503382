"""API de chat — mesma máquina de estados do webhook, sem envio.

Endpoints:
- POST /api/conversations/messages: processa uma mensagem e devolve a decisão
- POST /api/conversations/start: descarta o estado e serve o template de entrada
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from app.bootstrap import get_conversation_engine
from app.protocols.models import IncomingMessage
from fsm import InputKind

router = APIRouter()


class IncomingMessageBody(BaseModel):
    """Corpo de POST /api/conversations/messages (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    customer_phone: str = Field(alias="customerPhone", min_length=1)
    message_type: InputKind = Field(alias="messageType")
    content: str = ""
    customer_name: str | None = Field(default=None, alias="customerName")
    selected_button_id: str | None = Field(default=None, alias="selectedButtonId")
    selected_list_item_id: str | None = Field(default=None, alias="selectedListItemId")

    def to_incoming(self) -> IncomingMessage:
        return IncomingMessage(
            customer_phone=self.customer_phone,
            message_type=self.message_type,
            content=self.content,
            customer_name=self.customer_name,
            selected_button_id=self.selected_button_id,
            selected_list_item_id=self.selected_list_item_id,
        )


class StartConversationBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_phone: str = Field(alias="customerPhone", min_length=1)
    customer_name: str | None = Field(default=None, alias="customerName")


@router.post("/messages")
async def handle_message(body: IncomingMessageBody) -> dict[str, Any]:
    decision = await get_conversation_engine().handle_incoming_message(body.to_incoming())
    return decision.to_dict()


@router.post("/start")
async def start_conversation(body: StartConversationBody) -> dict[str, Any]:
    decision = await get_conversation_engine().start_new_conversation(
        body.customer_phone,
        customer_name=body.customer_name,
    )
    return decision.to_dict()
