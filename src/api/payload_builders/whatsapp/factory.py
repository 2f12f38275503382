"""Factory para obter o builder correto por tipo de mensagem."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.payload_builders.whatsapp.base import (
    PayloadBuilder,
    build_base_payload,
)
from api.payload_builders.whatsapp.interactive import (
    ButtonPayloadBuilder,
    FlowPayloadBuilder,
    ListPayloadBuilder,
)
from api.payload_builders.whatsapp.text import (
    TextPayloadBuilder,
)
from app.constants.whatsapp import InteractiveType

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest

_TEXT_BUILDER = TextPayloadBuilder()

# Mapeamento de tipo interativo para builder
_INTERACTIVE_BUILDERS: dict[InteractiveType, PayloadBuilder] = {
    InteractiveType.BUTTON: ButtonPayloadBuilder(),
    InteractiveType.LIST: ListPayloadBuilder(),
    InteractiveType.FLOW: FlowPayloadBuilder(),
}


def get_payload_builder(interactive_type: str | None) -> PayloadBuilder | None:
    """Retorna o builder para o tipo interativo (None = texto).

    Returns:
        Builder apropriado ou None se não suportado
    """
    if interactive_type is None:
        return _TEXT_BUILDER
    try:
        return _INTERACTIVE_BUILDERS.get(InteractiveType(interactive_type))
    except ValueError:
        return None


def build_full_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Constrói payload completo para a API Meta.

    Raises:
        ValueError: Se tipo de mensagem não suportado ou incompleto
    """
    builder = get_payload_builder(request.interactive_type)
    if builder is None:
        raise ValueError(f"Unsupported interactive type: {request.interactive_type}")

    payload = build_base_payload(request)
    payload.update(builder.build(request))
    return payload
