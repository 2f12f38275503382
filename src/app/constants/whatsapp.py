"""Enums e tabelas de domínio para mensagens e Flows WhatsApp."""

from __future__ import annotations

from enum import StrEnum


class MessageType(StrEnum):
    """Tipos de mensagem de template servidos pelo motor de conversa."""

    TEXT = "text"
    BUTTON = "button"
    LIST = "list"


class InteractiveType(StrEnum):
    """Tipos de mensagens interativas enviadas à Graph API."""

    BUTTON = "button"
    LIST = "list"
    FLOW = "flow"


class FlowKind(StrEnum):
    """Tipos de Flow criptografado que o menu pode disparar."""

    SURVEY = "survey"
    CALLBACK = "callback"
    TRUST = "trust"
    ELIGIBILITY = "eligibility"
    PRICE = "price"
    SERVICE = "service"


# IDs de botão/item de lista que disparam um Flow antes de qualquer transição
FLOW_TRIGGER_IDS: dict[str, FlowKind] = {
    "book_survey": FlowKind.SURVEY,
    "site_survey": FlowKind.SURVEY,
    "survey": FlowKind.SURVEY,
    "request_callback": FlowKind.CALLBACK,
    "callback": FlowKind.CALLBACK,
    "why_trust": FlowKind.TRUST,
    "why_sunshine": FlowKind.TRUST,
    "trust": FlowKind.TRUST,
    "check_eligibility": FlowKind.ELIGIBILITY,
    "eligibility": FlowKind.ELIGIBILITY,
    "price_estimate": FlowKind.PRICE,
    "price": FlowKind.PRICE,
    "service_request": FlowKind.SERVICE,
    "service": FlowKind.SERVICE,
}


def flow_kind_for_trigger(option_id: str | None) -> FlowKind | None:
    """Retorna o FlowKind disparado pelo ID, ou None."""
    if not option_id:
        return None
    return FLOW_TRIGGER_IDS.get(option_id)


def missing_trigger_kinds() -> list[FlowKind]:
    """FlowKinds sem nenhum ID de disparo (checado no bootstrap)."""
    covered = set(FLOW_TRIGGER_IDS.values())
    return [kind for kind in FlowKind if kind not in covered]
