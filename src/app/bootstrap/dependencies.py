"""Factories de serviços — composição de stores, gateway e motor.

Referência: app/bootstrap é o composition root.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.services.completion_records import CompletionRecorder
from app.services.flow_data_exchange import create_flow_handlers
from app.use_cases.whatsapp import ConversationFlowEngine, ProcessInboundWebhookUseCase

if TYPE_CHECKING:
    from app.bootstrap.whatsapp_adapters import GraphApiNormalizer
    from app.constants.whatsapp import FlowKind
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.messaging import MessagingGatewayProtocol
    from app.protocols.record_store import RecordStoreProtocol
    from app.protocols.template_store import TemplateStoreProtocol
    from app.services.flow_data_exchange import FlowDataExchangeHandler
    from app.services.flow_launcher import FlowLauncher

logger = logging.getLogger(__name__)


def create_conversation_engine(
    *,
    conversation_store: ConversationStoreProtocol,
    template_store: TemplateStoreProtocol,
    record_store: RecordStoreProtocol,
    flow_launcher: FlowLauncher | None = None,
) -> ConversationFlowEngine:
    """Cria o motor de conversa com as dependências informadas."""
    engine = ConversationFlowEngine(
        conversation_store=conversation_store,
        template_store=template_store,
        completion_recorder=CompletionRecorder(record_store),
        flow_launcher=flow_launcher,
    )
    logger.info("conversation_engine_created", extra={"flows_enabled": flow_launcher is not None})
    return engine


def create_flow_data_handlers(
    record_store: RecordStoreProtocol,
) -> dict[FlowKind, FlowDataExchangeHandler]:
    """Cria um handler de data exchange por Flow com formulário."""
    return create_flow_handlers(record_store)


def create_inbound_use_case(
    *,
    normalizer: GraphApiNormalizer,
    engine: ConversationFlowEngine,
    gateway: MessagingGatewayProtocol,
) -> ProcessInboundWebhookUseCase:
    """Cria o pipeline webhook → motor → gateway."""
    return ProcessInboundWebhookUseCase(normalizer=normalizer, engine=engine, gateway=gateway)
