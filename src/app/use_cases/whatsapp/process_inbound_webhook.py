"""Use case para processamento inbound do webhook WhatsApp.

Normaliza o payload, passa cada mensagem pelo motor de conversa e
envia o template decidido pelo gateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from config.logging import mask_phone

if TYPE_CHECKING:
    from app.protocols.messaging import MessagingGatewayProtocol
    from app.protocols.models import IncomingMessage
    from app.protocols.normalizer import MessageNormalizerProtocol
    from app.use_cases.whatsapp.conversation_engine import ConversationFlowEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InboundProcessingResult:
    """Resultado do processamento inbound."""

    processed: int
    sent: int
    flows_sent: int
    failed: int

    def to_dict(self) -> dict[str, int]:
        return {
            "processed": self.processed,
            "sent": self.sent,
            "flows_sent": self.flows_sent,
            "failed": self.failed,
        }


class ProcessInboundWebhookUseCase:
    """Processa mensagens inbound do webhook."""

    def __init__(
        self,
        *,
        normalizer: MessageNormalizerProtocol,
        engine: ConversationFlowEngine,
        gateway: MessagingGatewayProtocol,
    ) -> None:
        self._normalizer = normalizer
        self._engine = engine
        self._gateway = gateway

    async def execute(self, payload: dict) -> InboundProcessingResult:
        messages = self._normalizer.normalize(payload)
        processed, sent, flows_sent, failed = 0, 0, 0, 0

        for msg in messages:
            processed += 1
            outcome = await self._process_single_message(msg)
            if outcome == "sent":
                sent += 1
            elif outcome == "flow":
                flows_sent += 1
            elif outcome == "failed":
                failed += 1

        return InboundProcessingResult(
            processed=processed,
            sent=sent,
            flows_sent=flows_sent,
            failed=failed,
        )

    async def _process_single_message(self, msg: IncomingMessage) -> str:
        decision = await self._engine.handle_incoming_message(msg)

        if decision.is_flow:
            return "flow" if decision.flow_sent else "failed"
        if decision.error:
            return "failed"
        if not decision.should_send or decision.template is None:
            return "skipped"

        result = await self._gateway.send_template(msg.customer_phone, decision.template)
        if not result.success:
            logger.warning(
                "inbound_reply_not_sent",
                extra={
                    "step": decision.template.step_key,
                    "error": result.error,
                    "phone": mask_phone(msg.customer_phone),
                },
            )
            return "failed"
        return "sent"
