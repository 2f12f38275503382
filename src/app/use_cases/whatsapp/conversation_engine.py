"""Motor de conversa da campanha (Conversation Flow Engine).

Para cada mensagem recebida:
    1. registra a mensagem inbound no log
    2. intercepta botões/itens que disparam Flow criptografado
    3. carrega (ou cria) o estado e aplica exatamente uma transição
    4. resolve o template do step resultante e o devolve para envio

Restart (descartar estado e servir o template de entrada) é o único
caminho de recuperação: entrada desconhecida, template ausente, estado
corrompido e mensagem após conclusão caem nele. Nenhuma exceção escapa de
handle_incoming_message; falhas voltam como should_send=False + error.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from app.constants.whatsapp import FlowKind, flow_kind_for_trigger
from app.domain.conversation import ButtonAnswer, ConversationState, ListAnswer, TextAnswer
from app.observability import get_correlation_id, record_latency, record_restart
from app.protocols.conversation_store import ConversationStoreError, MessageLogEntry
from app.protocols.models import OutgoingMessage
from config.logging import log_fallback, mask_phone
from fsm import (
    CAMPAIGN_FLOW_TYPE,
    DEFAULT_LANGUAGE,
    INITIAL_STEP,
    Advance,
    InputKind,
    Language,
    Restart,
    RestartReason,
    decide_transition,
    is_completion_step,
)

if TYPE_CHECKING:
    from app.domain.conversation import StepAnswer
    from app.domain.templates import MessageTemplate
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.models import IncomingMessage
    from app.protocols.template_store import TemplateStoreProtocol
    from app.services.completion_records import CompletionRecorder
    from app.services.flow_launcher import FlowLauncher

logger = logging.getLogger(__name__)

COMPONENT = "conversation_engine"
ENTRY_TEMPLATE_MISSING = "Entry template not found"


class ConversationFlowEngine:
    """Orquestra store de conversa, templates, Flows e registros de conclusão."""

    def __init__(
        self,
        *,
        conversation_store: ConversationStoreProtocol,
        template_store: TemplateStoreProtocol,
        completion_recorder: CompletionRecorder,
        flow_launcher: FlowLauncher | None = None,
    ) -> None:
        self._store = conversation_store
        self._templates = template_store
        self._recorder = completion_recorder
        self._flow_launcher = flow_launcher

    async def handle_incoming_message(self, msg: IncomingMessage) -> OutgoingMessage:
        """Decide a resposta para uma mensagem do cliente."""
        started = time.perf_counter()
        try:
            return await self._handle(msg)
        except Exception as exc:
            logger.error(
                "conversation_engine_failed",
                extra={
                    "component": COMPONENT,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                    "phone": mask_phone(msg.customer_phone),
                },
            )
            return OutgoingMessage(should_send=False, error=str(exc))
        finally:
            record_latency(
                COMPONENT,
                "handle_incoming_message",
                (time.perf_counter() - started) * 1000,
                get_correlation_id(),
            )

    async def start_new_conversation(
        self,
        phone: str,
        customer_name: str | None = None,
    ) -> OutgoingMessage:
        """Descarta qualquer estado e serve o template de entrada."""
        try:
            await self._store.delete(phone)
            await self._store.create(ConversationState.fresh(phone, customer_name))
            template = await self._resolve_template(INITIAL_STEP, None)
            if template is None:
                return OutgoingMessage(should_send=False, error=ENTRY_TEMPLATE_MISSING)
            logger.info("conversation_started", extra={"phone": mask_phone(phone)})
            return await self._serve(phone, template)
        except Exception as exc:
            logger.error(
                "conversation_start_failed",
                extra={"component": COMPONENT, "error": str(exc), "phone": mask_phone(phone)},
            )
            return OutgoingMessage(should_send=False, error=str(exc))

    async def _handle(self, msg: IncomingMessage) -> OutgoingMessage:
        await self._store.log_message(
            MessageLogEntry(
                customer_phone=msg.customer_phone,
                direction="inbound",
                message_type=str(msg.message_type),
                content=msg.log_content(),
                status="received",
            )
        )

        flow_kind = flow_kind_for_trigger(msg.option_id)
        if flow_kind is not None:
            return await self._launch_flow(msg, flow_kind)

        try:
            state = await self._store.get(msg.customer_phone)
        except ConversationStoreError as exc:
            return await self._restart(
                msg, Restart(RestartReason.CORRUPTED_STATE, detail=type(exc).__name__)
            )
        is_new = state is None
        if state is None:
            state = await self._store.create(
                ConversationState.fresh(msg.customer_phone, msg.customer_name)
            )

        # Reentrega da mensagem que concluiu a conversa
        if state.context.complete_sent and state.context.completed_from == msg.fingerprint():
            logger.info(
                "completion_replay_ignored",
                extra={"step": state.current_step, "phone": mask_phone(msg.customer_phone)},
            )
            return OutgoingMessage(should_send=False)

        current_template = await self._resolve_template(state.current_step, state.language)
        transition_input = msg.to_transition_input()
        options = (
            current_template.options_for(transition_input.kind)
            if current_template is not None
            else None
        )
        outcome = decide_transition(state.current_step, transition_input, options)
        logger.info(
            "conversation_transition",
            extra={"step": state.current_step, **outcome.to_log_dict()},
        )

        if isinstance(outcome, Restart):
            if is_new:
                return await self._serve_entry(msg.customer_phone)
            return await self._restart(msg, outcome)
        return await self._advance(state, msg, outcome)

    async def _advance(
        self,
        state: ConversationState,
        msg: IncomingMessage,
        outcome: Advance,
    ) -> OutgoingMessage:
        state.context.record(state.current_step, _answer_from(msg, outcome))
        language = outcome.language or state.language
        next_step = outcome.next_step

        template = await self._resolve_template(next_step, language)
        if template is None:
            return await self._restart(msg, Restart(RestartReason.MISSING_TEMPLATE, detail=next_step))

        if is_completion_step(next_step):
            return await self._complete(state, msg, next_step, language, template)

        await self._store.update(
            msg.customer_phone,
            current_step=next_step,
            language=str(language) if language else None,
            context=state.context.to_dict(),
        )
        return await self._serve(msg.customer_phone, template)

    async def _complete(
        self,
        state: ConversationState,
        msg: IncomingMessage,
        step: str,
        language: Language | None,
        template: MessageTemplate,
    ) -> OutgoingMessage:
        # Releitura imediatamente antes dos efeitos colaterais
        stored = await self._store.get(msg.customer_phone)
        if stored is not None and stored.context.complete_sent:
            logger.info("completion_already_sent", extra={"step": step})
            return OutgoingMessage(should_send=False)

        state.context.mark_complete(msg.fingerprint())
        state.current_step = step
        state.language = language
        await self._store.update(
            msg.customer_phone,
            current_step=step,
            language=str(language) if language else None,
            context=state.context.to_dict(),
        )
        await self._recorder.record(step, state)
        return await self._serve(msg.customer_phone, template)

    async def _restart(self, msg: IncomingMessage, outcome: Restart) -> OutgoingMessage:
        await self._store.delete(msg.customer_phone)
        await self._store.create(ConversationState.fresh(msg.customer_phone, msg.customer_name))
        log_fallback(logger, COMPONENT, reason=str(outcome.reason), detail=outcome.detail)
        record_restart(str(outcome.reason), outcome.detail or None)
        return await self._serve_entry(msg.customer_phone, restart_reason=str(outcome.reason))

    async def _serve_entry(
        self,
        phone: str,
        restart_reason: str | None = None,
    ) -> OutgoingMessage:
        template = await self._resolve_template(INITIAL_STEP, None)
        if template is None:
            return OutgoingMessage(
                should_send=False,
                error=ENTRY_TEMPLATE_MISSING,
                restart_reason=restart_reason,
            )
        return await self._serve(phone, template, restart_reason=restart_reason)

    async def _launch_flow(self, msg: IncomingMessage, flow_kind: FlowKind) -> OutgoingMessage:
        if self._flow_launcher is None:
            return OutgoingMessage(should_send=False, is_flow=True, error="Flow launcher not configured")

        try:
            state = await self._store.get(msg.customer_phone)
        except ConversationStoreError:
            logger.warning(
                "flow_language_unavailable",
                extra={"flow_kind": str(flow_kind), "phone": mask_phone(msg.customer_phone)},
            )
            state = None
        language = state.language if state is not None and state.language else DEFAULT_LANGUAGE
        result = await self._flow_launcher.launch(msg.customer_phone, flow_kind, language)
        if not result.success:
            return OutgoingMessage(
                should_send=False,
                is_flow=True,
                flow_sent=False,
                error=result.error or "Failed to send flow",
            )

        await self._store.delete(msg.customer_phone)
        await self._store.log_message(
            MessageLogEntry(
                customer_phone=msg.customer_phone,
                direction="outbound",
                message_type="flow",
                content={"flowKind": str(flow_kind), "language": str(language)},
                status="pending",
            )
        )
        return OutgoingMessage(should_send=False, is_flow=True, flow_sent=True)

    async def _serve(
        self,
        phone: str,
        template: MessageTemplate,
        restart_reason: str | None = None,
    ) -> OutgoingMessage:
        await self._store.log_message(
            MessageLogEntry(
                customer_phone=phone,
                direction="outbound",
                message_type=str(template.message_type),
                content={
                    "text": template.body_text,
                    "stepKey": template.step_key,
                    "templateName": template.name,
                },
                status="pending",
            )
        )
        return OutgoingMessage(template=template, should_send=True, restart_reason=restart_reason)

    async def _resolve_template(
        self,
        step: str,
        language: Language | None,
    ) -> MessageTemplate | None:
        """Template do step no idioma da conversa; cai para qualquer idioma."""
        lang = str(language or DEFAULT_LANGUAGE)
        found = await self._templates.query(
            flow_type=CAMPAIGN_FLOW_TYPE,
            language=lang,
            step_key=str(step),
        )
        if found:
            return found[0]

        fallback = await self._templates.query(flow_type=CAMPAIGN_FLOW_TYPE, step_key=str(step))
        if fallback:
            logger.info(
                "template_language_fallback",
                extra={"step": str(step), "language": lang, "used_language": fallback[0].language},
            )
            return fallback[0]
        return None


def _answer_from(msg: IncomingMessage, outcome: Advance) -> StepAnswer:
    title = outcome.option.title if outcome.option is not None else msg.content
    if msg.message_type is InputKind.BUTTON:
        return ButtonAnswer(msg.selected_button_id or "", title or None)
    if msg.message_type is InputKind.LIST:
        return ListAnswer(msg.selected_list_item_id or "", title or None)
    return TextAnswer(msg.content)
