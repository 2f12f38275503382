"""Testes do ConversationFlowEngine com stores em memória e catálogo real."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from app.domain.conversation import ConversationContext, ConversationState, TextAnswer
from app.infra.stores import MemoryConversationStore, MemoryRecordStore, MemoryTemplateStore
from app.infra.stores.redis_conversation_store import RedisConversationStore
from app.protocols.models import IncomingMessage
from app.services.completion_records import CompletionRecorder
from app.services.flow_launcher import FlowLauncher
from app.use_cases.whatsapp.conversation_engine import (
    ENTRY_TEMPLATE_MISSING,
    ConversationFlowEngine,
)
from config.settings import WhatsAppSettings
from fsm import InputKind, Language
from tests.fakes.fake_gateway import FakeMessagingGateway
from tests.fakes.fake_redis import FakeAsyncRedis
from utils.errors import RedisConnectionError

PHONE = "+911234567890"


def _text(content: str, phone: str = PHONE) -> IncomingMessage:
    return IncomingMessage(customer_phone=phone, message_type=InputKind.TEXT, content=content)


def _button(button_id: str, title: str = "") -> IncomingMessage:
    return IncomingMessage(
        customer_phone=PHONE,
        message_type=InputKind.BUTTON,
        content=title,
        selected_button_id=button_id,
    )


def _list_item(item_id: str, title: str = "") -> IncomingMessage:
    return IncomingMessage(
        customer_phone=PHONE,
        message_type=InputKind.LIST,
        content=title,
        selected_list_item_id=item_id,
    )


@pytest.fixture
def gateway() -> FakeMessagingGateway:
    return FakeMessagingGateway()


@pytest.fixture
def engine(
    conversation_store: MemoryConversationStore,
    template_store: MemoryTemplateStore,
    record_store: MemoryRecordStore,
    gateway: FakeMessagingGateway,
) -> ConversationFlowEngine:
    settings = WhatsAppSettings(flow_ids={"survey": "FLOW_SURVEY", "survey_hi": "FLOW_SURVEY_HI"})
    return ConversationFlowEngine(
        conversation_store=conversation_store,
        template_store=template_store,
        completion_recorder=CompletionRecorder(record_store),
        flow_launcher=FlowLauncher(gateway, settings),
    )


async def _state_at(
    store: MemoryConversationStore,
    step: str,
    *,
    language: Language | None = Language.EN,
    answers: dict[str, Any] | None = None,
) -> None:
    context = ConversationContext(
        answers={key: TextAnswer(value) for key, value in (answers or {}).items()}
    )
    await store.create(
        ConversationState(
            customer_phone=PHONE,
            current_step=step,
            language=language,
            context=context,
        )
    )


class TestNewConversation:
    @pytest.mark.asyncio
    async def test_first_text_serves_entry_template(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        decision = await engine.handle_incoming_message(_text("hi"))

        assert decision.should_send is True
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"
        assert decision.restart_reason is None
        state = await conversation_store.get(PHONE)
        assert state is not None
        assert state.current_step == "campaign_entry"
        assert state.language is None

    @pytest.mark.asyncio
    async def test_inbound_and_outbound_are_logged(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        await engine.handle_incoming_message(_text("hi"))

        entries = await conversation_store.get_messages(PHONE)
        assert [entry.direction for entry in entries] == ["inbound", "outbound"]
        assert entries[0].content["text"] == "hi"
        assert entries[1].content["stepKey"] == "campaign_entry"

    @pytest.mark.asyncio
    async def test_start_new_conversation_discards_previous_state(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        await _state_at(conversation_store, "survey_village", answers={"survey_name": "Ravi"})

        decision = await engine.start_new_conversation(PHONE, customer_name="Ravi")

        assert decision.should_send is True
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"
        state = await conversation_store.get(PHONE)
        assert state is not None
        assert state.current_step == "campaign_entry"
        assert state.customer_name == "Ravi"
        assert state.context.answers == {}


class TestLanguageAndMenus:
    @pytest.mark.asyncio
    async def test_hindi_button_moves_to_main_menu(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        await engine.start_new_conversation(PHONE)

        decision = await engine.handle_incoming_message(_button("hindi", "हिंदी"))

        assert decision.template is not None
        assert decision.template.step_key == "main_menu"
        assert decision.template.language == "hi"
        state = await conversation_store.get(PHONE)
        assert state is not None
        assert state.current_step == "main_menu"
        assert state.language is Language.HI
        answer = state.context.answer_for("campaign_entry")
        assert answer is not None
        assert answer.button_id == "hindi"  # type: ignore[union-attr]

    @pytest.mark.asyncio
    async def test_website_keyword_completes_and_records_event(
        self,
        engine: ConversationFlowEngine,
        record_store: MemoryRecordStore,
    ) -> None:
        await engine.start_new_conversation(PHONE)

        decision = await engine.handle_incoming_message(_text("W"))

        assert decision.template is not None
        assert decision.template.step_key == "website_complete"
        assert [event["type"] for event in record_store.events] == ["website_visit_requested"]

    @pytest.mark.asyncio
    async def test_unknown_button_restarts(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        await _state_at(conversation_store, "main_menu", language=Language.HI)

        decision = await engine.handle_incoming_message(_button("not_a_button"))

        assert decision.restart_reason == "unknown_button"
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"
        state = await conversation_store.get(PHONE)
        assert state is not None
        assert state.current_step == "campaign_entry"
        assert state.language is None

    @pytest.mark.asyncio
    async def test_text_on_menu_restarts(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        await _state_at(conversation_store, "help_submenu")

        decision = await engine.handle_incoming_message(_text("please help"))

        assert decision.restart_reason == "unexpected_text"
        assert decision.to_dict()["restartReason"] == "unexpected_text"

    @pytest.mark.asyncio
    async def test_button_carrying_list_row_id_restarts(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
    ) -> None:
        # help_submenu é lista: um botão com o id de uma linha não casa
        await _state_at(conversation_store, "help_submenu")

        decision = await engine.handle_incoming_message(_button("survey_by_chat"))

        assert decision.restart_reason == "unknown_button"
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"


class TestFlowTriggers:
    @pytest.mark.asyncio
    async def test_site_survey_button_launches_flow_in_conversation_language(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        gateway: FakeMessagingGateway,
    ) -> None:
        await _state_at(conversation_store, "main_menu", language=Language.HI)

        decision = await engine.handle_incoming_message(_button("site_survey"))

        assert decision.is_flow is True
        assert decision.flow_sent is True
        assert decision.should_send is False
        assert gateway.flows[0]["flow_id"] == "FLOW_SURVEY_HI"
        assert await conversation_store.get(PHONE) is None

    @pytest.mark.asyncio
    async def test_list_item_trigger_without_flow_id_reports_error(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        gateway: FakeMessagingGateway,
    ) -> None:
        await _state_at(conversation_store, "help_submenu")

        decision = await engine.handle_incoming_message(_list_item("callback"))

        assert decision.is_flow is True
        assert decision.flow_sent is False
        assert decision.error == "Flow ID not configured for callback"
        assert gateway.flows == []
        # Estado preservado quando o Flow não sai
        assert await conversation_store.get(PHONE) is not None

    @pytest.mark.asyncio
    async def test_gateway_failure_is_reported(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        gateway: FakeMessagingGateway,
    ) -> None:
        gateway.success = False
        gateway.error = "(#131030) Recipient not in allowed list"
        await _state_at(conversation_store, "main_menu")

        decision = await engine.handle_incoming_message(_button("site_survey"))

        assert decision.flow_sent is False
        assert decision.error == "(#131030) Recipient not in allowed list"


class TestCompletion:
    SURVEY_ANSWERS = {
        "survey_name": "Ravi Kumar",
        "survey_mobile": "9876543210",
        "survey_address": "12 MG Road",
        "survey_village": "Rampur",
        "survey_date": "25 Oct",
    }

    @pytest.mark.asyncio
    async def test_survey_completion_creates_records_once(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        await _state_at(conversation_store, "survey_time", answers=self.SURVEY_ANSWERS)

        first = await engine.handle_incoming_message(_text("10 AM"))

        assert first.should_send is True
        assert first.template is not None
        assert first.template.step_key == "survey_complete"
        assert len(record_store.leads) == 1
        assert len(record_store.forms) == 1
        assert len(record_store.events) == 1
        lead = record_store.leads[0]
        assert lead["customer_name"] == "Ravi Kumar"
        assert lead["village"] == "Rampur"
        assert lead["preferred_survey_time"] == "10 AM"
        assert lead["notes"] == "Lead from WhatsApp campaign. Language: en"
        assert record_store.forms[0]["data"]["mobile"] == "9876543210"

        replay = await engine.handle_incoming_message(_text("10 AM"))

        assert replay.should_send is False
        assert replay.template is None
        assert len(record_store.leads) == 1
        assert len(record_store.events) == 1

    @pytest.mark.asyncio
    async def test_new_input_after_completion_restarts(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        await _state_at(conversation_store, "survey_time", answers=self.SURVEY_ANSWERS)
        await engine.handle_incoming_message(_text("10 AM"))

        decision = await engine.handle_incoming_message(_text("thanks"))

        assert decision.restart_reason == "conversation_completed"
        state = await conversation_store.get(PHONE)
        assert state is not None
        assert state.current_step == "campaign_entry"
        assert state.language is None
        assert state.context.complete_sent is False
        assert len(record_store.leads) == 1

    @pytest.mark.asyncio
    async def test_concurrent_completion_is_not_repeated(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        await _state_at(conversation_store, "survey_time", answers=self.SURVEY_ANSWERS)
        stale = await conversation_store.get(PHONE)
        assert stale is not None

        # Outra entrega concluiu entre a leitura e os efeitos colaterais
        stored_context = ConversationContext.from_dict(stale.context.to_dict())
        stored_context.mark_complete({"kind": "text", "content": "10 AM", "optionId": ""})
        await conversation_store.update(PHONE, context=stored_context.to_dict())
        template = await engine._resolve_template("survey_complete", Language.EN)
        assert template is not None

        decision = await engine._complete(
            stale,
            _text("10:00"),
            "survey_complete",
            Language.EN,
            template,
        )

        assert decision.should_send is False
        assert record_store.leads == []

    @pytest.mark.asyncio
    async def test_chat_survey_chain_end_to_end(
        self,
        engine: ConversationFlowEngine,
        record_store: MemoryRecordStore,
    ) -> None:
        await engine.start_new_conversation(PHONE)
        steps = [
            (_button("english", "English"), "main_menu"),
            (_button("help", "Service & Support"), "help_submenu"),
            (_list_item("survey_by_chat", "Book survey by chat"), "survey_name"),
            (_text("Sita Devi"), "survey_mobile"),
            (_text("9000000001"), "survey_address"),
            (_text("Near temple"), "survey_village"),
            (_text("Lakhpur"), "survey_date"),
            (_text("1 Nov"), "survey_time"),
            (_text("Evening"), "survey_complete"),
        ]

        for message, expected_step in steps:
            decision = await engine.handle_incoming_message(message)
            assert decision.template is not None, expected_step
            assert decision.template.step_key == expected_step

        assert len(record_store.leads) == 1
        assert record_store.leads[0]["customer_name"] == "Sita Devi"
        assert record_store.events[0]["meta"] == {
            "formType": "site_survey",
            "language": "en",
            "source": "chat",
        }

    @pytest.mark.asyncio
    async def test_callback_chain_creates_callback_request(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        await _state_at(
            conversation_store,
            "callback_time",
            answers={"callback_name": "Amit", "callback_mobile": "9111111111"},
        )

        await engine.handle_incoming_message(_text("after 5 pm"))

        callback = record_store.callback_requests[0]
        assert callback["source"] == "chat"
        assert callback["best_time"] == "after 5 pm"
        assert callback["notes"] == "Alternate mobile: 9111111111"

    @pytest.mark.asyncio
    async def test_record_failure_still_sends_completion(
        self,
        engine: ConversationFlowEngine,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        # Sem nome: LeadCreate falha na validação e o recorder engole o erro
        await _state_at(conversation_store, "survey_time", answers={})

        decision = await engine.handle_incoming_message(_text("10 AM"))

        assert decision.should_send is True
        assert decision.template is not None
        assert decision.template.step_key == "survey_complete"
        assert record_store.leads == []


class TestMissingTemplatesAndFailures:
    @pytest.mark.asyncio
    async def test_missing_next_template_restarts(
        self,
        conversation_store: MemoryConversationStore,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
    ) -> None:
        partial = MemoryTemplateStore(
            template
            for template in await template_store.query()
            if template.step_key in {"campaign_entry", "main_menu"}
        )
        engine = ConversationFlowEngine(
            conversation_store=conversation_store,
            template_store=partial,
            completion_recorder=CompletionRecorder(record_store),
        )
        await _state_at(conversation_store, "main_menu")

        decision = await engine.handle_incoming_message(_button("help"))

        assert decision.restart_reason == "missing_template"
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"

    @pytest.mark.asyncio
    async def test_missing_entry_template_returns_error(
        self,
        conversation_store: MemoryConversationStore,
        record_store: MemoryRecordStore,
    ) -> None:
        engine = ConversationFlowEngine(
            conversation_store=conversation_store,
            template_store=MemoryTemplateStore(),
            completion_recorder=CompletionRecorder(record_store),
        )

        decision = await engine.handle_incoming_message(_text("hi"))

        assert decision.should_send is False
        assert decision.error == ENTRY_TEMPLATE_MISSING

    @pytest.mark.asyncio
    async def test_store_failure_returns_soft_error(
        self,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
    ) -> None:
        store = AsyncMock()
        store.log_message.side_effect = ConnectionError("redis down")
        engine = ConversationFlowEngine(
            conversation_store=store,
            template_store=template_store,
            completion_recorder=CompletionRecorder(record_store),
        )

        decision = await engine.handle_incoming_message(_text("hi"))

        assert decision.should_send is False
        assert decision.error == "redis down"

    @pytest.mark.asyncio
    async def test_corrupted_state_row_restarts_conversation(
        self,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
    ) -> None:
        redis_client = FakeAsyncRedis()
        redis_client.values[f"conversation:{PHONE}"] = "{not json"
        store = RedisConversationStore(redis_client)  # type: ignore[arg-type]
        engine = ConversationFlowEngine(
            conversation_store=store,
            template_store=template_store,
            completion_recorder=CompletionRecorder(record_store),
        )

        decision = await engine.handle_incoming_message(_text("hi"))

        assert decision.should_send is True
        assert decision.restart_reason == "corrupted_state"
        assert decision.template is not None
        assert decision.template.step_key == "campaign_entry"
        state = await store.get(PHONE)
        assert state is not None
        assert state.current_step == "campaign_entry"

        # A linha regravada destrava o telefone
        follow_up = await engine.handle_incoming_message(_button("english", "English"))

        assert follow_up.template is not None
        assert follow_up.template.step_key == "main_menu"

    @pytest.mark.asyncio
    async def test_redis_outage_on_load_stays_soft_error(
        self,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
    ) -> None:
        store = AsyncMock()
        store.get.side_effect = RedisConnectionError("Redis GET failed: timeout")
        engine = ConversationFlowEngine(
            conversation_store=store,
            template_store=template_store,
            completion_recorder=CompletionRecorder(record_store),
        )

        decision = await engine.handle_incoming_message(_text("hi"))

        assert decision.should_send is False
        assert decision.restart_reason is None
        assert decision.error == "Redis GET failed: timeout"
        store.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_flow_trigger_with_corrupted_state_uses_default_language(
        self,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
        gateway: FakeMessagingGateway,
    ) -> None:
        redis_client = FakeAsyncRedis()
        redis_client.values[f"conversation:{PHONE}"] = "{not json"
        settings = WhatsAppSettings(flow_ids={"survey": "FLOW_SURVEY", "survey_hi": "FLOW_SURVEY_HI"})
        engine = ConversationFlowEngine(
            conversation_store=RedisConversationStore(redis_client),  # type: ignore[arg-type]
            template_store=template_store,
            completion_recorder=CompletionRecorder(record_store),
            flow_launcher=FlowLauncher(gateway, settings),
        )

        decision = await engine.handle_incoming_message(_button("site_survey"))

        assert decision.flow_sent is True
        assert gateway.flows[0]["flow_id"] == "FLOW_SURVEY"
        assert f"conversation:{PHONE}" not in redis_client.values

    @pytest.mark.asyncio
    async def test_hindi_falls_back_to_available_language(
        self,
        conversation_store: MemoryConversationStore,
        template_store: MemoryTemplateStore,
        record_store: MemoryRecordStore,
    ) -> None:
        english_only = MemoryTemplateStore(await template_store.query(language="en"))
        engine = ConversationFlowEngine(
            conversation_store=conversation_store,
            template_store=english_only,
            completion_recorder=CompletionRecorder(record_store),
        )
        await engine.start_new_conversation(PHONE)

        decision = await engine.handle_incoming_message(_button("hindi"))

        assert decision.template is not None
        assert decision.template.step_key == "main_menu"
        assert decision.template.language == "en"
