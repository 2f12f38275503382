"""Testes do pipeline webhook -> motor -> gateway."""

from __future__ import annotations

from typing import Any

import pytest

from app.bootstrap.whatsapp_adapters import GraphApiNormalizer
from app.infra.stores import MemoryConversationStore, MemoryRecordStore, MemoryTemplateStore
from app.services.completion_records import CompletionRecorder
from app.services.flow_launcher import FlowLauncher
from app.use_cases.whatsapp.conversation_engine import ConversationFlowEngine
from app.use_cases.whatsapp.process_inbound_webhook import ProcessInboundWebhookUseCase
from config.settings import WhatsAppSettings
from tests.fakes.fake_gateway import FakeMessagingGateway

PHONE = "911234567890"


def _payload(*messages: dict[str, Any]) -> dict[str, Any]:
    return {
        "object": "whatsapp_business_account",
        "entry": [
            {
                "id": "WABA_ID",
                "changes": [
                    {
                        "field": "messages",
                        "value": {
                            "messaging_product": "whatsapp",
                            "contacts": [{"wa_id": PHONE, "profile": {"name": "Ravi"}}],
                            "messages": list(messages),
                        },
                    }
                ],
            }
        ],
    }


def _text(body: str, message_id: str = "wamid.1") -> dict[str, Any]:
    return {"from": PHONE, "id": message_id, "type": "text", "text": {"body": body}}


def _button_reply(button_id: str, title: str, message_id: str = "wamid.2") -> dict[str, Any]:
    return {
        "from": PHONE,
        "id": message_id,
        "type": "interactive",
        "interactive": {
            "type": "button_reply",
            "button_reply": {"id": button_id, "title": title},
        },
    }


@pytest.fixture
def gateway() -> FakeMessagingGateway:
    return FakeMessagingGateway()


@pytest.fixture
def use_case(
    conversation_store: MemoryConversationStore,
    template_store: MemoryTemplateStore,
    record_store: MemoryRecordStore,
    gateway: FakeMessagingGateway,
) -> ProcessInboundWebhookUseCase:
    engine = ConversationFlowEngine(
        conversation_store=conversation_store,
        template_store=template_store,
        completion_recorder=CompletionRecorder(record_store),
        flow_launcher=FlowLauncher(gateway, WhatsAppSettings(flow_ids={"price": "FLOW_PRICE"})),
    )
    return ProcessInboundWebhookUseCase(
        normalizer=GraphApiNormalizer(),
        engine=engine,
        gateway=gateway,
    )


@pytest.mark.asyncio
async def test_text_message_sends_entry_template(
    use_case: ProcessInboundWebhookUseCase,
    gateway: FakeMessagingGateway,
    conversation_store: MemoryConversationStore,
) -> None:
    result = await use_case.execute(_payload(_text("hi")))

    assert result.to_dict() == {"processed": 1, "sent": 1, "flows_sent": 0, "failed": 0}
    phone, template = gateway.templates[0]
    assert phone == PHONE
    assert template.step_key == "campaign_entry"
    state = await conversation_store.get(PHONE)
    assert state is not None
    assert state.customer_name == "Ravi"


@pytest.mark.asyncio
async def test_messages_in_one_payload_are_processed_in_order(
    use_case: ProcessInboundWebhookUseCase,
    gateway: FakeMessagingGateway,
) -> None:
    result = await use_case.execute(
        _payload(_text("hi"), _button_reply("english", "English"))
    )

    assert result.sent == 2
    assert [template.step_key for _, template in gateway.templates] == [
        "campaign_entry",
        "main_menu",
    ]


@pytest.mark.asyncio
async def test_flow_trigger_counts_as_flow(
    use_case: ProcessInboundWebhookUseCase,
    gateway: FakeMessagingGateway,
) -> None:
    result = await use_case.execute(_payload(_button_reply("price_estimate", "Price Estimate")))

    assert result.flows_sent == 1
    assert result.sent == 0
    assert gateway.flows[0]["flow_id"] == "FLOW_PRICE"
    assert gateway.templates == []


@pytest.mark.asyncio
async def test_gateway_failure_counts_as_failed(
    use_case: ProcessInboundWebhookUseCase,
    gateway: FakeMessagingGateway,
) -> None:
    gateway.success = False

    result = await use_case.execute(_payload(_text("hi")))

    assert result.failed == 1
    assert result.sent == 0


@pytest.mark.asyncio
async def test_unsupported_and_status_only_payloads_process_nothing(
    use_case: ProcessInboundWebhookUseCase,
    gateway: FakeMessagingGateway,
) -> None:
    image = {"from": PHONE, "id": "wamid.3", "type": "image", "image": {"id": "MEDIA"}}

    result = await use_case.execute(_payload(image))

    assert result.processed == 0
    assert gateway.templates == []
