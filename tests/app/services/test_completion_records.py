"""Testes do CompletionRecorder."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.domain.conversation import ConversationState, TextAnswer
from app.infra.stores import MemoryRecordStore
from app.services.completion_records import CompletionRecorder
from fsm import Language

PHONE = "+911234567890"


def _state(language: Language | None = Language.HI, **answers: str) -> ConversationState:
    state = ConversationState.fresh(PHONE)
    state.language = language
    for step, value in answers.items():
        state.context.record(step, TextAnswer(value))
    return state


@pytest.mark.asyncio
async def test_service_completion(record_store: MemoryRecordStore) -> None:
    state = _state(
        service_name="Ravi",
        service_mobile="9000000000",
        service_address="12 MG Road",
        service_description="Inverter shows error",
    )

    assert await CompletionRecorder(record_store).record("service_complete", state) is True

    request = record_store.service_requests[0]
    assert request["issue_type"] == "Service-Repair"
    assert request["urgency"] == "medium"
    assert request["status"] == "pending"
    assert request["description"] == "Inverter shows error"
    assert record_store.forms[0]["form_type"] == "service_request"
    assert record_store.events[0]["meta"] == {
        "formType": "service_request",
        "language": "hi",
        "source": "chat",
    }


@pytest.mark.asyncio
async def test_issue_completion(record_store: MemoryRecordStore) -> None:
    state = _state(issue_name="Sita", issue_mobile="9111111111", issue_description="Bill too high")

    await CompletionRecorder(record_store).record("issue_complete", state)

    assert record_store.other_issues[0]["description"] == "Bill too high"
    assert record_store.forms[0]["data"] == {
        "name": "Sita",
        "mobile": "9111111111",
        "description": "Bill too high",
    }


@pytest.mark.asyncio
async def test_callback_without_mobile_has_no_note(record_store: MemoryRecordStore) -> None:
    await CompletionRecorder(record_store).record(
        "callback_complete", _state(callback_name="Amit", callback_time="evening")
    )

    callback = record_store.callback_requests[0]
    assert callback["notes"] is None
    assert callback["source"] == "chat"


@pytest.mark.asyncio
async def test_profile_name_used_when_chain_name_missing(record_store: MemoryRecordStore) -> None:
    state = _state(survey_village="Rampur")
    state.customer_name = "WhatsApp Name"

    await CompletionRecorder(record_store).record("survey_complete", state)

    assert record_store.leads[0]["customer_name"] == "WhatsApp Name"


@pytest.mark.asyncio
async def test_website_completion_records_only_event(record_store: MemoryRecordStore) -> None:
    await CompletionRecorder(record_store).record("website_complete", _state(language=None))

    assert record_store.forms == []
    assert record_store.events[0]["type"] == "website_visit_requested"
    assert record_store.events[0]["meta"] == {"language": "en"}


@pytest.mark.asyncio
async def test_failures_are_swallowed() -> None:
    store = AsyncMock()
    store.create_lead.side_effect = RuntimeError("db down")

    result = await CompletionRecorder(store).record("survey_complete", _state(survey_name="Ravi"))

    assert result is False
    store.create_form.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_step_returns_false(record_store: MemoryRecordStore) -> None:
    assert await CompletionRecorder(record_store).record("main_menu", _state()) is False
