"""Testes dos stores em memória."""

from __future__ import annotations

import pytest

from app.domain.conversation import ConversationContext, ConversationState, TextAnswer
from app.domain.records import EventCreate, LeadCreate
from app.infra.stores.memory_stores import MemoryConversationStore, MemoryRecordStore
from app.protocols.conversation_store import MessageLogEntry

PHONE = "+911234567890"


class TestMemoryConversationStore:
    @pytest.mark.asyncio
    async def test_create_and_get(self) -> None:
        store = MemoryConversationStore()
        await store.create(ConversationState.fresh(PHONE, "Ravi"))

        loaded = await store.get(PHONE)

        assert loaded is not None
        assert loaded.customer_name == "Ravi"
        assert await store.get("+910000000000") is None

    @pytest.mark.asyncio
    async def test_get_returns_copy(self) -> None:
        store = MemoryConversationStore()
        await store.create(ConversationState.fresh(PHONE))

        loaded = await store.get(PHONE)
        assert loaded is not None
        loaded.current_step = "main_menu"

        again = await store.get(PHONE)
        assert again is not None
        assert again.current_step == "campaign_entry"

    @pytest.mark.asyncio
    async def test_update_changes_only_given_fields(self) -> None:
        store = MemoryConversationStore()
        created = await store.create(ConversationState.fresh(PHONE))
        context = ConversationContext()
        context.record("campaign_entry", TextAnswer("x"))

        updated = await store.update(PHONE, language="hi", context=context.to_dict())

        assert updated is not None
        assert updated.current_step == "campaign_entry"
        assert updated.language == "hi"
        assert updated.context.value_for("campaign_entry") == "x"
        assert updated.last_message_at >= created.last_message_at

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self) -> None:
        store = MemoryConversationStore()

        assert await store.update(PHONE, current_step="main_menu") is None

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        store = MemoryConversationStore()
        await store.create(ConversationState.fresh(PHONE))

        assert await store.delete(PHONE) is True
        assert await store.delete(PHONE) is False
        assert await store.get(PHONE) is None

    @pytest.mark.asyncio
    async def test_message_log_is_bounded_and_ordered(self) -> None:
        store = MemoryConversationStore(max_log_entries=3)
        for index in range(5):
            await store.log_message(
                MessageLogEntry(
                    customer_phone=PHONE,
                    direction="inbound",
                    message_type="text",
                    content={"text": str(index)},
                )
            )

        entries = await store.get_messages(PHONE)
        assert [entry.content["text"] for entry in entries] == ["2", "3", "4"]

        latest = await store.get_messages(PHONE, limit=1)
        assert [entry.content["text"] for entry in latest] == ["4"]


class TestMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_records_are_kept_per_type(self) -> None:
        store = MemoryRecordStore()

        lead_id = await store.create_lead(LeadCreate(customer_phone=PHONE, customer_name="Ravi"))
        await store.create_event(EventCreate(customer_phone=PHONE, type="form_submitted"))

        assert store.leads[0]["id"] == lead_id
        assert store.leads[0]["interested_in"] == "Solar Installation"
        assert "created_at" in store.leads[0]
        assert store.events[0]["type"] == "form_submitted"
        assert store.forms == []
