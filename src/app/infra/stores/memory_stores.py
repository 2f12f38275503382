"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar ConversationStore em memória em staging/production.
Sem persistência entre reinícios.
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.domain.conversation import ConversationContext, ConversationState
from app.protocols.conversation_store import ConversationStoreProtocol, MessageLogEntry
from fsm import parse_language

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pydantic import BaseModel

    from app.domain.records import (
        CallbackRequestCreate,
        EventCreate,
        FormCreate,
        LeadCreate,
        OtherIssueCreate,
        PriceEstimateCreate,
        ServiceRequestCreate,
    )


class MemoryConversationStore(ConversationStoreProtocol):
    """ConversationStore em memória — apenas para dev/test."""

    def __init__(self, max_log_entries: int = 500) -> None:
        self._states: dict[str, ConversationState] = {}
        self._logs: dict[str, list[MessageLogEntry]] = defaultdict(list)
        self._max_log_entries = max_log_entries

    async def get(self, phone: str) -> ConversationState | None:
        state = self._states.get(phone)
        # Cópia: o chamador não altera o estado armazenado sem update()
        return copy.deepcopy(state) if state is not None else None

    async def create(self, state: ConversationState) -> ConversationState:
        self._states[state.customer_phone] = copy.deepcopy(state)
        return copy.deepcopy(state)

    async def update(
        self,
        phone: str,
        *,
        current_step: str | None = None,
        language: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> ConversationState | None:
        state = self._states.get(phone)
        if state is None:
            return None
        if current_step is not None:
            state.current_step = current_step
        if language is not None:
            state.language = parse_language(language)
        if context is not None:
            state.context = ConversationContext.from_dict(context)
        state.last_message_at = datetime.now(UTC)
        return copy.deepcopy(state)

    async def delete(self, phone: str) -> bool:
        return self._states.pop(phone, None) is not None

    async def log_message(self, entry: MessageLogEntry) -> None:
        log = self._logs[entry.customer_phone]
        log.append(entry)
        if len(log) > self._max_log_entries:
            del log[: len(log) - self._max_log_entries]

    async def get_messages(self, phone: str, *, limit: int = 50) -> Sequence[MessageLogEntry]:
        return list(self._logs.get(phone, [])[-limit:])


class MemoryRecordStore:
    """RecordStore em memória.

    Registros ficam em listas por tipo (leads, forms, events...) para
    inspeção em testes e na API administrativa.
    """

    def __init__(self) -> None:
        self.leads: list[dict[str, Any]] = []
        self.price_estimates: list[dict[str, Any]] = []
        self.service_requests: list[dict[str, Any]] = []
        self.callback_requests: list[dict[str, Any]] = []
        self.other_issues: list[dict[str, Any]] = []
        self.forms: list[dict[str, Any]] = []
        self.events: list[dict[str, Any]] = []

    @staticmethod
    def _append(bucket: list[dict[str, Any]], record: BaseModel) -> str:
        record_id = str(uuid.uuid4())
        bucket.append(
            {
                "id": record_id,
                "created_at": datetime.now(UTC).isoformat(),
                **record.model_dump(),
            }
        )
        return record_id

    async def create_lead(self, record: LeadCreate) -> str:
        return self._append(self.leads, record)

    async def create_price_estimate(self, record: PriceEstimateCreate) -> str:
        return self._append(self.price_estimates, record)

    async def create_service_request(self, record: ServiceRequestCreate) -> str:
        return self._append(self.service_requests, record)

    async def create_callback_request(self, record: CallbackRequestCreate) -> str:
        return self._append(self.callback_requests, record)

    async def create_other_issue(self, record: OtherIssueCreate) -> str:
        return self._append(self.other_issues, record)

    async def create_form(self, record: FormCreate) -> str:
        return self._append(self.forms, record)

    async def create_event(self, record: EventCreate) -> str:
        return self._append(self.events, record)
