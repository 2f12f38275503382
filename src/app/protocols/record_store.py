"""Protocolo do Record Store (registros de negócio).

Cada create_* recebe o esquema de inserção já validado e retorna o ID
do registro criado.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.records import (
        CallbackRequestCreate,
        EventCreate,
        FormCreate,
        LeadCreate,
        OtherIssueCreate,
        PriceEstimateCreate,
        ServiceRequestCreate,
    )


class RecordStoreProtocol(Protocol):
    async def create_lead(self, record: LeadCreate) -> str: ...

    async def create_price_estimate(self, record: PriceEstimateCreate) -> str: ...

    async def create_service_request(self, record: ServiceRequestCreate) -> str: ...

    async def create_callback_request(self, record: CallbackRequestCreate) -> str: ...

    async def create_other_issue(self, record: OtherIssueCreate) -> str: ...

    async def create_form(self, record: FormCreate) -> str: ...

    async def create_event(self, record: EventCreate) -> str: ...
