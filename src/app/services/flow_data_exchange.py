"""Handler de data exchange dos WhatsApp Flows (survey, price, service, callback).

Recebe o payload já decriptado e devolve (status_code, body). A
criptografia da resposta fica na rota; aqui só há regra de negócio.

Ações (case-insensitive):
    - PING: health check do runtime de Flows
    - INIT: tela inicial do formulário
    - DATA_EXCHANGE: valida, persiste registro + Form + Event
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.constants.whatsapp import FlowKind
from app.domain.records import (
    CallbackRequestCreate,
    EventCreate,
    FormCreate,
    LeadCreate,
    PriceEstimateCreate,
    ServiceRequestCreate,
)
from app.observability import record_flow_exchange
from app.services.flow_token import UNKNOWN_PHONE, phone_from_flow_token
from config.logging import mask_phone

if TYPE_CHECKING:
    from app.protocols.record_store import RecordStoreProtocol

logger = logging.getLogger(__name__)

FLOW_API_VERSION = "3.0"
SUCCESS_SCREEN = "SUCCESS"
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")

# Flows com formulário próprio (trust/eligibility são apenas informativos)
FORM_SCREENS: dict[FlowKind, str] = {
    FlowKind.SURVEY: "SURVEY_FORM",
    FlowKind.PRICE: "PRICE_FORM",
    FlowKind.SERVICE: "SERVICE_FORM",
    FlowKind.CALLBACK: "CALLBACK_FORM",
}

FORM_TYPES: dict[FlowKind, str] = {
    FlowKind.SURVEY: "site_survey",
    FlowKind.PRICE: "price_estimate",
    FlowKind.SERVICE: "service_request",
    FlowKind.CALLBACK: "callback",
}

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


@dataclass(frozen=True, slots=True)
class FlowExchangeResult:
    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _error(status_code: int, message: str, **details: Any) -> FlowExchangeResult:
    return FlowExchangeResult(status_code, {"error": message, **details})


def _text(data: dict[str, Any], *keys: str) -> str | None:
    """Primeiro valor não vazio entre os nomes de campo aceitos."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return None


def _integer(value: Any) -> Any:
    """Dígitos iniciais como int; outros valores seguem para a validação."""
    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_DIGITS.match(str(value))
    return int(match.group(1)) if match else value


def _validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]


class FlowDataExchangeHandler:
    """Handler de um tipo de Flow com formulário.

    Args:
        flow_kind: survey, price, service ou callback
        record_store: Destino dos registros de negócio
    """

    def __init__(self, flow_kind: FlowKind, record_store: RecordStoreProtocol) -> None:
        if flow_kind not in FORM_SCREENS:
            raise ValueError(f"Flow sem formulário: {flow_kind}")
        self.flow_kind = flow_kind
        self._record_store = record_store
        self._persisters: dict[FlowKind, Callable[[str, dict[str, Any]], Awaitable[str]]] = {
            FlowKind.SURVEY: self._persist_survey,
            FlowKind.PRICE: self._persist_price,
            FlowKind.SERVICE: self._persist_service,
            FlowKind.CALLBACK: self._persist_callback,
        }

    async def handle(self, payload: dict[str, Any]) -> FlowExchangeResult:
        action = str(payload.get("action") or "").upper()
        result = await self._dispatch(action, payload)
        record_flow_exchange(str(self.flow_kind), action or "missing", result.status_code)
        return result

    async def _dispatch(self, action: str, payload: dict[str, Any]) -> FlowExchangeResult:
        if action == "PING":
            return FlowExchangeResult(200, {"version": FLOW_API_VERSION, "data": {"status": "active"}})
        if action == "INIT":
            return FlowExchangeResult(
                200,
                {"version": FLOW_API_VERSION, "screen": FORM_SCREENS[self.flow_kind], "data": {}},
            )
        if action == "DATA_EXCHANGE":
            return await self._data_exchange(payload)
        return _error(400, "Invalid action")

    async def _data_exchange(self, payload: dict[str, Any]) -> FlowExchangeResult:
        if payload.get("version") != FLOW_API_VERSION:
            return _error(400, "Unsupported version")

        flow_token = payload.get("flow_token")
        phone = phone_from_flow_token(flow_token)
        if phone == UNKNOWN_PHONE or not PHONE_PATTERN.match(phone):
            logger.warning("flow_invalid_phone", extra={"flow_kind": str(self.flow_kind)})
            return _error(400, "Invalid phone number format")

        data = payload.get("data")
        if not isinstance(data, dict):
            data = {}

        try:
            record_id = await self._persisters[self.flow_kind](phone, data)
            await self._record_store.create_form(
                FormCreate(customer_phone=phone, form_type=FORM_TYPES[self.flow_kind], data=data)
            )
            await self._record_store.create_event(
                EventCreate(
                    customer_phone=phone,
                    type=f"form_submitted_{FORM_TYPES[self.flow_kind]}",
                    meta={"flowType": str(self.flow_kind)},
                )
            )
        except ValidationError as exc:
            logger.info(
                "flow_validation_failed",
                extra={"flow_kind": str(self.flow_kind), "error_count": exc.error_count()},
            )
            return _error(400, "Validation failed", details=_validation_details(exc))
        except Exception as exc:
            logger.error(
                "flow_processing_failed",
                extra={"flow_kind": str(self.flow_kind), "error": str(exc), "phone": mask_phone(phone)},
            )
            return _error(500, f"Failed to process {self.flow_kind} flow")

        logger.info(
            "flow_submission_persisted",
            extra={"flow_kind": str(self.flow_kind), "record_id": record_id, "phone": mask_phone(phone)},
        )
        return FlowExchangeResult(
            200,
            {
                "version": FLOW_API_VERSION,
                "screen": SUCCESS_SCREEN,
                "data": {"extension_message_response": {"params": {"flow_token": flow_token}}},
            },
        )

    async def _persist_survey(self, phone: str, data: dict[str, Any]) -> str:
        record = LeadCreate(
            customer_phone=phone,
            customer_name=_text(data, "name", "full_name"),
            address=_text(data, "address"),
            village=_text(data, "village"),
            interested_in=_text(data, "interested_in"),
            avg_bill=_integer(data.get("avg_bill")),
            phase=_text(data, "phase"),
            roof_type=_text(data, "roof_type"),
            preferred_survey_date=_text(data, "preferred_date"),
            preferred_survey_time=_text(data, "preferred_time"),
            notes=_text(data, "notes"),
        )
        return await self._record_store.create_lead(record)

    async def _persist_price(self, phone: str, data: dict[str, Any]) -> str:
        record = PriceEstimateCreate(
            customer_phone=phone,
            customer_name=_text(data, "name", "full_name"),
            address=_text(data, "address"),
            village=_text(data, "village"),
            avg_bill=_integer(data.get("avg_bill")),
            monthly_units=_integer(data.get("monthly_units")),
            phase=_text(data, "phase"),
            roof_type=_text(data, "roof_type"),
            notes=_text(data, "notes"),
        )
        return await self._record_store.create_price_estimate(record)

    async def _persist_service(self, phone: str, data: dict[str, Any]) -> str:
        record = ServiceRequestCreate(
            customer_phone=phone,
            customer_name=_text(data, "name", "full_name"),
            address=_text(data, "address"),
            customer_village=_text(data, "village"),
            issue_type=_text(data, "issue_type"),
            description=_text(data, "description"),
            urgency=_text(data, "urgency"),
            preferred_date=_text(data, "preferred_date"),
            preferred_time=_text(data, "preferred_time"),
        )
        return await self._record_store.create_service_request(record)

    async def _persist_callback(self, phone: str, data: dict[str, Any]) -> str:
        record = CallbackRequestCreate(
            customer_phone=phone,
            customer_name=_text(data, "name", "full_name"),
            best_time=_text(data, "best_time"),
            topic=_text(data, "topic"),
            notes=_text(data, "notes"),
            source="flow_request",
        )
        return await self._record_store.create_callback_request(record)


def create_flow_handlers(record_store: RecordStoreProtocol) -> dict[FlowKind, FlowDataExchangeHandler]:
    """Um handler por Flow com formulário."""
    return {kind: FlowDataExchangeHandler(kind, record_store) for kind in FORM_SCREENS}
