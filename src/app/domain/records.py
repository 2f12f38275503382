"""Registros de negócio criados por conclusões de conversa e Flows.

Esquemas de inserção validados com pydantic antes de irem ao
RecordStore. Um ValidationError aqui vira HTTP 400 na rota de Flow.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_INTEREST = "Solar Installation"
DEFAULT_URGENCY = "medium"

Urgency = Literal["low", "medium", "high"]


class _RecordCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    customer_phone: str = Field(..., min_length=1)


class _NamedRecordCreate(_RecordCreate):
    customer_name: str = Field(..., min_length=1, max_length=200)


class LeadCreate(_NamedRecordCreate):
    """Lead de instalação (survey via Flow ou chat)."""

    interested_in: str = DEFAULT_INTEREST
    address: str | None = None
    village: str | None = None
    avg_bill: int | None = Field(None, ge=0)
    phase: str | None = None
    roof_type: str | None = None
    preferred_survey_date: str | None = None
    preferred_survey_time: str | None = None
    notes: str | None = None

    @field_validator("interested_in", mode="before")
    @classmethod
    def _default_interest(cls, value: Any) -> Any:
        return value or DEFAULT_INTEREST


class PriceEstimateCreate(_NamedRecordCreate):
    address: str | None = None
    village: str | None = None
    avg_bill: int | None = Field(None, ge=0)
    monthly_units: int | None = Field(None, ge=0)
    phase: str | None = None
    roof_type: str | None = None
    notes: str | None = None


class ServiceRequestCreate(_NamedRecordCreate):
    issue_type: str = Field(..., min_length=1)
    address: str | None = None
    customer_village: str | None = None
    description: str | None = None
    urgency: Urgency = DEFAULT_URGENCY
    preferred_date: str | None = None
    preferred_time: str | None = None
    status: str = "pending"

    @field_validator("urgency", mode="before")
    @classmethod
    def _normalize_urgency(cls, value: Any) -> Any:
        if value is None or value == "":
            return DEFAULT_URGENCY
        return str(value).strip().lower()


class CallbackRequestCreate(_NamedRecordCreate):
    best_time: str | None = None
    topic: str | None = None
    notes: str | None = None
    source: Literal["flow_request", "chat"] = "flow_request"


class OtherIssueCreate(_NamedRecordCreate):
    description: str = Field(..., min_length=1)


class FormCreate(_RecordCreate):
    """Dump bruto dos campos submetidos."""

    form_type: str = Field(..., min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)


class EventCreate(_RecordCreate):
    """Evento de analytics/status (ex: form_submitted_site_survey)."""

    type: str = Field(..., min_length=1)
    meta: dict[str, Any] = Field(default_factory=dict)
