"""Registros materializados quando a conversa entra em um step de conclusão.

Best effort: falhas de persistência são logadas e engolidas, a mensagem
de conclusão é enviada mesmo assim.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.domain.answers import CallbackAnswers, IssueAnswers, ServiceAnswers, SurveyAnswers
from app.domain.records import (
    CallbackRequestCreate,
    EventCreate,
    FormCreate,
    LeadCreate,
    OtherIssueCreate,
    ServiceRequestCreate,
)
from config.logging import mask_phone
from fsm import DEFAULT_LANGUAGE, Step

if TYPE_CHECKING:
    from app.domain.conversation import ConversationState
    from app.protocols.record_store import RecordStoreProtocol

logger = logging.getLogger(__name__)

CHAT_SERVICE_ISSUE_TYPE = "Service-Repair"
FORM_SUBMITTED_EVENT = "form_submitted"
WEBSITE_VISIT_EVENT = "website_visit_requested"

_FORM_TYPES: dict[str, str] = {
    Step.SURVEY_COMPLETE: "site_survey",
    Step.CALLBACK_COMPLETE: "callback",
    Step.SERVICE_COMPLETE: "service_request",
    Step.ISSUE_COMPLETE: "other_issue",
}


class CompletionRecorder:
    """Cria Lead/CallbackRequest/ServiceRequest/OtherIssue + Form + Event."""

    def __init__(self, record_store: RecordStoreProtocol) -> None:
        self._record_store = record_store

    async def record(self, step: str, state: ConversationState) -> bool:
        """Materializa os registros do step. Retorna False em falha (já logada)."""
        try:
            await self._record(step, state)
        except Exception as exc:
            logger.error(
                "completion_records_failed",
                extra={
                    "step": step,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                    "phone": mask_phone(state.customer_phone),
                },
            )
            return False
        logger.info("completion_records_created", extra={"step": step})
        return True

    async def _record(self, step: str, state: ConversationState) -> None:
        phone = state.customer_phone
        language = str(state.language or DEFAULT_LANGUAGE)

        if step == Step.WEBSITE_COMPLETE:
            await self._record_store.create_event(
                EventCreate(
                    customer_phone=phone,
                    type=WEBSITE_VISIT_EVENT,
                    meta={"language": language},
                )
            )
            return

        form_data: dict[str, Any]
        if step == Step.SURVEY_COMPLETE:
            survey = SurveyAnswers.from_context(state.context)
            form_data = survey.to_dict()
            await self._record_store.create_lead(
                LeadCreate(
                    customer_phone=phone,
                    customer_name=survey.name or state.customer_name or "",
                    address=survey.address,
                    village=survey.village,
                    preferred_survey_date=survey.date,
                    preferred_survey_time=survey.time,
                    notes=f"Lead from WhatsApp campaign. Language: {language}",
                )
            )
        elif step == Step.CALLBACK_COMPLETE:
            callback = CallbackAnswers.from_context(state.context)
            form_data = callback.to_dict()
            await self._record_store.create_callback_request(
                CallbackRequestCreate(
                    customer_phone=phone,
                    customer_name=callback.name or state.customer_name or "",
                    best_time=callback.time,
                    notes=_mobile_note(callback.mobile),
                    source="chat",
                )
            )
        elif step == Step.SERVICE_COMPLETE:
            service = ServiceAnswers.from_context(state.context)
            form_data = service.to_dict()
            await self._record_store.create_service_request(
                ServiceRequestCreate(
                    customer_phone=phone,
                    customer_name=service.name or state.customer_name or "",
                    issue_type=CHAT_SERVICE_ISSUE_TYPE,
                    address=service.address,
                    description=service.description,
                )
            )
        elif step == Step.ISSUE_COMPLETE:
            issue = IssueAnswers.from_context(state.context)
            form_data = issue.to_dict()
            await self._record_store.create_other_issue(
                OtherIssueCreate(
                    customer_phone=phone,
                    customer_name=issue.name or state.customer_name or "",
                    description=issue.description or "",
                )
            )
        else:
            raise ValueError(f"Step sem registro de conclusão: {step}")

        form_type = _FORM_TYPES[step]
        await self._record_store.create_form(
            FormCreate(customer_phone=phone, form_type=form_type, data=form_data)
        )
        await self._record_store.create_event(
            EventCreate(
                customer_phone=phone,
                type=FORM_SUBMITTED_EVENT,
                meta={"formType": form_type, "language": language, "source": "chat"},
            )
        )


def _mobile_note(mobile: str | None) -> str | None:
    return f"Alternate mobile: {mobile}" if mobile else None
