"""Visões tipadas das respostas de cada cadeia de texto.

Constroem, a partir do ConversationContext, os campos usados para
materializar os registros de conclusão.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any

from fsm import Step

if TYPE_CHECKING:
    from app.domain.conversation import ConversationContext


@dataclass(frozen=True, slots=True)
class SurveyAnswers:
    name: str | None
    mobile: str | None
    address: str | None
    village: str | None
    date: str | None
    time: str | None

    @classmethod
    def from_context(cls, context: ConversationContext) -> SurveyAnswers:
        return cls(
            name=context.value_for(Step.SURVEY_NAME),
            mobile=context.value_for(Step.SURVEY_MOBILE),
            address=context.value_for(Step.SURVEY_ADDRESS),
            village=context.value_for(Step.SURVEY_VILLAGE),
            date=context.value_for(Step.SURVEY_DATE),
            time=context.value_for(Step.SURVEY_TIME),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class CallbackAnswers:
    name: str | None
    mobile: str | None
    time: str | None

    @classmethod
    def from_context(cls, context: ConversationContext) -> CallbackAnswers:
        return cls(
            name=context.value_for(Step.CALLBACK_NAME),
            mobile=context.value_for(Step.CALLBACK_MOBILE),
            time=context.value_for(Step.CALLBACK_TIME),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ServiceAnswers:
    name: str | None
    mobile: str | None
    address: str | None
    description: str | None

    @classmethod
    def from_context(cls, context: ConversationContext) -> ServiceAnswers:
        return cls(
            name=context.value_for(Step.SERVICE_NAME),
            mobile=context.value_for(Step.SERVICE_MOBILE),
            address=context.value_for(Step.SERVICE_ADDRESS),
            description=context.value_for(Step.SERVICE_DESCRIPTION),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class IssueAnswers:
    name: str | None
    mobile: str | None
    description: str | None

    @classmethod
    def from_context(cls, context: ConversationContext) -> IssueAnswers:
        return cls(
            name=context.value_for(Step.ISSUE_NAME),
            mobile=context.value_for(Step.ISSUE_MOBILE),
            description=context.value_for(Step.ISSUE_DESCRIPTION),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
