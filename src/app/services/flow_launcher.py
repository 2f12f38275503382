"""Disparo de WhatsApp Flows criptografados a partir do menu.

Resolve o Flow ID por tipo e idioma (hindi sem ID próprio usa o ID em
inglês), gera o flow token e envia a mensagem de Flow pelo gateway.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.constants.whatsapp import FlowKind
from app.protocols.models import SendResult
from app.services.flow_token import encode_flow_token
from config.logging import mask_phone
from fsm import DEFAULT_LANGUAGE, Language

if TYPE_CHECKING:
    from app.protocols.messaging import MessagingGatewayProtocol
    from config.settings import WhatsAppSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FlowCopy:
    """Texto da mensagem que abre o Flow (CTA limitado a 20 caracteres)."""

    body_text: str
    button_text: str
    header_text: str | None = None


FLOW_COPY: dict[FlowKind, dict[Language, FlowCopy]] = {
    FlowKind.SURVEY: {
        Language.EN: FlowCopy(
            "Book a free site survey. Our engineer will visit and check your roof.",
            "Book Survey",
            "Free Site Survey",
        ),
        Language.HI: FlowCopy(
            "मुफ़्त साइट सर्वे बुक करें। हमारे इंजीनियर आकर आपकी छत की जाँच करेंगे।",
            "सर्वे बुक करें",
            "मुफ़्त साइट सर्वे",
        ),
    },
    FlowKind.CALLBACK: {
        Language.EN: FlowCopy("Tell us when to call you back.", "Request Callback"),
        Language.HI: FlowCopy("हमें बताइए कि आपको कब कॉल करें।", "कॉलबैक चाहिए"),
    },
    FlowKind.TRUST: {
        Language.EN: FlowCopy("See why families trust Sunshine Power.", "Why Sunshine"),
        Language.HI: FlowCopy("जानिए परिवार सनशाइन पावर पर क्यों भरोसा करते हैं।", "क्यों सनशाइन"),
    },
    FlowKind.ELIGIBILITY: {
        Language.EN: FlowCopy("Check if you qualify for the solar subsidy.", "Check Eligibility"),
        Language.HI: FlowCopy("देखिए क्या आप सोलर सब्सिडी के पात्र हैं।", "पात्रता जाँचें"),
    },
    FlowKind.PRICE: {
        Language.EN: FlowCopy("Get a price estimate for your rooftop solar.", "Get Estimate"),
        Language.HI: FlowCopy("अपने रूफटॉप सोलर का मूल्य अनुमान पाएँ।", "अनुमान पाएँ"),
    },
    FlowKind.SERVICE: {
        Language.EN: FlowCopy("Raise a service request for your solar system.", "Request Service"),
        Language.HI: FlowCopy("अपने सोलर सिस्टम के लिए सेवा अनुरोध दर्ज करें।", "सेवा अनुरोध"),
    },
}


def get_flow_copy(flow_kind: FlowKind, language: Language) -> FlowCopy:
    by_language = FLOW_COPY[flow_kind]
    return by_language.get(language) or by_language[DEFAULT_LANGUAGE]


def missing_flow_copy() -> list[FlowKind]:
    """FlowKinds sem texto em inglês (checagem de startup)."""
    return [kind for kind in FlowKind if DEFAULT_LANGUAGE not in FLOW_COPY.get(kind, {})]


class FlowLauncher:
    """Envia a mensagem de Flow para um tipo e idioma."""

    def __init__(
        self,
        gateway: MessagingGatewayProtocol,
        settings: WhatsAppSettings,
    ) -> None:
        self._gateway = gateway
        self._settings = settings

    async def launch(self, phone: str, flow_kind: FlowKind, language: Language) -> SendResult:
        flow_id = self._settings.get_flow_id(flow_kind, language)
        if not flow_id:
            logger.warning(
                "flow_id_not_configured",
                extra={"flow_kind": str(flow_kind), "language": str(language)},
            )
            return SendResult(success=False, error=f"Flow ID not configured for {flow_kind}")

        copy = get_flow_copy(flow_kind, language)
        result = await self._gateway.send_flow(
            phone,
            flow_id=flow_id,
            body_text=copy.body_text,
            button_text=copy.button_text,
            flow_token=encode_flow_token(phone, flow_kind, language),
            header_text=copy.header_text,
        )
        logger.info(
            "flow_launched" if result.success else "flow_launch_failed",
            extra={
                "flow_kind": str(flow_kind),
                "language": str(language),
                "phone": mask_phone(phone),
                "error": result.error,
            },
        )
        return result
