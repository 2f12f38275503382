"""Endpoints de webhook do WhatsApp.

Endpoints:
- GET /webhook/whatsapp: verificação de webhook (Meta challenge)
- POST /webhook/whatsapp: recebimento de eventos inbound

Fluxo:
1. GET: Meta envia challenge, respondemos com hub.challenge
2. POST: Meta envia eventos, validamos assinatura, processamos

Segurança:
- Validação HMAC obrigatória em POST (exceto em dev sem secret)
- Falhas de processamento não viram 5xx (evita retry em massa da Meta);
  reentregas são absorvidas pela idempotência do motor
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request, Response, status

from api.connectors.whatsapp.webhook import (
    InvalidJsonError,
    InvalidSignatureError,
    PayloadTooLargeError,
    WebhookChallengeError,
    read_webhook_delivery,
    verify_webhook_challenge,
)
from api.normalizers.whatsapp import extract_status_updates
from app.bootstrap import get_inbound_use_case
from app.observability import get_correlation_id
from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def verify_webhook(request: Request) -> Response:
    """Verificação de webhook — responde ao challenge da Meta.

    Query params esperados:
    - hub.mode: deve ser "subscribe"
    - hub.verify_token: deve corresponder ao configurado
    - hub.challenge: valor a retornar

    Returns:
        Texto do challenge ou erro 403.
    """
    settings = get_whatsapp_settings()
    hub_mode = request.query_params.get("hub.mode")

    try:
        challenge = verify_webhook_challenge(
            hub_mode=hub_mode,
            hub_verify_token=request.query_params.get("hub.verify_token"),
            hub_challenge=request.query_params.get("hub.challenge"),
            expected_token=settings.verify_token,
        )
    except WebhookChallengeError as exc:
        logger.warning(
            "webhook_verification_failed",
            extra={"channel": "whatsapp", "error": str(exc)},
        )
        return Response(
            content="Forbidden",
            media_type="text/plain",
            status_code=status.HTTP_403_FORBIDDEN,
        )

    logger.info("webhook_verified", extra={"channel": "whatsapp", "hub_mode": hub_mode})
    # Meta espera o challenge como texto puro
    return Response(content=challenge, media_type="text/plain", status_code=status.HTTP_200_OK)


@router.post("/", response_model=None)
async def receive_webhook(request: Request) -> Response | dict[str, Any]:
    """Recebimento de eventos inbound do WhatsApp.

    Valida tamanho, assinatura e JSON, registra status de entrega e passa as
    mensagens pelo motor de conversa antes de responder.
    """
    settings = get_whatsapp_settings()
    raw_body = await request.body()

    try:
        delivery = read_webhook_delivery(
            raw_body=raw_body,
            headers=dict(request.headers),
            secret=settings.app_secret or None,
        )
    except PayloadTooLargeError as exc:
        logger.warning(
            "webhook_payload_too_large",
            extra={"channel": "whatsapp", "error": exc.reason, "payload_size": len(raw_body)},
        )
        return Response(
            content="Payload Too Large",
            media_type="text/plain",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
    except InvalidSignatureError as exc:
        logger.warning(
            "webhook_signature_invalid",
            extra={"channel": "whatsapp", "error": exc.reason},
        )
        return Response(
            content="Unauthorized",
            media_type="text/plain",
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    except InvalidJsonError as exc:
        logger.warning(
            "webhook_json_invalid",
            extra={"channel": "whatsapp", "error": exc.reason},
        )
        return Response(
            content="Bad Request",
            media_type="text/plain",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    logger.info("webhook_received", extra={"channel": "whatsapp", **delivery.to_log_dict()})

    for update in extract_status_updates(delivery.payload):
        logger.info("whatsapp_status_update", extra={"channel": "whatsapp", **update})

    try:
        result = await get_inbound_use_case().execute(delivery.payload)
    except Exception as exc:
        logger.exception(
            "webhook_processing_failed",
            extra={"channel": "whatsapp", "error_type": type(exc).__name__},
        )
        return {"status": "received", "correlation_id": get_correlation_id()}

    logger.info("webhook_processed", extra={"channel": "whatsapp", **result.to_dict()})
    return {
        "status": "received",
        "correlation_id": get_correlation_id(),
        **result.to_dict(),
    }
