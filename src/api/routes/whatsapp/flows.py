"""Endpoint de data-exchange para WhatsApp Flows.

POST /flows/{survey|price|service|callback}

- Envelope criptografado: descriptografa, delega ao handler do Flow e
  devolve a resposta criptografada como text/plain base64.
- Payload em texto puro com `action` (health check da Meta, testes
  locais): resposta JSON sem criptografia.
- Erros de negócio e de criptografia sempre voltam como JSON.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from app.bootstrap import get_flow_handlers
from app.constants.whatsapp import FlowKind
from app.infra.crypto import (
    FlowCryptoError,
    FlowKeyMismatchError,
    decrypt_flow_request,
    encrypt_flow_response,
    validate_flow_signature,
)
from config.settings import get_whatsapp_settings

logger = logging.getLogger(__name__)

router = APIRouter()

ENVELOPE_FIELDS = ("encrypted_flow_data", "encrypted_aes_key", "initial_vector")


@router.post("/{flow_kind}", response_model=None)
async def handle_flow_endpoint(flow_kind: str, request: Request) -> Response:
    """Recebe a requisição de data exchange de um Flow."""
    handler = _resolve_handler(flow_kind)
    if handler is None:
        return JSONResponse({"error": "Unknown flow"}, status_code=404)

    settings = get_whatsapp_settings()
    raw_body = await request.body()

    if settings.app_secret:
        signature = request.headers.get("x-hub-signature-256", "")
        if not validate_flow_signature(raw_body, signature, settings.app_secret.encode("utf-8")):
            logger.warning(
                "flow_signature_invalid",
                extra={"component": "flow_endpoint", "flow_kind": flow_kind},
            )
            return JSONResponse({"error": "Signature verification failed"}, status_code=401)

    body = _parse_body(raw_body)
    if body is None:
        return JSONResponse({"error": "Malformed request"}, status_code=400)

    envelope = _extract_envelope(body)
    if envelope is None:
        if "action" not in body:
            return JSONResponse({"error": "Malformed request"}, status_code=400)
        result = await handler.handle(body)
        return JSONResponse(result.body, status_code=result.status_code)

    if not settings.flow_private_key:
        logger.error(
            "flow_endpoint_misconfigured",
            extra={"component": "flow_endpoint", "missing": "flow_private_key"},
        )
        return JSONResponse({"error": "Flow endpoint misconfigured"}, status_code=500)

    try:
        decrypted = decrypt_flow_request(
            encrypted_flow_data_b64=envelope["encrypted_flow_data"],
            encrypted_aes_key_b64=envelope["encrypted_aes_key"],
            initial_vector_b64=envelope["initial_vector"],
            private_key_pem=settings.flow_private_key,
            private_key_passphrase=settings.flow_private_key_passphrase or None,
        )
    except FlowKeyMismatchError as exc:
        logger.error(
            "flow_key_mismatch",
            extra={"component": "flow_endpoint", "flow_kind": flow_kind, "error": str(exc)},
        )
        return JSONResponse({"error": "Failed to decrypt request"}, status_code=421)
    except FlowCryptoError as exc:
        logger.error(
            "flow_decryption_failed",
            extra={"component": "flow_endpoint", "flow_kind": flow_kind, "error": str(exc)},
        )
        return JSONResponse({"error": "Failed to decrypt request"}, status_code=500)

    result = await handler.handle(decrypted.payload)
    if not result.ok:
        return JSONResponse(result.body, status_code=result.status_code)

    try:
        encrypted_response = encrypt_flow_response(
            response=result.body,
            aes_key=decrypted.aes_key,
            iv=decrypted.iv,
        )
    except FlowCryptoError as exc:
        logger.error(
            "flow_encryption_failed",
            extra={"component": "flow_endpoint", "flow_kind": flow_kind, "error": str(exc)},
        )
        return JSONResponse({"error": "Failed to encrypt response"}, status_code=500)
    return PlainTextResponse(content=encrypted_response, status_code=200)


def _resolve_handler(flow_kind: str) -> Any | None:
    try:
        kind = FlowKind(flow_kind)
    except ValueError:
        return None
    return get_flow_handlers().get(kind)


def _parse_body(raw_body: bytes) -> dict[str, Any] | None:
    try:
        payload = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def _extract_envelope(body: dict[str, Any]) -> dict[str, str] | None:
    if not any(field in body for field in ENVELOPE_FIELDS):
        return None
    # Campo ausente vira string vazia e falha na descriptografia (500)
    return {field: str(body.get(field) or "") for field in ENVELOPE_FIELDS}
