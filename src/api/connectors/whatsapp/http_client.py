"""Cliente HTTP especializado para WhatsApp/Meta Graph API.

Estende HttpClient com:
- Authorization Bearer (token validado antes do uso)
- Interpretação do objeto `error` da Meta (permanente vs transitório)
- Logging sem token e sem número de telefone
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from api.connectors.whatsapp.http_base import HttpClient, HttpClientConfig, HttpError
from api.connectors.whatsapp.meta_errors import WhatsAppApiError, parse_meta_error
from api.connectors.whatsapp.meta_logging import log_meta_error, log_success

if TYPE_CHECKING:
    import httpx

    from config.settings import WhatsAppSettings

logger: logging.Logger = logging.getLogger(__name__)


class WhatsAppApiRequestError(HttpError):
    """Falha definitiva de chamada à Graph API (mensagem da Meta preservada)."""

    def __init__(self, meta_error: WhatsAppApiError, status_code: int | None) -> None:
        super().__init__(
            meta_error.error_message,
            status_code=status_code,
            is_retryable=not meta_error.is_permanent,
        )
        self.meta_error = meta_error


class WhatsAppHttpClient(HttpClient):
    """Cliente HTTP para /{phone_number_id}/messages."""

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        phone_number_id: str | None = None,
    ) -> None:
        super().__init__(config)
        self.phone_number_id = phone_number_id

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Envia mensagem via WhatsApp API.

        Args:
            endpoint: URL do endpoint (ex: .../messages)
            access_token: Bearer token para autenticação
            payload: Payload JSON da mensagem

        Returns:
            Response JSON da Meta

        Raises:
            ValueError: Se access_token está vazio
            HttpError: Se erro HTTP ou erro reportado pela Meta
        """
        if not access_token or not access_token.strip():
            logger.error("whatsapp_access_token_missing")
            raise ValueError(
                "access_token é obrigatório para envio de mensagens. "
                "Verifique se WHATSAPP_ACCESS_TOKEN está configurado."
            )

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }
        response = await self.post(endpoint, json=payload, headers=headers)
        return self._process_response(response)

    def _process_response(self, response: httpx.Response) -> dict[str, Any]:
        try:
            response_data = response.json()
        except json.JSONDecodeError as exc:
            logger.error("whatsapp_invalid_response_json", extra={"status_code": response.status_code})
            raise HttpError("invalid_response_json", status_code=response.status_code) from exc

        meta_error = parse_meta_error(response_data)
        if meta_error:
            log_meta_error(meta_error, "send_message")
            raise WhatsAppApiRequestError(meta_error, response.status_code)

        if response.status_code >= 400:
            raise HttpError("http_error_status", status_code=response.status_code)

        log_success("send_message", response.status_code, extract_message_id(response_data))
        return response_data


def extract_message_id(response_data: dict[str, Any]) -> str | None:
    """ID da mensagem aceita (messages[0].id), se presente."""
    messages = response_data.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], dict):
        message_id = messages[0].get("id")
        return str(message_id) if message_id else None
    return None


def create_whatsapp_http_client(
    settings: WhatsAppSettings | None = None,
) -> WhatsAppHttpClient:
    """Factory para criar cliente WhatsApp com config das settings.

    Args:
        settings: WhatsAppSettings opcional. Se None, carrega do ambiente.
    """
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    config = HttpClientConfig(
        timeout_seconds=whatsapp.request_timeout_seconds,
        max_retries=whatsapp.max_retries,
    )
    return WhatsAppHttpClient(config=config, phone_number_id=whatsapp.phone_number_id)
