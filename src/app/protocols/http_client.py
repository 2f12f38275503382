"""Protocolo HTTP usado pelo gateway WhatsApp (isola a camada api)."""

from __future__ import annotations

from typing import Any, Protocol


class WhatsAppHttpClientProtocol(Protocol):
    """POST autenticado na Graph API; levanta HttpError em falha definitiva."""

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]: ...
