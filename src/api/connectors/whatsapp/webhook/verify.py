"""Verificação do desafio de webhook (GET hub.challenge) exigida pela Meta."""

from __future__ import annotations

import hmac


class WebhookChallengeError(ValueError):
    """Erro de verificação do desafio do webhook."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str | None,
) -> str:
    """Valida o desafio e retorna o conteúdo a ecoar.

    Raises:
        WebhookChallengeError: missing_verify_token (servidor sem token)
            ou verification_failed (modo/token não conferem)
    """
    if not expected_token:
        raise WebhookChallengeError("missing_verify_token")

    token_ok = hmac.compare_digest((hub_verify_token or "").encode(), expected_token.encode())
    if hub_mode != "subscribe" or not token_ok:
        raise WebhookChallengeError("verification_failed")

    return hub_challenge or ""
