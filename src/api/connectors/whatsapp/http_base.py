"""Cliente HTTP base (httpx) com timeout e retry exponencial.

Reenvia em 429, 5xx, timeout e erro de conexão; demais status voltam
ao chamador, que interpreta o corpo (ex: erro Meta em 400).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    transport permite injetar httpx.MockTransport em testes.
    """

    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 16.0
    default_headers: dict[str, str] = field(default_factory=dict)
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis (sem URL com token, sem corpo)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP para chamadas externas."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            transport=self._config.transport,
        )

    async def post(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST com retry.

        Raises:
            HttpError: Após esgotar tentativas em falha transitória.
        """
        merged_headers = {**self._config.default_headers, **(headers or {})}
        last_status: int | None = None

        for attempt in range(self._config.max_retries + 1):
            try:
                async with self._new_client() as client:
                    response = await client.post(url, json=json, headers=merged_headers)
            except (httpx.TimeoutException, httpx.ConnectError) as exc:
                if attempt >= self._config.max_retries:
                    raise HttpError("http_connection_error", is_retryable=True) from exc
                logger.warning(
                    "http_transient_failure",
                    extra={"attempt": attempt + 1, "error_type": type(exc).__name__},
                )
            else:
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    return response
                last_status = response.status_code
                if attempt >= self._config.max_retries:
                    raise HttpError(
                        "http_retry_exhausted",
                        status_code=last_status,
                        is_retryable=True,
                    )
                logger.warning(
                    "http_retryable_status",
                    extra={"attempt": attempt + 1, "status_code": last_status},
                )
            await _backoff_sleep(
                attempt,
                self._config.backoff_base_seconds,
                self._config.backoff_max_seconds,
            )

        raise HttpError("http_retry_exhausted", status_code=last_status, is_retryable=True)


async def _backoff_sleep(attempt: int, base: float, max_seconds: float) -> None:
    backoff = min((2**attempt) * base, max_seconds)
    logger.info("http_backoff", extra={"backoff_seconds": backoff})
    await asyncio.sleep(backoff)
