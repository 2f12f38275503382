"""Settings específicas de WhatsApp.

Credenciais da Graph API, chave privada dos Flows e IDs de Flow por
tipo/idioma.

IDs de Flow vêm de variáveis WHATSAPP_FLOW_ID_<TIPO>[_HI]:
    WHATSAPP_FLOW_ID_SURVEY=123        -> flow_ids["survey"]
    WHATSAPP_FLOW_ID_SURVEY_HI=456     -> flow_ids["survey_hi"]
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

GRAPH_API_VERSION: str = "v24.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"

FLOW_ID_ENV_PREFIX = "WHATSAPP_FLOW_ID_"
HINDI_SUFFIX = "_hi"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        verify_token: Token para verificação de webhook (hub.verify_token)
        app_secret: Secret do app Meta para validação X-Hub-Signature-256
        access_token: Token de acesso à Graph API
        phone_number_id: ID do número de telefone no Meta Business
        business_account_id: ID da conta de negócios (WABA)
        api_version: Versão da Graph API (ex: v24.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout para requisições HTTP
        max_retries: Máximo de tentativas em caso de erro transitório
        flow_private_key: PEM da chave RSA privada dos Flows
        flow_private_key_passphrase: Passphrase da chave (opcional)
        flow_ids: IDs de Flow por tipo ("survey") e tipo hindi ("survey_hi")
    """

    verify_token: str = ""
    app_secret: str = ""
    access_token: str = ""
    phone_number_id: str = ""
    business_account_id: str = ""

    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL

    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    flow_private_key: str = ""
    flow_private_key_passphrase: str | None = None
    flow_ids: dict[str, str] = field(default_factory=dict)

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url}/{self.api_version}"

    def get_messages_endpoint(self, phone_number_id: str | None = None) -> str:
        """Retorna URL para envio de mensagens.

        Raises:
            ValueError: Se phone_number_id não informado e não configurado.
        """
        pid = phone_number_id or self.phone_number_id
        if not pid:
            raise ValueError("phone_number_id é obrigatório")
        return f"{self.api_endpoint}/{pid}/messages"

    def get_flow_id(self, flow_kind: str, language: str | None = None) -> str | None:
        """Resolve o ID do Flow; hindi sem ID próprio usa o ID em inglês."""
        kind = str(flow_kind).lower()
        if language == "hi":
            hindi_id = self.flow_ids.get(f"{kind}{HINDI_SUFFIX}")
            if hindi_id:
                return hindi_id
        return self.flow_ids.get(kind) or None

    def missing_flow_ids(self, flow_kinds: list[str]) -> list[str]:
        """Tipos de Flow sem ID em inglês configurado."""
        return [kind for kind in flow_kinds if not self.flow_ids.get(str(kind).lower())]

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.phone_number_id:
            errors.append("WHATSAPP_PHONE_NUMBER_ID não configurado")

        if not self.access_token:
            errors.append("WHATSAPP_ACCESS_TOKEN não configurado")

        if not self.verify_token:
            errors.append("WHATSAPP_VERIFY_TOKEN não configurado")

        if not self.flow_private_key:
            errors.append("WHATSAPP_FLOW_PRIVATE_KEY não configurado")

        if self.request_timeout_seconds <= 0:
            errors.append("WHATSAPP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("WHATSAPP_MAX_RETRIES deve ser >= 0")

        return errors


def _load_flow_ids(environ: dict[str, str] | None = None) -> dict[str, str]:
    source = os.environ if environ is None else environ
    flow_ids: dict[str, str] = {}
    for key, value in source.items():
        if key.startswith(FLOW_ID_ENV_PREFIX) and value.strip():
            flow_ids[key[len(FLOW_ID_ENV_PREFIX):].lower()] = value.strip()
    return flow_ids


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN", ""),
        app_secret=os.getenv("WHATSAPP_APP_SECRET", ""),
        access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
        phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
        business_account_id=os.getenv("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
        api_version=os.getenv("WHATSAPP_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("WHATSAPP_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("WHATSAPP_REQUEST_TIMEOUT_SECONDS", "30")
        ),
        max_retries=int(os.getenv("WHATSAPP_MAX_RETRIES", "3")),
        flow_private_key=os.getenv("WHATSAPP_FLOW_PRIVATE_KEY", ""),
        flow_private_key_passphrase=os.getenv("WHATSAPP_FLOW_PRIVATE_KEY_PASSPHRASE") or None,
        flow_ids=_load_flow_ids(),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
