"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, inicializa
dependências e conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_conversation_engine

    # Na inicialização do serviço
    initialize_app()

    # Obter dependências (singletons)
    engine = get_conversation_engine()
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.constants.whatsapp import FlowKind, missing_trigger_kinds
from app.observability import get_correlation_id
from app.services.flow_launcher import missing_flow_copy
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_conversation_settings,
    get_whatsapp_settings,
)
from fsm import validate_text_chains

# Nome do serviço para logs e métricas
SERVICE_NAME = "sunshine_leads"

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação com todas as configurações necessárias.

    Deve ser chamada uma vez no início do serviço.
    Configura logging estruturado JSON com correlation_id.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=base.service_name or SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def collect_settings_errors() -> list[str]:
    """Erros de configuração e de tabelas estáticas (vazio = OK)."""
    base = get_base_settings()
    whatsapp = get_whatsapp_settings()
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    conversation_errors = get_conversation_settings().validate(base)
    errors.extend(f"conversation: {error}" for error in conversation_errors)
    errors.extend(f"whatsapp: {error}" for error in whatsapp.validate())

    missing_ids = whatsapp.missing_flow_ids([str(kind) for kind in FlowKind])
    errors.extend(
        f"whatsapp: WHATSAPP_FLOW_ID_{kind.upper()} não configurado" for kind in missing_ids
    )

    errors.extend(f"flows: FlowKind sem botão de disparo: {kind}" for kind in missing_trigger_kinds())
    errors.extend(f"flows: FlowKind sem texto de disparo: {kind}" for kind in missing_flow_copy())
    errors.extend(f"fsm: {error}" for error in validate_text_chains())
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_conversation_store():
    """Obtém store de conversa (singleton)."""
    from app.bootstrap.dependencies_stores import create_conversation_store
    return create_conversation_store()


@lru_cache(maxsize=1)
def get_template_store():
    """Obtém store de templates semeado do catálogo (singleton)."""
    from app.bootstrap.dependencies_stores import create_template_store
    return create_template_store()


@lru_cache(maxsize=1)
def get_record_store():
    """Obtém store de registros de negócio (singleton)."""
    from app.bootstrap.dependencies_stores import create_record_store
    return create_record_store()


@lru_cache(maxsize=1)
def get_messaging_gateway():
    """Obtém gateway de envio WhatsApp (singleton)."""
    from app.bootstrap.whatsapp_factory import create_messaging_gateway
    return create_messaging_gateway()


@lru_cache(maxsize=1)
def get_conversation_engine():
    """Obtém o motor de conversa (singleton)."""
    from app.bootstrap.dependencies import create_conversation_engine
    from app.bootstrap.whatsapp_factory import create_flow_launcher

    return create_conversation_engine(
        conversation_store=get_conversation_store(),
        template_store=get_template_store(),
        record_store=get_record_store(),
        flow_launcher=create_flow_launcher(get_messaging_gateway()),
    )


@lru_cache(maxsize=1)
def get_flow_handlers():
    """Obtém handlers de data exchange por FlowKind (singleton)."""
    from app.bootstrap.dependencies import create_flow_data_handlers
    return create_flow_data_handlers(get_record_store())


@lru_cache(maxsize=1)
def get_inbound_use_case():
    """Obtém o pipeline webhook → motor → gateway (singleton)."""
    from app.bootstrap.dependencies import create_inbound_use_case
    from app.bootstrap.whatsapp_factory import create_whatsapp_normalizer

    return create_inbound_use_case(
        normalizer=create_whatsapp_normalizer(),
        engine=get_conversation_engine(),
        gateway=get_messaging_gateway(),
    )
