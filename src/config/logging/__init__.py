"""Configuração de logging estruturado.

Re-exporta funções e classes para configuração de logging JSON.

Uso:
    from config.logging import configure_logging, get_logger, mask_phone

    # Na inicialização (bootstrap)
    configure_logging(level="INFO", service_name="sunshine_leads")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("flow_sent", extra={"phone": mask_phone(phone)})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import PHONE_FIELDS, CorrelationIdFilter, PhoneMaskingFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)
from config.logging.pii import mask_phone

__all__ = [
    "FIELD_RENAME_MAP",
    "PHONE_FIELDS",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "PhoneMaskingFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
    "mask_phone",
]
