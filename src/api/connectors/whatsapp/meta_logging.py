"""Helpers de logging para API Meta/WhatsApp (sem token, sem telefone)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta_errors import WhatsAppApiError

logger = logging.getLogger(__name__)


def log_meta_error(meta_error: WhatsAppApiError, operation: str) -> None:
    logger.warning(
        "meta_api_error",
        extra={
            "operation": operation,
            "error_type": meta_error.error_type,
            "error_code": meta_error.error_code,
            "error_subcode": meta_error.error_subcode,
            "is_permanent": meta_error.is_permanent,
            "fbtrace_id": meta_error.fbtrace_id,
        },
    )


def log_success(operation: str, status_code: int, message_id: str | None = None) -> None:
    logger.debug(
        "meta_api_success",
        extra={
            "operation": operation,
            "status_code": status_code,
            "message_id": message_id,
        },
    )
