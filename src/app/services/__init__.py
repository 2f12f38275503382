"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.completion_records import CompletionRecorder
from app.services.flow_data_exchange import (
    FlowDataExchangeHandler,
    FlowExchangeResult,
    create_flow_handlers,
)
from app.services.flow_launcher import FlowLauncher, get_flow_copy, missing_flow_copy
from app.services.flow_token import decode_flow_token, encode_flow_token, phone_from_flow_token

__all__ = [
    "CompletionRecorder",
    "FlowDataExchangeHandler",
    "FlowExchangeResult",
    "FlowLauncher",
    "create_flow_handlers",
    "decode_flow_token",
    "encode_flow_token",
    "get_flow_copy",
    "missing_flow_copy",
    "phone_from_flow_token",
]
