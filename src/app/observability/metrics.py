"""Registro de métricas via structured logging.

As métricas saem como logs estruturados (metric_type) e são agregadas
depois pelo coletor de logs.

Métricas suportadas:
- Latência: tempo de processamento por componente/operação
- Restart: counter de conversas reiniciadas com motivo
- Flow exchange: counter de trocas de dados de Flow por tipo/ação/status
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "conversation_engine")
        operation: Nome da operação (ex: "process_message")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_restart(reason: str, step: str | None = None) -> None:
    """Registra reinício de conversa (entrada inesperada ou template ausente)."""
    logger.info(
        "metric_conversation_restart",
        extra={
            "metric_type": "restart",
            "component": "conversation_engine",
            "reason": reason,
            "step": step,
        },
    )


def record_flow_exchange(flow_kind: str, action: str, status_code: int) -> None:
    """Registra uma troca de dados de Flow (PING/INIT/DATA_EXCHANGE)."""
    logger.info(
        "metric_flow_exchange",
        extra={
            "metric_type": "flow_exchange",
            "component": "flow_data_exchange",
            "flow_kind": flow_kind,
            "action": action,
            "status_code": status_code,
        },
    )
