"""Consulta somente-leitura do catálogo de templates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from app.bootstrap import get_template_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/message-templates")
async def list_message_templates(
    flow_type: str | None = Query(default=None, alias="flowType"),
    language: str | None = Query(default=None),
    step_key: str | None = Query(default=None, alias="stepKey"),
) -> JSONResponse:
    """Filtra templates por flowType, language e stepKey (todos opcionais)."""
    try:
        templates = await get_template_store().query(
            flow_type=flow_type,
            language=language,
            step_key=step_key,
        )
    except Exception as exc:
        logger.error("template_query_failed", extra={"error": str(exc)})
        return JSONResponse({"error": "Failed to fetch message templates"}, status_code=500)

    ordered = sorted(templates, key=lambda template: template.key)
    return JSONResponse([template.to_dict() for template in ordered])
