"""Agregador de rotas — registra todos os routers.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.conversations.router import router as conversations_router
from api.routes.health.router import router as health_router
from api.routes.templates.router import router as templates_router
from api.routes.whatsapp.flows import router as flows_router
from api.routes.whatsapp.router import router as whatsapp_router


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    # WhatsApp: webhook e data exchange dos Flows
    api_router.include_router(whatsapp_router, prefix="/webhook/whatsapp", tags=["whatsapp"])
    api_router.include_router(flows_router, prefix="/flows", tags=["flows"])

    # API de chat e catálogo
    api_router.include_router(
        conversations_router,
        prefix="/api/conversations",
        tags=["conversations"],
    )
    api_router.include_router(templates_router, prefix="/api", tags=["templates"])

    return api_router
