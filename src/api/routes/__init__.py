"""Rotas HTTP da API — adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhook, Flows, chat, templates, health)
- Validação inicial de request (headers, query params, corpo)
- Delegação para use_cases/services via app.bootstrap
- Respostas HTTP apropriadas

Estrutura:
- routes/whatsapp/: webhook e data exchange dos Flows
- routes/conversations/: API de chat
- routes/templates/: consulta do catálogo de templates
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
