"""Router do webhook WhatsApp (GET challenge, POST eventos)."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.whatsapp.webhook import router as webhook_router

router = APIRouter()

router.include_router(webhook_router)
