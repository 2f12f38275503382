"""Factory de wiring para WhatsApp (bootstrap)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.bootstrap.whatsapp_adapters import GraphApiMessagingGateway, GraphApiNormalizer
from app.services.flow_launcher import FlowLauncher
from config.settings import get_whatsapp_settings

if TYPE_CHECKING:
    from app.protocols.messaging import MessagingGatewayProtocol
    from config.settings import WhatsAppSettings


def create_messaging_gateway(settings: WhatsAppSettings | None = None) -> GraphApiMessagingGateway:
    """Cria gateway de envio Graph API."""
    return GraphApiMessagingGateway(settings=settings or get_whatsapp_settings())


def create_whatsapp_normalizer() -> GraphApiNormalizer:
    """Cria normalizador inbound Graph API."""
    return GraphApiNormalizer()


def create_flow_launcher(
    gateway: MessagingGatewayProtocol,
    settings: WhatsAppSettings | None = None,
) -> FlowLauncher:
    """Cria o disparador de Flows com os Flow IDs do ambiente."""
    return FlowLauncher(gateway, settings or get_whatsapp_settings())
