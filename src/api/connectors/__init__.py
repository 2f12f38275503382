"""Connectors — adapters de borda para APIs externas.

Estrutura:
- whatsapp/: Graph API (envio), webhook e assinatura Meta
"""

__all__: list[str] = []
