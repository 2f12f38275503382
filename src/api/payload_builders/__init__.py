"""Payload builders por canal — construção de payloads para APIs externas.

Estrutura:
- whatsapp/: WhatsApp Business API (texto, botões, lista, Flow)
"""

__all__: list[str] = []
