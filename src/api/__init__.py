"""API — camada de borda do canal WhatsApp.

Responsabilidades:
- Receber webhooks e requisições de data exchange dos Flows
- Validar assinaturas e payloads
- Normalizar dados para modelos internos
- Construir payloads para a Graph API

Subpastas:
- connectors/: adapters HTTP da Graph API e do webhook
- normalizers/: conversão de payloads externos → IncomingMessage
- payload_builders/: construção de payloads para a Graph API
- routes/: endpoints HTTP (webhook, Flows, chat, templates, health)

NÃO PODE conter: FSM, regras de conversa, orquestração de use cases.
"""
