"""App — orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: motor de conversa e pipeline do webhook
- services/: Flows (launcher, data exchange, token) e registros de conclusão
- domain/: estado de conversa, templates e registros de negócio
- infra/: stores, criptografia dos Flows
- protocols/: contratos/interfaces
- observability/: correlation_id e métricas via logs
- constants/: constantes do canal WhatsApp

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
