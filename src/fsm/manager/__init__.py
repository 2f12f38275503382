"""
Exports públicos do módulo fsm/manager.

Função de transição pura da conversa.
"""

from fsm.manager.machine import decide_transition

__all__ = ["decide_transition"]
