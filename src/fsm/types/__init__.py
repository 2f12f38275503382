"""
Exports públicos do módulo fsm/types.

Tipos e estruturas de dados para transições de passo.
"""

from fsm.types.transition import (
    Advance,
    InputKind,
    Restart,
    RestartReason,
    StepOption,
    TransitionInput,
    TransitionOutcome,
)

__all__ = [
    "Advance",
    "InputKind",
    "Restart",
    "RestartReason",
    "StepOption",
    "TransitionInput",
    "TransitionOutcome",
]
