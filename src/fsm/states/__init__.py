"""
Exports públicos do módulo fsm/states.

Passos canônicos e idiomas da conversa de campanha.
"""

from fsm.states.steps import (
    CAMPAIGN_FLOW_TYPE,
    COMPLETION_STEPS,
    DEFAULT_LANGUAGE,
    INITIAL_STEP,
    Language,
    Step,
    is_completion_step,
    parse_language,
)

__all__ = [
    "CAMPAIGN_FLOW_TYPE",
    "COMPLETION_STEPS",
    "DEFAULT_LANGUAGE",
    "INITIAL_STEP",
    "Language",
    "Step",
    "is_completion_step",
    "parse_language",
]
