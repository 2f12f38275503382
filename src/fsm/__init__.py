"""
Módulo FSM — máquina de passos da conversa de campanha.

Este módulo implementa a transição determinística que governa
o passo atual de cada conversa.

Estrutura:
    - states/: Passos e idiomas (Step, Language, COMPLETION_STEPS)
    - transitions/: Cadeias de texto livre (TEXT_CHAINS)
    - rules/: Regras fixas dos menus de entrada
    - manager/: Função de transição (decide_transition)
    - types/: Tipos de dados (Advance, Restart, TransitionInput)
"""

from fsm.manager import decide_transition
from fsm.rules import (
    HELP_OPTION_ID,
    LANGUAGE_BUTTONS,
    WEBSITE_KEYWORDS,
    is_website_request,
    language_for_button,
)
from fsm.states import (
    CAMPAIGN_FLOW_TYPE,
    COMPLETION_STEPS,
    DEFAULT_LANGUAGE,
    INITIAL_STEP,
    Language,
    Step,
    is_completion_step,
    parse_language,
)
from fsm.transitions import (
    TEXT_CHAINS,
    TEXT_SUCCESSORS,
    TextChain,
    chain_for_step,
    get_text_successor,
    validate_text_chains,
)
from fsm.types import (
    Advance,
    InputKind,
    Restart,
    RestartReason,
    StepOption,
    TransitionInput,
    TransitionOutcome,
)

__all__ = [
    "CAMPAIGN_FLOW_TYPE",
    "COMPLETION_STEPS",
    "DEFAULT_LANGUAGE",
    "HELP_OPTION_ID",
    "INITIAL_STEP",
    "LANGUAGE_BUTTONS",
    "TEXT_CHAINS",
    "TEXT_SUCCESSORS",
    "WEBSITE_KEYWORDS",
    "Advance",
    "InputKind",
    "Language",
    "Restart",
    "RestartReason",
    "Step",
    "StepOption",
    "TextChain",
    "TransitionInput",
    "TransitionOutcome",
    "chain_for_step",
    "decide_transition",
    "get_text_successor",
    "is_completion_step",
    "is_website_request",
    "language_for_button",
    "parse_language",
    "validate_text_chains",
]
